"""Rule model, extractor instructions and the first-match engine."""

from __future__ import annotations

import enum
import functools
import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Union

from loguru import logger


class Key(str, enum.Enum):
    """Field identifiers shared by every category table."""

    MODEL = "model"
    NAME = "name"
    VENDOR = "vendor"
    TYPE = "type"
    VERSION = "version"
    ARCH = "arch"


FieldMap = dict[Key, str]
Groups = Sequence[Union[str, None]]


@functools.lru_cache(maxsize=None)
def _compile_rewrite(pattern: str) -> re.Pattern[str] | None:
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error as e:
        logger.debug("ignoring malformed rewrite pattern {!r}: {}", pattern, e)
        return None


@dataclass(frozen=True)
class Capture:
    """Store the trimmed group text under ``key``."""

    key: Key

    def apply(self, fields: FieldMap, text: str | None, /) -> None:
        if text is None:
            return
        value = text.strip()
        if value:
            fields[self.key] = value


@dataclass(frozen=True)
class Fixed:
    """Store a constant, whatever the group holds."""

    key: Key
    value: str

    def apply(self, fields: FieldMap, text: str | None, /) -> None:
        fields[self.key] = self.value


@dataclass(frozen=True)
class Rewrite:
    """Run ``find`` -> ``replace`` over the group text, then lowercase it.

    ``replace`` is an :func:`re.sub` template, so ``\\g<1>`` refers to the
    groups of ``find`` itself. When ``find`` cannot be compiled or the
    template cannot be expanded the group text is stored untouched.
    """

    key: Key
    find: str
    replace: str

    def apply(self, fields: FieldMap, text: str | None, /) -> None:
        if text is None:
            return
        pattern = _compile_rewrite(self.find)
        if pattern is None:
            if text:
                fields[self.key] = text
            return
        try:
            value = pattern.sub(self.replace, text)
        except (re.error, IndexError) as e:
            # IndexError: unknown group name in the template before 3.12
            logger.debug("rewrite {!r} -> {!r} failed: {}", self.find, self.replace, e)
            if text:
                fields[self.key] = text
            return
        value = value.lower().strip()
        if value:
            fields[self.key] = value


@dataclass(frozen=True)
class Remap:
    """Translate the group text through an ordered lookup table.

    ``mapping`` goes from canonical value to the substrings identifying it;
    the first entry with a substring contained in the (uppercased) text
    wins. Unknown non-empty text is stored as captured.
    """

    key: Key
    mapping: Mapping[str, Sequence[str]]

    def apply(self, fields: FieldMap, text: str | None, /) -> None:
        if not text:
            return
        value = text.upper()
        for canonical, candidates in self.mapping.items():
            if any(candidate.upper() in value for candidate in candidates):
                fields[self.key] = canonical.strip()
                return
        fields[self.key] = text

    def __hash__(self) -> int:
        return hash((self.key, tuple((k, tuple(v)) for k, v in self.mapping.items())))


Extractor = Union[Capture, Fixed, Rewrite, Remap]


@dataclass(frozen=True)
class Rule:
    """Alternative patterns sharing one positional extractor list."""

    patterns: tuple[re.Pattern[str], ...]
    extractors: tuple[Extractor, ...]

    @classmethod
    def compile(cls, patterns: Iterable[str], extractors: Iterable[Extractor]) -> Rule:
        compiled = tuple(re.compile(p, re.IGNORECASE) for p in patterns)
        if not compiled:
            raise ValueError("a rule needs at least one pattern")
        return cls(compiled, tuple(extractors))

    def search(self, s: str, /) -> Groups | None:
        """Groups of the first alternative matching ``s``, if any."""
        for pattern in self.patterns:
            m = pattern.search(s)
            if m:
                return m.groups()
        return None

    def extract(self, groups: Groups, /) -> FieldMap:
        fields: FieldMap = {}
        for idx, extractor in enumerate(self.extractors):
            extractor.apply(fields, groups[idx] if idx < len(groups) else None)
        return fields


def match(s: str, table: Iterable[Rule], /) -> FieldMap | None:
    """Fields produced by the first rule of ``table`` matching ``s``.

    Rules are tried in order; within a rule only the first matching
    alternative is used. A rule whose extractors yield nothing does not
    stop the scan.
    """
    for rule in table:
        groups = rule.search(s)
        if groups is None:
            continue
        fields = rule.extract(groups)
        if fields:
            return fields
    return None
