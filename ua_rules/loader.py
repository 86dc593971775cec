"""Build :class:`RuleSet` objects from YAML rule documents.

The bundled ``regexes.yaml`` holds the shipped tables; :func:`load_rules`
accepts any document with the same layout::

    remaps:
      <name>: {<canonical>: [<substring>, ...]}
    browser_parsers | cpu_parsers | device_parsers | engine_parsers | os_parsers:
      - regexes: [<pattern>, ...]
        extractors: [<extractor>, ...]

where an extractor is either a bare key (capture), or a mapping with
``key`` and one of ``value`` (fixed), ``find``/``replace`` (rewrite) or
``remap`` (name of a ``remaps`` entry).
"""

from __future__ import annotations

import functools
import os
import pathlib
import re
import types
from collections.abc import Mapping
from importlib import resources
from typing import Any

from loguru import logger
from yaml import YAMLError

try:
    from yaml import CSafeLoader as SafeLoader, load
except ImportError:
    from yaml import SafeLoader, load  # type: ignore

from .categories import (
    BrowserExtractor,
    CPUExtractor,
    DeviceExtractor,
    EngineExtractor,
    OSExtractor,
    RuleSet,
)
from .core import Capture, Extractor, Fixed, Key, Remap, Rewrite, Rule

TABLES = {
    "browser": ("browser_parsers", BrowserExtractor),
    "cpu": ("cpu_parsers", CPUExtractor),
    "device": ("device_parsers", DeviceExtractor),
    "engine": ("engine_parsers", EngineExtractor),
    "os": ("os_parsers", OSExtractor),
}

Remaps = Mapping[str, Mapping[str, tuple[str, ...]]]


class RuleError(ValueError):
    """A rule document is unreadable or structurally invalid."""


def load_rules(path: str | os.PathLike[str] | None = None) -> RuleSet:
    """Load and compile a rule document, the bundled one by default."""
    if path is None:
        source: Any = resources.files(__package__) / "regexes.yaml"
    else:
        source = pathlib.Path(path)

    try:
        with source.open("rb") as f:
            contents = load(f, Loader=SafeLoader)
    except OSError as e:
        raise RuleError(f"cannot read rule document {source}: {e}") from e
    except YAMLError as e:
        raise RuleError(f"invalid rule document {source}: {e}") from e

    rules = build_rules(contents)
    logger.debug(
        "loaded rules from {}: {}",
        source,
        ", ".join(f"{name}={len(getattr(rules, name))}" for name in TABLES),
    )
    return rules


@functools.lru_cache(maxsize=None)
def default_rules() -> RuleSet:
    """The shipped tables, compiled on first use and shared afterwards."""
    return load_rules()


def build_rules(contents: Any) -> RuleSet:
    if not isinstance(contents, Mapping):
        raise RuleError("rule document must be a mapping")

    remaps = contents.get("remaps")
    remaps = _build_remaps({} if remaps is None else remaps)
    tables = {}
    for name, (section, cls) in TABLES.items():
        entries = contents.get(section)
        if not isinstance(entries, list):
            raise RuleError(f"{section}: expected a list of rules")
        tables[name] = cls(
            _build_rule(f"{section}[{idx}]", entry, remaps)
            for idx, entry in enumerate(entries)
        )
    return RuleSet(**tables)


def _build_remaps(contents: Any) -> Remaps:
    if not isinstance(contents, Mapping):
        raise RuleError("remaps: expected a mapping")

    remaps = {}
    for name, table in contents.items():
        if not isinstance(table, Mapping):
            raise RuleError(f"remaps.{name}: expected a mapping")
        entries = {}
        for canonical, candidates in table.items():
            if isinstance(candidates, str):
                candidates = [candidates]
            if (
                not isinstance(canonical, str)
                or not isinstance(candidates, list)
                or not all(isinstance(c, str) for c in candidates)
            ):
                raise RuleError(f"remaps.{name}.{canonical}: expected a list of strings")
            entries[canonical] = tuple(candidates)
        remaps[str(name)] = types.MappingProxyType(entries)
    return remaps


def _build_rule(where: str, entry: Any, remaps: Remaps) -> Rule:
    if not isinstance(entry, Mapping):
        raise RuleError(f"{where}: expected a mapping")

    patterns = entry.get("regexes")
    if not isinstance(patterns, list) or not patterns:
        raise RuleError(f"{where}: 'regexes' must be a non-empty list")
    extractors = entry.get("extractors")
    if not isinstance(extractors, list):
        raise RuleError(f"{where}: 'extractors' must be a list")

    try:
        return Rule.compile(
            (_string(where, "regexes", p) for p in patterns),
            (_build_extractor(where, e, remaps) for e in extractors),
        )
    except re.error as e:
        raise RuleError(f"{where}: invalid pattern {e.pattern!r}: {e}") from e


def _string(where: str, field: str, value: Any) -> str:
    if not isinstance(value, str):
        raise RuleError(f"{where}: {field} must be a string, got {value!r}")
    return value


def _key(where: str, value: Any) -> Key:
    try:
        return Key(value)
    except ValueError:
        raise RuleError(f"{where}: unknown key {value!r}") from None


def _build_extractor(where: str, spec: Any, remaps: Remaps) -> Extractor:
    if isinstance(spec, str):
        return Capture(_key(where, spec))
    if not isinstance(spec, Mapping) or "key" not in spec:
        raise RuleError(f"{where}: invalid extractor {spec!r}")

    key = _key(where, spec["key"])
    if "value" in spec:
        return Fixed(key, _string(where, "value", spec["value"]))
    if "find" in spec:
        return Rewrite(
            key,
            _string(where, "find", spec["find"]),
            _string(where, "replace", spec.get("replace", "")),
        )
    if "remap" in spec:
        try:
            return Remap(key, remaps[spec["remap"]])
        except KeyError:
            raise RuleError(f"{where}: unknown remap {spec['remap']!r}") from None
    raise RuleError(f"{where}: extractor for {key.value!r} has no action")
