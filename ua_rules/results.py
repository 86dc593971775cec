"""Typed per-category records built from engine field maps."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import TypeVar

from .core import FieldMap, Key

R = TypeVar("R", bound="Record")


@dataclass(frozen=True)
class Record:
    """Base for category records.

    Every dataclass field is named after the :class:`Key` it is copied
    from. A record with no field set is never built: :meth:`from_fields`
    returns ``None`` instead.
    """

    @classmethod
    def from_fields(cls: type[R], fields: FieldMap | None) -> R | None:
        if not fields:
            return None
        values = {f.name: fields.get(Key(f.name)) or None for f in dataclasses.fields(cls)}
        if not any(values.values()):
            return None
        return cls(**values)

    def to_dict(self) -> dict[str, str | None]:
        return dataclasses.asdict(self)


@dataclass(frozen=True)
class Browser(Record):
    name: str | None = None
    version: str | None = None


@dataclass(frozen=True)
class CPU(Record):
    arch: str | None = None


@dataclass(frozen=True)
class Device(Record):
    vendor: str | None = None
    type: str | None = None
    model: str | None = None


@dataclass(frozen=True)
class Engine(Record):
    name: str | None = None
    version: str | None = None


@dataclass(frozen=True)
class OS(Record):
    name: str | None = None
    version: str | None = None
