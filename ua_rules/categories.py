from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import ClassVar, Generic, TypeVar

from .core import Rule, match
from .results import CPU, OS, Browser, Device, Engine, Record

R = TypeVar("R", bound=Record)


class CategoryExtractor(Generic[R]):
    """One category table plus the record type its matches build."""

    record: ClassVar[type[Record]]

    def __init__(self, it: Iterable[Rule], /) -> None:
        self.rules: tuple[Rule, ...] = tuple(it)

    def __len__(self) -> int:
        return len(self.rules)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} rules={len(self.rules)}>"

    def extract(self, s: str, /) -> R | None:
        return self.record.from_fields(match(s, self.rules))  # type: ignore[return-value]


class BrowserExtractor(CategoryExtractor[Browser]):
    record = Browser


class CPUExtractor(CategoryExtractor[CPU]):
    record = CPU


class DeviceExtractor(CategoryExtractor[Device]):
    record = Device


class EngineExtractor(CategoryExtractor[Engine]):
    record = Engine


class OSExtractor(CategoryExtractor[OS]):
    record = OS


@dataclass(frozen=True)
class RuleSet:
    """The five category tables used by :class:`ua_rules.Parser`."""

    browser: BrowserExtractor
    cpu: CPUExtractor
    device: DeviceExtractor
    engine: EngineExtractor
    os: OSExtractor
