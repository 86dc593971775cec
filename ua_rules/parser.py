from __future__ import annotations

from functools import cached_property

from .categories import RuleSet
from .loader import default_rules
from .results import CPU, OS, Browser, Device, Engine

CATEGORIES = ("browser", "cpu", "device", "engine", "os")


class Parser:
    """Classify one user-agent string.

    Each category is computed on first access and cached on the instance;
    categories are independent of each other. ``rules`` replaces the
    shipped tables, and ``max_length`` bounds the part of ``ua`` the
    patterns are run against.
    """

    def __init__(
        self,
        ua: str,
        /,
        *,
        rules: RuleSet | None = None,
        max_length: int | None = None,
    ) -> None:
        self.ua = ua
        self.rules = rules if rules is not None else default_rules()
        self._subject = ua if max_length is None else ua[:max_length]

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.ua!r}>"

    def __str__(self) -> str:
        return self.ua

    @cached_property
    def browser(self) -> Browser | None:
        return self.rules.browser.extract(self._subject)

    @cached_property
    def cpu(self) -> CPU | None:
        return self.rules.cpu.extract(self._subject)

    @cached_property
    def device(self) -> Device | None:
        return self.rules.device.extract(self._subject)

    @cached_property
    def engine(self) -> Engine | None:
        return self.rules.engine.extract(self._subject)

    @cached_property
    def os(self) -> OS | None:
        return self.rules.os.extract(self._subject)

    def result(self) -> dict[str, dict[str, str | None] | None]:
        """All five categories as plain dicts, ``None`` where nothing matched."""
        result = {}
        for name in CATEGORIES:
            record = getattr(self, name)
            result[name] = record.to_dict() if record is not None else None
        return result


def parse(ua: str, /) -> Parser:
    return Parser(ua)
