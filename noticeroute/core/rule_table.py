"""Rule table: the ordered, immutable set of rules of one load generation.

A table is built append-only by ``RuleTableBuilder`` during a load pass and
never mutated afterwards; reloading builds a new table and the engine
swaps it in as a whole.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType

from noticeroute.models.rules import ACTIVE_WINDOW, DEVNULL, LINE_START, Rule


class RuleTable:
    """Ordered rules plus the display templates registered for them."""

    __slots__ = ("_rules", "_formats")

    def __init__(
        self,
        rules: Iterable[Rule] = (),
        formats: Mapping[str, str] | None = None,
    ) -> None:
        self._rules: tuple[Rule, ...] = tuple(rules)
        if formats is None:
            formats = {rule.format_name: LINE_START + rule.format_template for rule in self._rules}
        self._formats: Mapping[str, str] = MappingProxyType(dict(formats))

    @classmethod
    def empty(cls) -> RuleTable:
        return cls()

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __getitem__(self, index: int) -> Rule:
        return self._rules[index]

    @property
    def rules(self) -> tuple[Rule, ...]:
        return self._rules

    @property
    def formats(self) -> Mapping[str, str]:
        """``"r_<name>"`` → ``"{line_start}<template>"`` for every rule."""
        return self._formats

    def names(self) -> list[str]:
        return [rule.name for rule in self._rules]

    def rules_for_window(self, window: str) -> list[Rule]:
        """Rules whose destination text is exactly *window*."""
        return [rule for rule in self._rules if rule.destinations == window]

    def all_window_names(self) -> list[str]:
        """Every window name any rule sends to, sorted.

        ``active`` and ``devnull`` are not real windows, and ``TAG:`` scope
        qualifiers are skipped.
        """
        names: set[str] = set()
        for rule in self._rules:
            for token in rule.destination_tokens:
                if token in (ACTIVE_WINDOW, DEVNULL) or token.endswith(":"):
                    continue
                names.add(token)
        return sorted(names)


class RuleTableBuilder:
    """Accumulates rules and their templates for one load pass."""

    def __init__(self) -> None:
        self._rules: list[Rule] = []
        self._formats: dict[str, str] = {}

    def append(self, rule: Rule) -> None:
        self._rules.append(rule)
        self._formats[rule.format_name] = LINE_START + rule.format_template

    def __len__(self) -> int:
        return len(self._rules)

    def build(self) -> RuleTable:
        return RuleTable(self._rules, self._formats)
