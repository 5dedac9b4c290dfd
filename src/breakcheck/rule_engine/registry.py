"""RuleRegistry: an immutable, ordered catalog of rules for one category."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Iterator

from breakcheck.rule_engine.models import RuleCategory
from breakcheck.rule_engine.resource_schema import RESOURCE_SCHEMA_RULES
from breakcheck.rule_engine.rules import Rule


class DuplicateRuleError(Exception):
    """Two rules in one registry share an identifier."""


class RuleRegistry:
    def __init__(self, category: RuleCategory, rules: Iterable[Rule]) -> None:
        self._category = category
        self._rules: tuple[Rule, ...] = tuple(rules)

        counts = Counter(rule.identifier for rule in self._rules)
        duplicates = sorted(ident for ident, n in counts.items() if n > 1)
        if duplicates:
            raise DuplicateRuleError(
                f"Duplicate rule identifiers in {category} registry: {', '.join(duplicates)}"
            )

    @property
    def category(self) -> RuleCategory:
        return self._category

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def identifiers(self) -> list[str]:
        return [rule.identifier for rule in self._rules]

    def get(self, identifier: str) -> Rule | None:
        for rule in self._rules:
            if rule.identifier == identifier:
                return rule
        return None

    def detectable(self) -> list[Rule]:
        """Rules with an automated check."""
        return [rule for rule in self._rules if not rule.undetectable()]

    def undetectable(self) -> list[Rule]:
        """Rules that need manual review."""
        return [rule for rule in self._rules if rule.undetectable()]


def default_registry() -> RuleRegistry:
    return RuleRegistry(RuleCategory.RESOURCE_SCHEMA, RESOURCE_SCHEMA_RULES)
