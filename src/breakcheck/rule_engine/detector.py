"""Detector: run a rule registry against an old/new snapshot pair."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from breakcheck.rule_engine.models import SchemaSnapshot, Violation
from breakcheck.rule_engine.registry import RuleRegistry
from breakcheck.rule_engine.rules import DEFAULT_DOCS_BASE_URL

logger = logging.getLogger(__name__)


class Detector:
    def __init__(
        self,
        registry: RuleRegistry,
        *,
        docs_base_url: str = DEFAULT_DOCS_BASE_URL,
    ) -> None:
        self._registry = registry
        self._docs_base_url = docs_base_url

    @property
    def registry(self) -> RuleRegistry:
        return self._registry

    def find_violations(
        self,
        resource: str,
        old: SchemaSnapshot,
        new: SchemaSnapshot,
    ) -> list[Violation]:
        """Violations in registry order, fields sorted within each rule.

        Exceptions raised by a rule's check are not caught: a faulty rule
        must not look like a clean comparison.
        """
        violations: list[Violation] = []
        for rule in self._registry:
            fields = sorted(rule.is_rule_break(old, new))
            logger.debug(f"Rule {rule.identifier} on {resource}: {len(fields)} violation(s)")
            violations.extend(
                Violation(rule_identifier=rule.identifier, resource=resource, field=f)
                for f in fields
            )
        return violations

    def render(self, version: str, violation: Violation) -> str:
        rule = self._registry.get(violation.rule_identifier)
        if rule is None:
            raise KeyError(f"Rule '{violation.rule_identifier}' is not in the registry")
        return rule.message(
            version,
            violation.resource,
            violation.field,
            docs_base_url=self._docs_base_url,
        )

    def detect(
        self,
        resource: str,
        version: str,
        old: SchemaSnapshot,
        new: SchemaSnapshot,
    ) -> list[str]:
        """Rendered violation messages for one resource."""
        return [self.render(version, v) for v in self.find_violations(resource, old, new)]

    def detect_provider(
        self,
        version: str,
        old_resources: Mapping[str, SchemaSnapshot],
        new_resources: Mapping[str, SchemaSnapshot],
    ) -> list[str]:
        """Rendered messages for every resource present in both snapshots."""
        messages: list[str] = []
        for resource in sorted(old_resources.keys() | new_resources.keys()):
            if resource not in new_resources:
                logger.warning(f"Resource {resource} missing from new snapshot, not compared")
                continue
            if resource not in old_resources:
                logger.debug(f"Resource {resource} is new, skipped")
                continue
            messages.extend(
                self.detect(resource, version, old_resources[resource], new_resources[resource])
            )
        return messages


def removed_resources(
    old_resources: Mapping[str, SchemaSnapshot],
    new_resources: Mapping[str, SchemaSnapshot],
) -> list[str]:
    """Resources in ``old_resources`` with no counterpart in ``new_resources``, sorted."""
    return sorted(old_resources.keys() - new_resources.keys())
