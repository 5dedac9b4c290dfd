"""Rule contract and the resource-schema rule value type."""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from breakcheck.rule_engine.models import RuleCategory, SchemaSnapshot

DEFAULT_DOCS_BASE_URL = "https://breakcheck.dev/docs/rules"

# {{resource}} and {{field}}, substituted in a single pass.
_PLACEHOLDER_RE = re.compile(r"\{\{(resource|field)\}\}")

SchemaCheck = Callable[[SchemaSnapshot, SchemaSnapshot], list[str]]


class Rule(Protocol):
    """Capability shared by every breaking-change rule."""

    @property
    def name(self) -> str: ...

    @property
    def definition(self) -> str: ...

    @property
    def identifier(self) -> str: ...

    @property
    def category(self) -> RuleCategory: ...

    def message(
        self,
        version: str,
        resource: str,
        field: str,
        *,
        docs_base_url: str = DEFAULT_DOCS_BASE_URL,
    ) -> str: ...

    def is_rule_break(self, old: SchemaSnapshot, new: SchemaSnapshot) -> list[str]: ...

    def undetectable(self) -> bool: ...


def documentation_reference(
    version: str,
    identifier: str,
    base_url: str = DEFAULT_DOCS_BASE_URL,
) -> str:
    """Suffix pointing at the published page for a rule."""
    return f" See: {base_url.rstrip('/')}/{version}/{identifier}"


@dataclass(frozen=True)
class ResourceSchemaRule:
    """A rule over the field mappings of one resource.

    ``check`` is ``None`` for rules that are documented but cannot be
    detected automatically; those always report nothing and need manual
    review.
    """

    name: str
    definition: str
    identifier: str
    message_template: str = ""
    check: SchemaCheck | None = None
    category: RuleCategory = RuleCategory.RESOURCE_SCHEMA

    def message(
        self,
        version: str,
        resource: str,
        field: str,
        *,
        docs_base_url: str = DEFAULT_DOCS_BASE_URL,
    ) -> str:
        """Render the template for one offending field, plus the docs link.

        Rules without a template render their name instead, so the
        resource and field do not appear in the message.
        """
        values = {"resource": f"`{resource}`", "field": f"`{field}`"}
        template = self.message_template or self.name
        msg = _PLACEHOLDER_RE.sub(lambda m: values[m.group(1)], template)
        return msg + documentation_reference(version, self.identifier, docs_base_url)

    def is_rule_break(self, old: SchemaSnapshot, new: SchemaSnapshot) -> list[str]:
        if self.check is None:
            return []
        return self.check(old, new)

    def undetectable(self) -> bool:
        return self.check is None
