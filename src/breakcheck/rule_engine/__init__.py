"""Rule engine: models, rule catalog, registry, and detector."""

from breakcheck.rule_engine.detector import Detector, removed_resources
from breakcheck.rule_engine.models import (
    FieldDescriptor,
    FieldType,
    RuleCategory,
    SchemaSnapshot,
    Violation,
)
from breakcheck.rule_engine.registry import DuplicateRuleError, RuleRegistry, default_registry
from breakcheck.rule_engine.resource_schema import RESOURCE_SCHEMA_RULES
from breakcheck.rule_engine.rules import (
    DEFAULT_DOCS_BASE_URL,
    ResourceSchemaRule,
    Rule,
    documentation_reference,
)

__all__ = [
    "DEFAULT_DOCS_BASE_URL",
    "Detector",
    "DuplicateRuleError",
    "FieldDescriptor",
    "FieldType",
    "RESOURCE_SCHEMA_RULES",
    "ResourceSchemaRule",
    "Rule",
    "RuleCategory",
    "RuleRegistry",
    "SchemaSnapshot",
    "Violation",
    "default_registry",
    "documentation_reference",
    "removed_resources",
]
