"""Resource-schema rules guarding against provider breaking changes."""

from __future__ import annotations

from breakcheck.rule_engine.models import SchemaSnapshot
from breakcheck.rule_engine.rules import ResourceSchemaRule


def _removed_fields(old: SchemaSnapshot, new: SchemaSnapshot) -> list[str]:
    """Fields present in ``old`` but missing from ``new``."""
    return [key for key in old if key not in new]


FIELD_REMOVAL_OR_RENAME = ResourceSchemaRule(
    name="Removing or renaming a field",
    definition=(
        "Fields should be retained whenever possible. Removing a field breaks "
        "every configuration that depends on it. Renaming and removing a field "
        "are equivalent in terms of configuration breakage."
    ),
    message_template="Field {{field}} within resource {{resource}} was either removed or renamed",
    identifier="resource-schema-field-removal-or-rename",
    check=_removed_fields,
)

RESOURCE_ID_FORMAT = ResourceSchemaRule(
    name="Changing resource ID format",
    definition=(
        "The resource ID is used to read resource state from the API. Modifying "
        "the ID format breaks the ability to parse the IDs of existing deployments."
    ),
    identifier="resource-id",
)

IMPORT_ID_FORMAT = ResourceSchemaRule(
    name="Changing resource ID import format",
    definition=(
        "Automation external to the provider may rely on importing resources "
        "with a certain format. Removing or modifying an existing format breaks "
        "this automation."
    ),
    identifier="resource-import-format",
)

RESOURCE_SCHEMA_RULES: tuple[ResourceSchemaRule, ...] = (
    FIELD_REMOVAL_OR_RENAME,
    RESOURCE_ID_FORMAT,
    IMPORT_ID_FORMAT,
)
