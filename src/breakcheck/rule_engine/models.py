"""Pydantic models and enums for the rule engine layer."""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class FieldType(StrEnum):
    STRING = "string"
    NUMBER = "number"
    BOOL = "bool"
    LIST = "list"
    SET = "set"
    MAP = "map"
    OBJECT = "object"
    BLOCK = "block"  # nested block, see FieldDescriptor.nested
    DYNAMIC = "dynamic"


class RuleCategory(StrEnum):
    RESOURCE_SCHEMA = "resource-schema"


class FieldDescriptor(BaseModel):
    """One attribute of a resource schema at a single point in time.

    Frozen at the attribute level only: ``nested`` cannot be reassigned, but
    the dict it holds is a plain dict. Rules must treat it as read-only.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    type: FieldType = FieldType.STRING
    required: bool = False
    optional: bool = False
    computed: bool = False
    force_new: bool = False
    element_type: FieldType | None = None  # list/set/map members
    nested: dict[str, FieldDescriptor] = Field(default_factory=dict)


# Field name -> descriptor. Rules treat it as read-only.
SchemaSnapshot = Mapping[str, FieldDescriptor]


class Violation(BaseModel):
    """A single offending field reported by a rule for one comparison."""

    model_config = ConfigDict(frozen=True)

    rule_identifier: str
    resource: str
    field: str
