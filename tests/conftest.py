"""Shared fixtures for breakcheck tests."""

import json
from pathlib import Path

import pytest

from breakcheck.rule_engine.models import FieldDescriptor, FieldType


def _make_snapshot(**fields: FieldType) -> dict[str, FieldDescriptor]:
    """Build a snapshot from keyword field-name/type pairs."""
    return {name: FieldDescriptor(name=name, type=type_) for name, type_ in fields.items()}


@pytest.fixture
def make_snapshot():
    return _make_snapshot


def _provider_document(resources: dict[str, dict]) -> dict:
    """Wrap resource blocks in a `terraform providers schema -json` envelope."""
    return {
        "format_version": "1.0",
        "provider_schemas": {
            "registry.terraform.io/hashicorp/example": {
                "provider": {"version": 0, "block": {}},
                "resource_schemas": {
                    name: {"version": 0, "block": block} for name, block in resources.items()
                },
            }
        },
    }


def _write_json(path: Path, document: dict) -> Path:
    path.write_text(json.dumps(document))
    return path


@pytest.fixture
def old_provider_schema(tmp_path: Path) -> Path:
    """Provider schema with two resources; `example_disk.size` is dropped later."""
    return _write_json(
        tmp_path / "old.json",
        _provider_document(
            {
                "example_disk": {
                    "attributes": {
                        "id": {"type": "string", "computed": True},
                        "name": {"type": "string", "required": True},
                        "size": {"type": "number", "optional": True},
                        "labels": {"type": ["map", "string"], "optional": True},
                    },
                    "block_types": {
                        "encryption": {
                            "nesting_mode": "list",
                            "max_items": 1,
                            "block": {
                                "attributes": {"kms_key": {"type": "string", "required": True}}
                            },
                        }
                    },
                },
                "example_network": {
                    "attributes": {"name": {"type": "string", "required": True}},
                },
            }
        ),
    )


@pytest.fixture
def new_provider_schema(tmp_path: Path) -> Path:
    return _write_json(
        tmp_path / "new.json",
        _provider_document(
            {
                "example_disk": {
                    "attributes": {
                        "id": {"type": "string", "computed": True},
                        "name": {"type": "string", "required": True},
                        "labels": {"type": ["map", "string"], "optional": True},
                        "zone": {"type": "string", "optional": True},
                    },
                    "block_types": {
                        "encryption": {
                            "nesting_mode": "list",
                            "max_items": 1,
                            "block": {
                                "attributes": {"kms_key": {"type": "string", "required": True}}
                            },
                        }
                    },
                },
                "example_network": {
                    "attributes": {"name": {"type": "string", "required": True}},
                },
                "example_subnet": {
                    "attributes": {"cidr": {"type": "string", "required": True}},
                },
            }
        ),
    )
