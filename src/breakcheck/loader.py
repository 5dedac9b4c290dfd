"""Load provider schema snapshots from local files or URLs.

Two document shapes are accepted:

* the output of ``terraform providers schema -json``, where each resource
  lives under ``provider_schemas.<address>.resource_schemas.<name>.block``;
* a flat ``{resource: {field: descriptor}}`` mapping whose descriptors use
  the ``FieldDescriptor`` keys (``name`` defaults to the mapping key).
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import httpx
from pydantic import ValidationError

from breakcheck.rule_engine.models import FieldDescriptor, FieldType

logger = logging.getLogger(__name__)

ProviderSnapshot = dict[str, dict[str, FieldDescriptor]]

_NESTING_TYPES = {
    "single": FieldType.BLOCK,
    "group": FieldType.BLOCK,
    "list": FieldType.LIST,
    "set": FieldType.SET,
    "map": FieldType.MAP,
}


class SnapshotLoadError(Exception):
    """A schema snapshot could not be read or parsed."""


def load_snapshot(source: str | Path, *, client: httpx.Client | None = None) -> ProviderSnapshot:
    """Read a provider snapshot from a path or an http(s) URL."""
    text = _read_source(source, client=client)
    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        raise SnapshotLoadError(f"{source}: invalid JSON: {e}") from e
    return parse_snapshot(document)


def parse_snapshot(document: object) -> ProviderSnapshot:
    if not isinstance(document, dict):
        raise SnapshotLoadError("Snapshot document must be a JSON object")
    if "provider_schemas" in document:
        try:
            return _parse_provider_schemas(document["provider_schemas"])
        except (AttributeError, TypeError, ValueError) as e:
            raise SnapshotLoadError(f"Malformed provider schema document: {e}") from e
    return _parse_flat(document)


def _read_source(source: str | Path, *, client: httpx.Client | None) -> str:
    if isinstance(source, str) and source.startswith(("http://", "https://")):
        logger.debug(f"Fetching schema snapshot from {source}")
        try:
            if client is not None:
                resp = client.get(source)
            else:
                resp = httpx.get(source, timeout=30.0, follow_redirects=True)
            resp.raise_for_status()
        except httpx.HTTPError as e:
            raise SnapshotLoadError(f"{source}: {e}") from e
        return resp.text

    path = Path(source)
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        raise SnapshotLoadError(f"{path}: {e}") from e


def _parse_provider_schemas(providers: Any) -> ProviderSnapshot:
    if not isinstance(providers, dict):
        raise SnapshotLoadError("'provider_schemas' must be an object")

    resources: ProviderSnapshot = {}
    for address, provider in providers.items():
        schemas = provider.get("resource_schemas", {}) if isinstance(provider, dict) else None
        if not isinstance(schemas, dict):
            raise SnapshotLoadError(f"Provider '{address}' has malformed resource_schemas")
        for name, schema in schemas.items():
            block = schema.get("block") if isinstance(schema, dict) else None
            if not isinstance(block, dict):
                raise SnapshotLoadError(f"Resource '{name}' has no schema block")
            if name in resources:
                logger.warning(f"Resource {name} defined by more than one provider, keeping last")
            resources[name] = _parse_block(block)
    return resources


def _parse_block(block: dict[str, Any]) -> dict[str, FieldDescriptor]:
    fields: dict[str, FieldDescriptor] = {}

    for name, attr in block.get("attributes", {}).items():
        if "nested_type" in attr:
            nested_type = attr["nested_type"]
            type_ = _NESTING_TYPES.get(nested_type.get("nesting_mode", "single"), FieldType.BLOCK)
            nested = _parse_block(nested_type)
            element = FieldType.BLOCK if type_ is not FieldType.BLOCK else None
        else:
            type_, element = _cty_type(attr.get("type", "dynamic"))
            nested = {}
        fields[name] = FieldDescriptor(
            name=name,
            type=type_,
            required=bool(attr.get("required", False)),
            optional=bool(attr.get("optional", False)),
            computed=bool(attr.get("computed", False)),
            element_type=element,
            nested=nested,
        )

    for name, block_type in block.get("block_types", {}).items():
        type_ = _NESTING_TYPES.get(block_type.get("nesting_mode", "single"), FieldType.BLOCK)
        fields[name] = FieldDescriptor(
            name=name,
            type=type_,
            required=int(block_type.get("min_items", 0)) > 0,
            optional=int(block_type.get("min_items", 0)) == 0,
            element_type=FieldType.BLOCK if type_ is not FieldType.BLOCK else None,
            nested=_parse_block(block_type.get("block", {})),
        )

    return fields


def _cty_type(raw: Any) -> tuple[FieldType, FieldType | None]:
    """Map a cty JSON type to (type, element type)."""
    if isinstance(raw, str):
        try:
            return FieldType(raw), None
        except ValueError:
            return FieldType.DYNAMIC, None
    if isinstance(raw, list) and raw:
        kind = raw[0]
        if kind in ("list", "tuple"):
            type_ = FieldType.LIST
        elif kind == "set":
            type_ = FieldType.SET
        elif kind == "map":
            type_ = FieldType.MAP
        elif kind == "object":
            return FieldType.OBJECT, None
        else:
            return FieldType.DYNAMIC, None
        element = _cty_type(raw[1])[0] if len(raw) > 1 and kind != "tuple" else None
        return type_, element
    raise SnapshotLoadError(f"Unrecognized attribute type: {raw!r}")


def _parse_flat(document: dict[str, Any]) -> ProviderSnapshot:
    resources: ProviderSnapshot = {}
    for resource, fields in document.items():
        if not isinstance(fields, dict):
            raise SnapshotLoadError(f"Resource '{resource}' must map field names to descriptors")
        resources[resource] = {
            name: _flat_descriptor(name, data, resource) for name, data in fields.items()
        }
    return resources


def _flat_descriptor(name: str, data: Any, resource: str) -> FieldDescriptor:
    if isinstance(data, str):
        data = {"type": data}
    if not isinstance(data, dict):
        raise SnapshotLoadError(f"Field '{resource}.{name}' must be an object or a type name")
    raw_nested = data.get("nested") or {}
    if not isinstance(raw_nested, dict):
        raise SnapshotLoadError(f"Field '{resource}.{name}' has malformed nested fields")
    nested = {key: _flat_descriptor(key, value, resource) for key, value in raw_nested.items()}
    try:
        return FieldDescriptor.model_validate({**data, "name": name, "nested": nested})
    except ValidationError as e:
        raise SnapshotLoadError(f"Field '{resource}.{name}': {e}") from e
