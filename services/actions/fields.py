"""Typed accessors over loosely-typed attribute records.

Every accessor raises ``ValidationError`` naming the offending field, so the
rest of the translator never inspects raw values.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from contracts.action_enums import EnumDomain, encode
from contracts.action_schema import FieldType, ResourceSchema
from contracts.errors import ValidationError
from services.actions.rules import is_set


def text(record: Mapping[str, Any], key: str, default: str = "", *, path: str = "") -> str:
    value = record.get(key)
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, str | int):
        raise ValidationError(key, "must be a string", path=path)
    return str(value)


def required_text(record: Mapping[str, Any], key: str, *, path: str = "") -> str:
    value = text(record, key, path=path).strip()
    if not value:
        raise ValidationError(key, "required", path=path)
    return value


def flag(record: Mapping[str, Any], key: str, default: bool, *, path: str = "") -> bool:
    value = record.get(key)
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ValidationError(key, "must be a boolean", path=path)
    return value


def step(record: Mapping[str, Any], key: str, default: int = 1, *, path: str = "") -> int:
    """Return an escalation step number (ints or digit strings)."""
    value = record.get(key)
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        raise ValidationError(key, "must be an integer", path=path)
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(key, "must be an integer", path=path) from None
    if number < 1:
        raise ValidationError(key, "must be >= 1", path=path)
    return number


def token(
    record: Mapping[str, Any],
    key: str,
    domain: EnumDomain,
    default: str = "",
    *,
    path: str = "",
) -> str:
    """Return an enum token after checking it against its registry."""
    value = text(record, key, default, path=path)
    encode(domain, value)
    return value


def records(record: Mapping[str, Any], key: str, *, path: str = "") -> list[Mapping[str, Any]]:
    value = record.get(key)
    if value is None:
        return []
    if not isinstance(value, list | tuple):
        raise ValidationError(key, "must be a list", path=path)
    items: list[Mapping[str, Any]] = []
    for item in value:
        if not isinstance(item, Mapping):
            raise ValidationError(key, "items must be records", path=path)
        items.append(item)
    return items


def first_record(record: Mapping[str, Any], key: str, *, path: str = "") -> Mapping[str, Any] | None:
    items = records(record, key, path=path)
    return items[0] if items else None


def id_list(record: Mapping[str, Any], key: str, id_key: str, *, path: str = "") -> tuple[str, ...]:
    """Return the ids of a list of single-id records, e.g. ``opgroup[].groupid``."""
    ids: list[str] = []
    for index, item in enumerate(records(record, key, path=path)):
        ids.append(required_text(item, id_key, path=f"{path}.{key}.{index}" if path else f"{key}.{index}"))
    return tuple(ids)


def check_shape(schema: ResourceSchema, record: Mapping[str, Any], *, path: str = "") -> None:
    """Validate required fields and list bounds against a schema descriptor.

    Nested list elements are checked recursively.
    """
    for name, spec in schema.fields.items():
        value = record.get(name)
        if spec.required and not is_set(value):
            if spec.type is FieldType.LIST:
                raise ValidationError(name, f"at least {max(spec.min_items, 1)} item(s) required", path=path)
            raise ValidationError(name, "required", path=path)
        if spec.type is not FieldType.LIST or spec.elem is None:
            continue
        items = records(record, name, path=path)
        if spec.min_items and len(items) < spec.min_items:
            raise ValidationError(name, f"at least {spec.min_items} item(s) required", path=path)
        if spec.max_items and len(items) > spec.max_items:
            raise ValidationError(name, f"at most {spec.max_items} item(s) allowed", path=path)
        for index, item in enumerate(items):
            check_shape(spec.elem, item, path=f"{path}.{name}.{index}" if path else f"{name}.{index}")
