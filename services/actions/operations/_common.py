"""Shared helpers for operation kind implementations."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from contracts.action_enums import EnumDomain, encode
from contracts.errors import ValidationError
from contracts.typed_dicts import OpConditionWireFormat
from services.actions import fields
from services.actions.models import OpCondition
from services.actions.wire import decode_remote, remote_list, remote_text

_ACKNOWLEDGED_VALUES = ("0", "1")


def parse_opconditions(record: Mapping[str, Any]) -> tuple[OpCondition, ...]:
    """Parse acknowledgement conditions (``value`` is "0" or "1")."""
    conditions: list[OpCondition] = []
    for index, item in enumerate(fields.records(record, "opcondition")):
        path = f"opcondition.{index}"
        value = fields.required_text(item, "value", path=path)
        if value not in _ACKNOWLEDGED_VALUES:
            raise ValidationError("value", "must be '0' (not acknowledged) or '1' (acknowledged)", path=path)
        operator = fields.token(item, "operator", EnumDomain.CONDITION_OPERATOR, "equals", path=path)
        conditions.append(OpCondition(value=value, operator=operator))
    return tuple(conditions)


def opconditions_to_wire(conditions: tuple[OpCondition, ...]) -> list[OpConditionWireFormat]:
    return [
        {
            "conditiontype": encode(EnumDomain.CONDITION_TYPE, "event_acknowledged"),
            "operator": encode(EnumDomain.CONDITION_OPERATOR, condition.operator),
            "value": condition.value,
        }
        for condition in conditions
    ]


def opconditions_from_wire(remote: Mapping[str, Any]) -> list[dict[str, Any]]:
    return [
        {
            "operator": decode_remote(EnumDomain.CONDITION_OPERATOR, item.get("operator", 0)),
            "value": remote_text(item, "value"),
        }
        for item in remote_list(remote, "opconditions")
    ]


def ids_to_wire(ids: tuple[str, ...], id_key: str) -> list[dict[str, str]]:
    return [{id_key: value} for value in ids]


def ids_from_wire(remote: Mapping[str, Any], key: str, id_key: str) -> list[dict[str, str]]:
    return [{id_key: remote_text(item, id_key)} for item in remote_list(remote, key)]
