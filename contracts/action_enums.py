"""Closed enum registries between configuration tokens and server codes.

Every domain is a frozen ``token -> code`` mapping built at import time.
Lookups are exact and case-sensitive.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum
from types import MappingProxyType

from contracts.errors import InvalidEnumValue


class EnumDomain(StrEnum):
    """Enum vocabularies understood by the action API."""

    OPERATION_TYPE = "operation_type"
    EVENT_SOURCE = "event_source"
    EVAL_TYPE = "eval_type"
    FILTER_EVAL_TYPE = "filter_eval_type"
    CONDITION_TYPE = "condition_type"
    CONDITION_OPERATOR = "condition_operator"
    INVENTORY_MODE = "inventory_mode"
    STATUS = "status"
    COMMAND_TYPE = "command_type"
    EXECUTE_ON = "execute_on"


def _frozen(pairs: dict[str, int]) -> Mapping[str, int]:
    if len(set(pairs.values())) != len(pairs):
        raise ValueError("enum codes must be unique within a domain")
    return MappingProxyType(dict(pairs))


_REGISTRIES: Mapping[EnumDomain, Mapping[str, int]] = MappingProxyType(
    {
        EnumDomain.OPERATION_TYPE: _frozen(
            {
                "send_message": 0,
                "remote_command": 1,
                "add_host": 2,
                "remove_host": 3,
                "add_to_host_group": 4,
                "remove_from_host_group": 5,
                "link_to_template": 6,
                "unlink_from_template": 7,
                "enable_host": 8,
                "disable_host": 9,
                "set_host_inventory_mode": 10,
            }
        ),
        EnumDomain.EVENT_SOURCE: _frozen(
            {"trigger": 0, "discovery": 1, "auto_registration": 2, "internal": 3}
        ),
        EnumDomain.EVAL_TYPE: _frozen({"and_or": 0, "and": 1, "or": 2}),
        EnumDomain.FILTER_EVAL_TYPE: _frozen(
            {"and_or": 0, "and": 1, "or": 2, "custom_expression": 3}
        ),
        EnumDomain.CONDITION_TYPE: _frozen(
            {
                "host_group": 0,
                "host": 1,
                "trigger": 2,
                "trigger_name": 3,
                "trigger_severity": 4,
                "time_period": 6,
                "host_ip": 7,
                "discovered_service_type": 8,
                "discovered_service_port": 9,
                "discovery_status": 10,
                "uptime_downtime": 11,
                "received_value": 12,
                "host_template": 13,
                "event_acknowledged": 14,
                "problem_suppressed": 16,
                "discovery_rule": 18,
                "discovery_check": 19,
                "proxy": 20,
                "discovery_object": 21,
                "host_name": 22,
                "event_type": 23,
                "host_metadata": 24,
                "event_tag": 25,
                "event_tag_value": 26,
            }
        ),
        EnumDomain.CONDITION_OPERATOR: _frozen(
            {
                "equals": 0,
                "not_equals": 1,
                "like": 2,
                "not_like": 3,
                "in": 4,
                "greater_or_equal": 5,
                "less_or_equal": 6,
                "not_in": 7,
                "matches": 8,
                "does_not_match": 9,
                "yes": 10,
                "no": 11,
            }
        ),
        EnumDomain.INVENTORY_MODE: _frozen({"disabled": -1, "manual": 0, "automatic": 1}),
        EnumDomain.STATUS: _frozen({"enabled": 0, "disabled": 1}),
        EnumDomain.COMMAND_TYPE: _frozen(
            {"custom_script": 0, "ipmi": 1, "ssh": 2, "telnet": 3, "global_script": 4}
        ),
        EnumDomain.EXECUTE_ON: _frozen({"agent": 0, "server": 1, "proxy": 2}),
    }
)

_REVERSE: Mapping[EnumDomain, Mapping[int, str]] = MappingProxyType(
    {
        domain: MappingProxyType({code: token for token, code in mapping.items()})
        for domain, mapping in _REGISTRIES.items()
    }
)

# Condition vocabulary accepted for each event source.
CONDITIONS_BY_EVENT_SOURCE: Mapping[str, frozenset[str]] = MappingProxyType(
    {
        "trigger": frozenset(
            {
                "host_group",
                "host",
                "trigger",
                "trigger_name",
                "trigger_severity",
                "time_period",
                "host_template",
                "problem_suppressed",
                "event_tag",
                "event_tag_value",
            }
        ),
        "discovery": frozenset(
            {
                "host_ip",
                "discovered_service_type",
                "discovered_service_port",
                "discovery_status",
                "uptime_downtime",
                "received_value",
                "discovery_rule",
                "discovery_check",
                "proxy",
                "discovery_object",
            }
        ),
        "auto_registration": frozenset({"host_name", "proxy", "host_metadata"}),
        "internal": frozenset({"host_group", "host", "host_template", "event_type"}),
    }
)


def encode(domain: EnumDomain, token: object) -> int:
    """Return the server code for ``token`` or raise ``InvalidEnumValue``."""
    if not isinstance(token, str):
        raise InvalidEnumValue(domain.value, token)
    code = _REGISTRIES[domain].get(token)
    if code is None:
        raise InvalidEnumValue(domain.value, token)
    return code


def decode(domain: EnumDomain, code: object) -> str:
    """Return the token for a server code.

    Codes may arrive as ints or as digit strings (the JSON-RPC API returns
    strings). Booleans are never codes.
    """
    if isinstance(code, bool):
        raise InvalidEnumValue(domain.value, code)
    if isinstance(code, str):
        try:
            code = int(code.strip())
        except ValueError as exc:
            raise InvalidEnumValue(domain.value, code) from exc
    if not isinstance(code, int):
        raise InvalidEnumValue(domain.value, code)
    token = _REVERSE[domain].get(code)
    if token is None:
        raise InvalidEnumValue(domain.value, code)
    return token


def tokens(domain: EnumDomain) -> tuple[str, ...]:
    """Return the domain tokens in code order."""
    mapping = _REGISTRIES[domain]
    return tuple(sorted(mapping, key=mapping.__getitem__))


__all__ = [
    "CONDITIONS_BY_EVENT_SOURCE",
    "EnumDomain",
    "decode",
    "encode",
    "tokens",
]
