"""Helpers for reading server responses."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from contracts.action_enums import EnumDomain, decode
from contracts.errors import InvalidEnumValue, RegistryMismatchError


def decode_remote(domain: EnumDomain, code: Any) -> str:
    """Decode a server code; unknown codes are a registry mismatch."""
    try:
        return decode(domain, code)
    except InvalidEnumValue as exc:
        raise RegistryMismatchError(domain.value, code) from exc


def remote_flag(value: Any) -> bool:
    return str(value if value is not None else "0").strip() == "1"


def remote_text(remote: Mapping[str, Any], key: str) -> str:
    value = remote.get(key)
    return "" if value is None else str(value)


def remote_int(remote: Mapping[str, Any], key: str, default: int = 1) -> int:
    value = remote.get(key)
    if value is None or value == "":
        return default
    return int(value)


def remote_list(remote: Mapping[str, Any], key: str) -> list[Mapping[str, Any]]:
    """Return a nested list; the server sends ``[]`` or omits unused keys."""
    value = remote.get(key)
    if not value:
        return []
    if isinstance(value, Mapping):
        return [value]
    return [item for item in value if isinstance(item, Mapping)]


def remote_object(remote: Mapping[str, Any], key: str) -> Mapping[str, Any] | None:
    """Return a nested single object; empty objects and lists count as absent."""
    value = remote.get(key)
    if isinstance(value, list):
        value = value[0] if value else None
    if not isinstance(value, Mapping) or not value:
        return None
    return value
