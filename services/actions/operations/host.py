"""Host lifecycle operation kinds (add/remove/enable/disable)."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from services.actions.base import OperationKind
from services.actions.models import OperationSpec
from services.actions.registry import register_operation_kind


@dataclass(frozen=True, kw_only=True)
class HostOperation(OperationSpec):
    pass


@register_operation_kind("add_host", "remove_host", "enable_host", "disable_host")
class HostKind(OperationKind):
    """Operations acting on the event's host with no extra payload."""

    kind = "host"

    def parse(self, record: Mapping[str, Any], common: Mapping[str, Any]) -> OperationSpec:
        _ = record
        return HostOperation(**common)

    def to_wire(self, operation: OperationSpec) -> dict[str, Any]:
        _ = operation
        return {}

    def from_wire(self, remote: Mapping[str, Any]) -> dict[str, Any]:
        _ = remote
        return {}
