"""Host inventory mode operation kind."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from contracts.action_enums import EnumDomain, encode
from services.actions import fields
from services.actions.base import OperationKind
from services.actions.models import OperationSpec
from services.actions.registry import register_operation_kind
from services.actions.rules import RequiredFieldsRule
from services.actions.wire import decode_remote, remote_object


@dataclass(frozen=True, kw_only=True)
class InventoryOperation(OperationSpec):
    inventory_mode: str


@register_operation_kind("set_host_inventory_mode")
class InventoryKind(OperationKind):
    kind = "inventory"
    payload_fields = ("inventory_mode",)
    rules = (RequiredFieldsRule(fields=("inventory_mode",)),)

    def parse(self, record: Mapping[str, Any], common: Mapping[str, Any]) -> OperationSpec:
        mode = fields.token(record, "inventory_mode", EnumDomain.INVENTORY_MODE)
        return InventoryOperation(**common, inventory_mode=mode)

    def to_wire(self, operation: OperationSpec) -> dict[str, Any]:
        if not isinstance(operation, InventoryOperation):
            raise TypeError(f"expected InventoryOperation, got {type(operation).__name__}")
        return {"opinventory": {"inventory_mode": encode(EnumDomain.INVENTORY_MODE, operation.inventory_mode)}}

    def from_wire(self, remote: Mapping[str, Any]) -> dict[str, Any]:
        block = remote_object(remote, "opinventory") or {}
        return {"inventory_mode": decode_remote(EnumDomain.INVENTORY_MODE, block.get("inventory_mode", 0))}
