"""Host group membership operation kind."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from services.actions import fields
from services.actions.base import OperationKind
from services.actions.models import OperationSpec
from services.actions.registry import register_operation_kind
from services.actions.rules import RequiredFieldsRule
from services.actions.wire import remote_list, remote_text


@dataclass(frozen=True)
class OpGroup:
    """Reference to a host group; owned by its operation."""

    groupid: str
    operationid: str = ""


@dataclass(frozen=True, kw_only=True)
class HostGroupOperation(OperationSpec):
    opgroup: tuple[OpGroup, ...]


@register_operation_kind("add_to_host_group", "remove_from_host_group")
class HostGroupKind(OperationKind):
    """Add the event's host to, or remove it from, host groups."""

    kind = "host_group"
    payload_fields = ("opgroup",)
    rules = (RequiredFieldsRule(fields=("opgroup",)),)

    def parse(self, record: Mapping[str, Any], common: Mapping[str, Any]) -> OperationSpec:
        groups = tuple(
            OpGroup(
                groupid=fields.required_text(item, "groupid", path=f"opgroup.{index}"),
                operationid=fields.text(item, "operationid"),
            )
            for index, item in enumerate(fields.records(record, "opgroup"))
        )
        return HostGroupOperation(**common, opgroup=groups)

    def to_wire(self, operation: OperationSpec) -> dict[str, Any]:
        if not isinstance(operation, HostGroupOperation):
            raise TypeError(f"expected HostGroupOperation, got {type(operation).__name__}")
        return {"opgroup": [{"groupid": group.groupid} for group in operation.opgroup]}

    def from_wire(self, remote: Mapping[str, Any]) -> dict[str, Any]:
        return {
            "opgroup": [
                {
                    "operationid": remote_text(item, "operationid") or remote_text(remote, "operationid"),
                    "groupid": remote_text(item, "groupid"),
                }
                for item in remote_list(remote, "opgroup")
            ]
        }
