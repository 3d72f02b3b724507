"""Remote-command operation kind."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from contracts.action_enums import EnumDomain, encode
from contracts.errors import ValidationError
from services.actions import fields
from services.actions.base import OperationKind
from services.actions.models import OpCondition, OperationSpec
from services.actions.operations._common import (
    ids_from_wire,
    ids_to_wire,
    opconditions_from_wire,
    opconditions_to_wire,
    parse_opconditions,
)
from services.actions.registry import register_operation_kind
from services.actions.rules import RequiredFieldsRule
from services.actions.wire import decode_remote, remote_object, remote_text


@dataclass(frozen=True)
class OpCommand:
    type: str = "custom_script"
    command: str = ""
    execute_on: str = "agent"
    scriptid: str = ""


@dataclass(frozen=True, kw_only=True)
class RemoteCommandOperation(OperationSpec):
    opcommand: OpCommand
    hosts: tuple[str, ...] = ()
    groups: tuple[str, ...] = ()
    conditions: tuple[OpCondition, ...] = ()


@register_operation_kind("remote_command")
class RemoteCommandKind(OperationKind):
    """Run a script or command on target hosts."""

    kind = "command"
    payload_fields = ("opcommand", "opcommand_hst", "opcommand_grp", "opcondition")
    rules = (
        RequiredFieldsRule(fields=("opcommand",)),
        RequiredFieldsRule(fields=("opcommand_hst", "opcommand_grp")),
    )

    def parse(self, record: Mapping[str, Any], common: Mapping[str, Any]) -> OperationSpec:
        block = fields.first_record(record, "opcommand") or {}
        path = "opcommand.0"
        command = OpCommand(
            type=fields.token(block, "type", EnumDomain.COMMAND_TYPE, "custom_script", path=path),
            command=fields.text(block, "command", path=path),
            execute_on=fields.token(block, "execute_on", EnumDomain.EXECUTE_ON, "agent", path=path),
            scriptid=fields.text(block, "scriptid", path=path).strip(),
        )
        return RemoteCommandOperation(
            **common,
            opcommand=command,
            hosts=fields.id_list(record, "opcommand_hst", "hostid"),
            groups=fields.id_list(record, "opcommand_grp", "groupid"),
            conditions=parse_opconditions(record),
        )

    def validate(self, operation: OperationSpec) -> None:
        if not isinstance(operation, RemoteCommandOperation):
            raise TypeError(f"expected RemoteCommandOperation, got {type(operation).__name__}")
        command = operation.opcommand
        if command.type == "global_script":
            if not command.scriptid:
                raise ValidationError("scriptid", "required for global scripts", path="opcommand.0")
        elif not command.command.strip():
            raise ValidationError("command", "required", path="opcommand.0")

    def to_wire(self, operation: OperationSpec) -> dict[str, Any]:
        if not isinstance(operation, RemoteCommandOperation):
            raise TypeError(f"expected RemoteCommandOperation, got {type(operation).__name__}")
        command = operation.opcommand
        opcommand: dict[str, Any] = {
            "type": encode(EnumDomain.COMMAND_TYPE, command.type),
            "execute_on": encode(EnumDomain.EXECUTE_ON, command.execute_on),
        }
        if command.type == "global_script":
            opcommand["scriptid"] = command.scriptid
        else:
            opcommand["command"] = command.command
        payload: dict[str, Any] = {
            "opcommand": opcommand,
            "opcommand_hst": ids_to_wire(operation.hosts, "hostid"),
            "opcommand_grp": ids_to_wire(operation.groups, "groupid"),
        }
        if operation.conditions:
            payload["opconditions"] = opconditions_to_wire(operation.conditions)
        return payload

    def from_wire(self, remote: Mapping[str, Any]) -> dict[str, Any]:
        block = remote_object(remote, "opcommand") or {}
        return {
            "opcommand": [
                {
                    "type": decode_remote(EnumDomain.COMMAND_TYPE, block.get("type", 0)),
                    "command": remote_text(block, "command"),
                    "execute_on": decode_remote(EnumDomain.EXECUTE_ON, block.get("execute_on", 0)),
                    "scriptid": "" if remote_text(block, "scriptid") == "0" else remote_text(block, "scriptid"),
                }
            ],
            "opcommand_hst": ids_from_wire(remote, "opcommand_hst", "hostid"),
            "opcommand_grp": ids_from_wire(remote, "opcommand_grp", "groupid"),
            "opcondition": opconditions_from_wire(remote),
        }
