"""Send-message operation kind."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

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
from services.actions.wire import remote_flag, remote_object, remote_text


@dataclass(frozen=True)
class OpMessage:
    default_msg: bool = True
    subject: str = ""
    message: str = ""
    mediatypeid: str = "0"  # "0" sends through all media types


@dataclass(frozen=True, kw_only=True)
class SendMessageOperation(OperationSpec):
    opmessage: OpMessage = field(default_factory=OpMessage)
    user_groups: tuple[str, ...] = ()
    users: tuple[str, ...] = ()
    conditions: tuple[OpCondition, ...] = ()


@register_operation_kind("send_message")
class SendMessageKind(OperationKind):
    """Notify user groups and/or users."""

    kind = "message"
    payload_fields = ("opmessage", "opmessage_grp", "opmessage_usr", "opcondition")
    rules = (
        RequiredFieldsRule(fields=("opmessage",)),
        RequiredFieldsRule(fields=("opmessage_grp", "opmessage_usr")),
    )

    def parse(self, record: Mapping[str, Any], common: Mapping[str, Any]) -> OperationSpec:
        block = fields.first_record(record, "opmessage")
        message = OpMessage()
        if block is not None:
            message = OpMessage(
                default_msg=fields.flag(block, "default_msg", True, path="opmessage.0"),
                subject=fields.text(block, "subject", path="opmessage.0"),
                message=fields.text(block, "message", path="opmessage.0"),
                mediatypeid=fields.text(block, "mediatypeid", "0", path="opmessage.0").strip() or "0",
            )
        return SendMessageOperation(
            **common,
            opmessage=message,
            user_groups=fields.id_list(record, "opmessage_grp", "usrgrpid"),
            users=fields.id_list(record, "opmessage_usr", "userid"),
            conditions=parse_opconditions(record),
        )

    def to_wire(self, operation: OperationSpec) -> dict[str, Any]:
        if not isinstance(operation, SendMessageOperation):
            raise TypeError(f"expected SendMessageOperation, got {type(operation).__name__}")
        message = operation.opmessage
        payload: dict[str, Any] = {
            "opmessage": {
                "default_msg": 1 if message.default_msg else 0,
                "subject": message.subject,
                "message": message.message,
                "mediatypeid": message.mediatypeid,
            },
            "opmessage_grp": ids_to_wire(operation.user_groups, "usrgrpid"),
            "opmessage_usr": ids_to_wire(operation.users, "userid"),
        }
        if operation.conditions:
            payload["opconditions"] = opconditions_to_wire(operation.conditions)
        return payload

    def from_wire(self, remote: Mapping[str, Any]) -> dict[str, Any]:
        block = remote_object(remote, "opmessage") or {}
        return {
            "opmessage": [
                {
                    "default_msg": remote_flag(block.get("default_msg", "1")),
                    "subject": remote_text(block, "subject"),
                    "message": remote_text(block, "message"),
                    "mediatypeid": remote_text(block, "mediatypeid") or "0",
                }
            ],
            "opmessage_grp": ids_from_wire(remote, "opmessage_grp", "usrgrpid"),
            "opmessage_usr": ids_from_wire(remote, "opmessage_usr", "userid"),
            "opcondition": opconditions_from_wire(remote),
        }
