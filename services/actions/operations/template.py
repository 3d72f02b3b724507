"""Template link/unlink operation kind."""

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
class OpTemplate:
    templateid: str
    operationid: str = ""


@dataclass(frozen=True, kw_only=True)
class TemplateOperation(OperationSpec):
    optemplate: tuple[OpTemplate, ...]


@register_operation_kind("link_to_template", "unlink_from_template")
class TemplateKind(OperationKind):
    kind = "template"
    payload_fields = ("optemplate",)
    rules = (RequiredFieldsRule(fields=("optemplate",)),)

    def parse(self, record: Mapping[str, Any], common: Mapping[str, Any]) -> OperationSpec:
        templates = tuple(
            OpTemplate(
                templateid=fields.required_text(item, "templateid", path=f"optemplate.{index}"),
                operationid=fields.text(item, "operationid"),
            )
            for index, item in enumerate(fields.records(record, "optemplate"))
        )
        return TemplateOperation(**common, optemplate=templates)

    def to_wire(self, operation: OperationSpec) -> dict[str, Any]:
        if not isinstance(operation, TemplateOperation):
            raise TypeError(f"expected TemplateOperation, got {type(operation).__name__}")
        return {"optemplate": [{"templateid": item.templateid} for item in operation.optemplate]}

    def from_wire(self, remote: Mapping[str, Any]) -> dict[str, Any]:
        return {
            "optemplate": [
                {
                    "operationid": remote_text(item, "operationid") or remote_text(remote, "operationid"),
                    "templateid": remote_text(item, "templateid"),
                }
                for item in remote_list(remote, "optemplate")
            ]
        }
