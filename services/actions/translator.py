"""Bidirectional mapping between attribute-store values and the action wire format.

``to_remote`` runs a validation pass over the attribute store (schema shape,
enum tokens, escalation periods, per-kind operation rules), producing typed
``ActionSpec`` records, and then builds the request. Nothing here talks to
the network, so every failure happens before a remote call.

``from_remote`` projects a server action back into attribute form, keeping the
server's operation order and identifiers.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from contracts.action_enums import CONDITIONS_BY_EVENT_SOURCE, EnumDomain, encode
from contracts.action_schema import ACTION_SCHEMA, OPERATION_PAYLOAD_FIELDS, OPERATION_SCHEMA
from contracts.errors import ValidationError
from contracts.interfaces import ResourceDataProtocol
from contracts.typed_dicts import ActionWireFormat, FilterWireFormat, OperationWireFormat
from services.actions import fields
from services.actions.durations import normalize_esc_period, normalize_remote_period
from services.actions.models import ActionSpec, ConditionSpec, FilterSpec, OperationSpec
from services.actions.registry import OperationKindRegistry
from services.actions.rules import EscalationStepOrderRule, ForbiddenPayloadRule, evaluate_rules
from services.actions.wire import (
    decode_remote,
    remote_flag,
    remote_int,
    remote_list,
    remote_object,
    remote_text,
)

MESSAGE_FIELDS = (
    "def_longdata",
    "def_shortdata",
    "r_longdata",
    "r_shortdata",
    "ack_longdata",
    "ack_shortdata",
)


def _join(*parts: str) -> str:
    return ".".join(part for part in parts if part)


def read_attributes(data: ResourceDataProtocol) -> dict[str, Any]:
    """Snapshot every declared action attribute from the store."""
    return {name: data.get(name) for name in ACTION_SCHEMA.fields}


class ActionTranslator:
    """Pure translator between attribute records and wire structures."""

    def __init__(self, *, registry: OperationKindRegistry | None = None, auto_discover: bool = True) -> None:
        if registry is None:
            registry = OperationKindRegistry()
        if auto_discover:
            registry.discover()
        self._registry = registry

    # -- attribute store -> typed request ---------------------------------

    def to_remote(self, data: ResourceDataProtocol) -> ActionWireFormat:
        """Validate the attribute store and build the request for it."""
        return self.build_request(self.parse_action(read_attributes(data), actionid=data.id()))

    def parse_action(self, attrs: Mapping[str, Any], *, actionid: str = "") -> ActionSpec:
        """Validation pass producing the typed intake record."""
        fields.check_shape(ACTION_SCHEMA, attrs)
        eventsource = fields.token(attrs, "eventsource", EnumDomain.EVENT_SOURCE)
        pause_suppressed = fields.flag(attrs, "pause_suppressed", False)
        if pause_suppressed and eventsource != "trigger":
            raise ValidationError("pause_suppressed", "only supported for trigger actions")
        filter_block = fields.first_record(attrs, "filter")
        operations = tuple(
            self._parse_operation(record, actionid=actionid, path=f"operation.{index}")
            for index, record in enumerate(fields.records(attrs, "operation"))
        )
        return ActionSpec(
            actionid=actionid,
            name=fields.required_text(attrs, "name"),
            eventsource=eventsource,
            esc_period=normalize_esc_period(attrs.get("esc_period")),
            status=fields.flag(attrs, "status", True),
            pause_suppressed=pause_suppressed,
            filter=self._parse_filter(filter_block, eventsource) if filter_block is not None else None,
            operations=operations,
            **{name: fields.text(attrs, name) for name in MESSAGE_FIELDS},
        )

    def _parse_filter(self, block: Mapping[str, Any], eventsource: str) -> FilterSpec:
        evaltype = fields.token(block, "evaltype", EnumDomain.FILTER_EVAL_TYPE, "and_or", path="filter.0")
        formula = fields.text(block, "formula", path="filter.0").strip()
        allowed = CONDITIONS_BY_EVENT_SOURCE[eventsource]
        conditions: list[ConditionSpec] = []
        for index, item in enumerate(fields.records(block, "condition", path="filter.0")):
            path = f"filter.0.condition.{index}"
            conditiontype = fields.token(item, "conditiontype", EnumDomain.CONDITION_TYPE, path=path)
            if conditiontype not in allowed:
                raise ValidationError("condition", f"not valid for event source {eventsource}", path=path)
            condition = ConditionSpec(
                conditiontype=conditiontype,
                operator=fields.token(item, "operator", EnumDomain.CONDITION_OPERATOR, "equals", path=path),
                value=fields.text(item, "value", path=path),
                value2=fields.text(item, "value2", path=path),
                formulaid=fields.text(item, "formulaid", path=path).strip(),
            )
            if evaltype == "custom_expression" and not condition.formulaid:
                raise ValidationError("formulaid", "required for custom expressions", path=path)
            conditions.append(condition)
        if evaltype == "custom_expression" and not formula:
            raise ValidationError("formula", "required for custom expressions", path="filter.0")
        return FilterSpec(evaltype=evaltype, formula=formula, conditions=tuple(conditions))

    def _parse_operation(self, record: Mapping[str, Any], *, actionid: str, path: str) -> OperationSpec:
        operationtype = fields.token(record, "operationtype", EnumDomain.OPERATION_TYPE, path=path)
        kind = self._registry.create(operationtype)
        common = {
            "operationtype": operationtype,
            "operationid": fields.text(record, "operationid", path=path).strip(),
            "actionid": actionid,
            "esc_period": normalize_esc_period(record.get("esc_period"), path=path, allow_inherit=True),
            "esc_step_from": fields.step(record, "esc_step_from", path=path),
            "esc_step_to": fields.step(record, "esc_step_to", path=path),
            "evaltype": fields.token(record, "evaltype", EnumDomain.EVAL_TYPE, "and_or", path=path),
        }
        working = {**record, **common}
        result = evaluate_rules(
            rules=(
                EscalationStepOrderRule(),
                ForbiddenPayloadRule(allowed=kind.payload_fields),
                *kind.rules,
            ),
            record=working,
        )
        if not result.ok:
            raise ValidationError(result.field, result.reason, path=path)
        try:
            operation = kind.parse(working, common)
            kind.validate(operation)
        except ValidationError as exc:
            raise ValidationError(exc.field, exc.reason, path=_join(path, exc.path)) from None
        return operation

    def build_request(self, spec: ActionSpec) -> ActionWireFormat:
        request: ActionWireFormat = {
            "name": spec.name,
            "eventsource": encode(EnumDomain.EVENT_SOURCE, spec.eventsource),
            "esc_period": spec.esc_period,
            "status": encode(EnumDomain.STATUS, "enabled" if spec.status else "disabled"),
            "def_longdata": spec.def_longdata,
            "def_shortdata": spec.def_shortdata,
            "r_longdata": spec.r_longdata,
            "r_shortdata": spec.r_shortdata,
            "ack_longdata": spec.ack_longdata,
            "ack_shortdata": spec.ack_shortdata,
            "operations": [self._operation_to_wire(operation) for operation in spec.operations],
        }
        if spec.actionid:
            request["actionid"] = spec.actionid
        if spec.eventsource == "trigger":
            request["pause_suppressed"] = 1 if spec.pause_suppressed else 0
        if spec.filter is not None:
            request["filter"] = self._filter_to_wire(spec.filter)
        elif spec.actionid:
            # the server keeps an omitted filter, so clear a removed one
            request["filter"] = self._filter_to_wire(FilterSpec(evaltype="and_or"))
        return request

    def _operation_to_wire(self, operation: OperationSpec) -> OperationWireFormat:
        kind = self._registry.create(operation.operationtype)
        wire: OperationWireFormat = {
            "operationtype": encode(EnumDomain.OPERATION_TYPE, operation.operationtype),
            "actionid": operation.actionid,
            "esc_period": operation.esc_period,
            "esc_step_from": operation.esc_step_from,
            "esc_step_to": operation.esc_step_to,
            "evaltype": encode(EnumDomain.EVAL_TYPE, operation.evaltype),
        }
        if operation.operationid:
            wire["operationid"] = operation.operationid
        wire.update(kind.to_wire(operation))  # type: ignore[typeddict-item]
        return wire

    @staticmethod
    def _filter_to_wire(spec: FilterSpec) -> FilterWireFormat:
        wire: FilterWireFormat = {
            "evaltype": encode(EnumDomain.FILTER_EVAL_TYPE, spec.evaltype),
            "conditions": [],
        }
        for condition in spec.conditions:
            item = {
                "conditiontype": encode(EnumDomain.CONDITION_TYPE, condition.conditiontype),
                "operator": encode(EnumDomain.CONDITION_OPERATOR, condition.operator),
                "value": condition.value,
            }
            if condition.value2:
                item["value2"] = condition.value2
            if condition.formulaid:
                item["formulaid"] = condition.formulaid
            wire["conditions"].append(item)  # type: ignore[arg-type]
        if spec.evaltype == "custom_expression":
            wire["formula"] = spec.formula
        return wire

    # -- server action -> attributes --------------------------------------

    def from_remote(self, remote: Mapping[str, Any]) -> dict[str, Any]:
        """Project a server action into attribute form."""
        eventsource = decode_remote(EnumDomain.EVENT_SOURCE, remote.get("eventsource"))
        status = decode_remote(EnumDomain.STATUS, remote.get("status", 0))
        attrs: dict[str, Any] = {
            "actionid": remote_text(remote, "actionid"),
            "name": remote_text(remote, "name"),
            "eventsource": eventsource,
            "esc_period": normalize_remote_period(remote.get("esc_period")),
            "status": status == "enabled",
            "pause_suppressed": remote_flag(remote.get("pause_suppressed")),
            "filter": self._filter_from_wire(remote_object(remote, "filter")),
            "operation": [self._operation_from_wire(item) for item in remote_list(remote, "operations")],
        }
        for name in MESSAGE_FIELDS:
            attrs[name] = remote_text(remote, name)
        return attrs

    def _operation_from_wire(self, remote: Mapping[str, Any]) -> dict[str, Any]:
        operationtype = decode_remote(EnumDomain.OPERATION_TYPE, remote.get("operationtype"))
        record: dict[str, Any] = {
            name: value for name, value in OPERATION_SCHEMA.defaults().items() if name in OPERATION_PAYLOAD_FIELDS
        }
        record.update(
            {
                "operationid": remote_text(remote, "operationid"),
                "operationtype": operationtype,
                "actionid": remote_text(remote, "actionid"),
                "esc_period": normalize_remote_period(remote.get("esc_period"), inherit_as=""),
                "esc_step_from": remote_int(remote, "esc_step_from"),
                "esc_step_to": remote_int(remote, "esc_step_to"),
                "evaltype": decode_remote(EnumDomain.EVAL_TYPE, remote.get("evaltype", 0)),
            }
        )
        record.update(self._registry.create(operationtype).from_wire(remote))
        return record

    @staticmethod
    def _filter_from_wire(remote: Mapping[str, Any] | None) -> list[dict[str, Any]]:
        if remote is None:
            return []
        evaltype = decode_remote(EnumDomain.FILTER_EVAL_TYPE, remote.get("evaltype", 0))
        conditions = [
            {
                "conditiontype": decode_remote(EnumDomain.CONDITION_TYPE, item.get("conditiontype")),
                "operator": decode_remote(EnumDomain.CONDITION_OPERATOR, item.get("operator", 0)),
                "value": remote_text(item, "value"),
                "value2": remote_text(item, "value2"),
                "formulaid": remote_text(item, "formulaid") if evaltype == "custom_expression" else "",
            }
            for item in remote_list(remote, "conditions")
        ]
        formula = remote_text(remote, "formula") if evaltype == "custom_expression" else ""
        if not conditions and evaltype == "and_or":
            return []
        return [{"evaltype": evaltype, "formula": formula, "condition": conditions}]


__all__ = ["ActionTranslator", "MESSAGE_FIELDS", "read_attributes"]
