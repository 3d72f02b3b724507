"""Declared shape of the action resource and its nested records.

The attribute-store collaborator consumes these descriptors for input shape
validation and diffing; the translator uses them for defaults, required
fields and the immutability (force-new) policy.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import Any


class FieldType(StrEnum):
    STRING = "string"
    INT = "int"
    BOOL = "bool"
    LIST = "list"


@dataclass(frozen=True)
class FieldSchema:
    """Descriptor of one attribute."""

    type: FieldType
    required: bool = False
    optional: bool = False
    computed: bool = False
    force_new: bool = False
    default: Any = None
    elem: ResourceSchema | None = None
    min_items: int = 0
    max_items: int = 0
    description: str = ""

    def __post_init__(self) -> None:
        if self.required and (self.optional or self.computed):
            raise ValueError("a required field cannot also be optional or computed")
        if (self.type is FieldType.LIST) != (self.elem is not None):
            raise ValueError("list fields need an element schema, scalar fields must not have one")


@dataclass(frozen=True)
class ResourceSchema:
    """Named, frozen collection of field descriptors."""

    name: str
    fields: Mapping[str, FieldSchema] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    def get_field(self, name: str) -> FieldSchema:
        try:
            return self.fields[name]
        except KeyError:
            raise KeyError(f"{self.name} has no field {name!r}") from None

    def required_fields(self) -> tuple[str, ...]:
        return tuple(name for name, spec in self.fields.items() if spec.required)

    def immutable_fields(self) -> tuple[str, ...]:
        return tuple(name for name, spec in self.fields.items() if spec.force_new)

    def computed_fields(self) -> tuple[str, ...]:
        return tuple(name for name, spec in self.fields.items() if spec.computed)

    def list_fields(self) -> tuple[str, ...]:
        return tuple(name for name, spec in self.fields.items() if spec.type is FieldType.LIST)

    def defaults(self) -> dict[str, Any]:
        """Return defaults for optional fields (lists default to empty)."""
        values: dict[str, Any] = {}
        for name, spec in self.fields.items():
            if spec.type is FieldType.LIST:
                values[name] = []
            elif spec.default is not None:
                values[name] = spec.default
        return values


def _str(**kwargs: Any) -> FieldSchema:
    return FieldSchema(type=FieldType.STRING, **kwargs)


def _list(elem: ResourceSchema, **kwargs: Any) -> FieldSchema:
    return FieldSchema(type=FieldType.LIST, elem=elem, **kwargs)


OPGROUP_SCHEMA = ResourceSchema(
    "opgroup",
    {
        "operationid": _str(optional=True, computed=True),
        "groupid": _str(required=True, description="Host group to add hosts to or remove them from."),
    },
)

OPTEMPLATE_SCHEMA = ResourceSchema(
    "optemplate",
    {
        "operationid": _str(optional=True, computed=True),
        "templateid": _str(required=True, description="Template to link or unlink."),
    },
)

OPCOMMAND_SCHEMA = ResourceSchema(
    "opcommand",
    {
        "type": _str(optional=True, default="custom_script"),
        "command": _str(optional=True, default=""),
        "execute_on": _str(optional=True, default="agent"),
        "scriptid": _str(optional=True, default=""),
    },
)

OPCOMMAND_HOST_SCHEMA = ResourceSchema(
    "opcommand_hst",
    {"hostid": _str(required=True, description="Host to run the command on; '0' is the current host.")},
)

OPCOMMAND_GROUP_SCHEMA = ResourceSchema(
    "opcommand_grp",
    {"groupid": _str(required=True)},
)

OPMESSAGE_SCHEMA = ResourceSchema(
    "opmessage",
    {
        "default_msg": FieldSchema(type=FieldType.BOOL, optional=True, default=True),
        "subject": _str(optional=True, default=""),
        "message": _str(optional=True, default=""),
        "mediatypeid": _str(optional=True, default="0"),
    },
)

OPMESSAGE_USER_GROUP_SCHEMA = ResourceSchema(
    "opmessage_grp",
    {"usrgrpid": _str(required=True)},
)

OPMESSAGE_USER_SCHEMA = ResourceSchema(
    "opmessage_usr",
    {"userid": _str(required=True)},
)

OPCONDITION_SCHEMA = ResourceSchema(
    "opcondition",
    {
        "operator": _str(optional=True, default="equals"),
        "value": _str(required=True, description="'0' not acknowledged, '1' acknowledged."),
    },
)

OPERATION_SCHEMA = ResourceSchema(
    "operation",
    {
        "operationid": _str(optional=True, computed=True),
        "operationtype": _str(required=True, force_new=True, description="Type of operation."),
        "actionid": _str(optional=True, computed=True),
        "esc_period": _str(
            optional=True,
            default="",
            description="Step duration override; empty inherits the action period.",
        ),
        "esc_step_from": FieldSchema(type=FieldType.INT, optional=True, default=1),
        "esc_step_to": FieldSchema(type=FieldType.INT, optional=True, default=1),
        "evaltype": _str(optional=True, default="and_or", description="Operation condition evaluation method."),
        "opcondition": _list(OPCONDITION_SCHEMA, optional=True),
        "opgroup": _list(OPGROUP_SCHEMA, optional=True, description="Host groups to add hosts to."),
        "optemplate": _list(OPTEMPLATE_SCHEMA, optional=True),
        "opcommand": _list(OPCOMMAND_SCHEMA, optional=True, max_items=1),
        "opcommand_hst": _list(OPCOMMAND_HOST_SCHEMA, optional=True),
        "opcommand_grp": _list(OPCOMMAND_GROUP_SCHEMA, optional=True),
        "opmessage": _list(OPMESSAGE_SCHEMA, optional=True, max_items=1),
        "opmessage_grp": _list(OPMESSAGE_USER_GROUP_SCHEMA, optional=True),
        "opmessage_usr": _list(OPMESSAGE_USER_SCHEMA, optional=True),
        "inventory_mode": _str(optional=True, default=""),
    },
)

CONDITION_SCHEMA = ResourceSchema(
    "condition",
    {
        "conditiontype": _str(required=True),
        "operator": _str(optional=True, default="equals"),
        "value": _str(optional=True, default=""),
        "value2": _str(optional=True, default=""),
        "formulaid": _str(optional=True, default=""),
    },
)

FILTER_SCHEMA = ResourceSchema(
    "filter",
    {
        "evaltype": _str(optional=True, default="and_or"),
        "formula": _str(optional=True, default=""),
        "condition": _list(CONDITION_SCHEMA, optional=True),
    },
)

ACTION_SCHEMA = ResourceSchema(
    "action",
    {
        "actionid": _str(computed=True, description="(readonly) ID of the action"),
        "name": _str(required=True, force_new=True),
        "eventsource": _str(
            required=True,
            force_new=True,
            description="Type of events that the action will handle.",
        ),
        "esc_period": _str(
            required=True,
            description=(
                "Default operation step duration. Must be at least 60 seconds. "
                "Accepts seconds, time unit with suffix and user macro."
            ),
        ),
        "status": FieldSchema(type=FieldType.BOOL, optional=True, default=True),
        "pause_suppressed": FieldSchema(type=FieldType.BOOL, optional=True, default=False),
        "def_longdata": _str(optional=True, default=""),
        "def_shortdata": _str(optional=True, default=""),
        "r_longdata": _str(optional=True, default=""),
        "r_shortdata": _str(optional=True, default=""),
        "ack_longdata": _str(optional=True, default=""),
        "ack_shortdata": _str(optional=True, default=""),
        "filter": _list(FILTER_SCHEMA, optional=True, max_items=1),
        "operation": _list(OPERATION_SCHEMA, required=True, min_items=1),
    },
)

# Operation fields whose presence depends on the operation type.
OPERATION_PAYLOAD_FIELDS: tuple[str, ...] = (
    "opcondition",
    "opgroup",
    "optemplate",
    "opcommand",
    "opcommand_hst",
    "opcommand_grp",
    "opmessage",
    "opmessage_grp",
    "opmessage_usr",
    "inventory_mode",
)


__all__ = [
    "ACTION_SCHEMA",
    "CONDITION_SCHEMA",
    "FILTER_SCHEMA",
    "FieldSchema",
    "FieldType",
    "OPCOMMAND_GROUP_SCHEMA",
    "OPCOMMAND_HOST_SCHEMA",
    "OPCOMMAND_SCHEMA",
    "OPCONDITION_SCHEMA",
    "OPERATION_PAYLOAD_FIELDS",
    "OPERATION_SCHEMA",
    "OPGROUP_SCHEMA",
    "OPMESSAGE_SCHEMA",
    "OPMESSAGE_USER_GROUP_SCHEMA",
    "OPMESSAGE_USER_SCHEMA",
    "OPTEMPLATE_SCHEMA",
    "ResourceSchema",
]
