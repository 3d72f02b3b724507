"""
TypedDict definitions for the action API wire format.

These mirror the JSON objects exchanged with the server's ``action.*``
methods. Requests carry integer enum codes; responses from a real server carry
the same values as strings, so readers must accept both.

Usage:
    from contracts.typed_dicts import ActionWireFormat, OperationWireFormat
"""

from __future__ import annotations

from typing import NotRequired, TypedDict

Code = int | str  # ints on write, digit strings on read


class OpGroupWireFormat(TypedDict):
    groupid: str
    operationid: NotRequired[str]


class OpTemplateWireFormat(TypedDict):
    templateid: str
    operationid: NotRequired[str]


class OpCommandWireFormat(TypedDict):
    type: Code  # command_type
    command: NotRequired[str]
    execute_on: NotRequired[Code]  # execute_on
    scriptid: NotRequired[str]


class OpCommandHostWireFormat(TypedDict):
    hostid: str


class OpCommandGroupWireFormat(TypedDict):
    groupid: str


class OpMessageWireFormat(TypedDict):
    default_msg: Code  # 0 | 1
    subject: NotRequired[str]
    message: NotRequired[str]
    mediatypeid: NotRequired[str]


class OpMessageUserGroupWireFormat(TypedDict):
    usrgrpid: str


class OpMessageUserWireFormat(TypedDict):
    userid: str


class OpConditionWireFormat(TypedDict):
    conditiontype: Code  # always event_acknowledged (14)
    operator: Code
    value: str


class OpInventoryWireFormat(TypedDict):
    inventory_mode: Code


class OperationWireFormat(TypedDict):
    """
    Wire format for one action operation.

    Only the nested keys belonging to ``operationtype`` are present on write.
    """
    operationtype: Code
    actionid: NotRequired[str]  # empty until the owning action exists
    operationid: NotRequired[str]
    esc_period: NotRequired[str]  # "0" inherits the action period
    esc_step_from: NotRequired[Code]
    esc_step_to: NotRequired[Code]
    evaltype: NotRequired[Code]
    opconditions: NotRequired[list[OpConditionWireFormat]]
    opgroup: NotRequired[list[OpGroupWireFormat]]
    optemplate: NotRequired[list[OpTemplateWireFormat]]
    opcommand: NotRequired[OpCommandWireFormat]
    opcommand_hst: NotRequired[list[OpCommandHostWireFormat]]
    opcommand_grp: NotRequired[list[OpCommandGroupWireFormat]]
    opmessage: NotRequired[OpMessageWireFormat]
    opmessage_grp: NotRequired[list[OpMessageUserGroupWireFormat]]
    opmessage_usr: NotRequired[list[OpMessageUserWireFormat]]
    opinventory: NotRequired[OpInventoryWireFormat]


class ConditionWireFormat(TypedDict):
    conditiontype: Code
    operator: Code
    value: str
    value2: NotRequired[str]
    formulaid: NotRequired[str]


class FilterWireFormat(TypedDict):
    evaltype: Code
    formula: NotRequired[str]
    conditions: list[ConditionWireFormat]


class ActionWireFormat(TypedDict):
    """
    Wire format for the action object (``action.create`` / ``action.get``).
    """
    actionid: NotRequired[str]  # absent on create
    name: str
    eventsource: Code
    esc_period: str
    status: Code  # 0 enabled, 1 disabled
    pause_suppressed: NotRequired[Code]
    def_longdata: NotRequired[str]
    def_shortdata: NotRequired[str]
    r_longdata: NotRequired[str]
    r_shortdata: NotRequired[str]
    ack_longdata: NotRequired[str]
    ack_shortdata: NotRequired[str]
    filter: NotRequired[FilterWireFormat]
    operations: list[OperationWireFormat]


__all__ = [
    "ActionWireFormat",
    "Code",
    "ConditionWireFormat",
    "FilterWireFormat",
    "OpCommandGroupWireFormat",
    "OpCommandHostWireFormat",
    "OpCommandWireFormat",
    "OpConditionWireFormat",
    "OpGroupWireFormat",
    "OpInventoryWireFormat",
    "OpMessageUserGroupWireFormat",
    "OpMessageUserWireFormat",
    "OpMessageWireFormat",
    "OpTemplateWireFormat",
    "OperationWireFormat",
]
