"""Typed intake records produced by the translator's validation pass.

Operations form a tagged union keyed by ``operationtype``: every operation
kind subclasses ``OperationSpec`` with only the fields meaningful for it.
The kind-specific subclasses live next to their kind in
``services.actions.operations``.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, kw_only=True)
class OperationSpec:
    """Fields shared by every operation kind."""

    operationtype: str
    operationid: str = ""
    actionid: str = ""
    esc_period: str = "0"  # "0" inherits the action period
    esc_step_from: int = 1
    esc_step_to: int = 1
    evaltype: str = "and_or"


@dataclass(frozen=True)
class OpCondition:
    """Acknowledgement condition attached to a message/command operation."""

    value: str
    operator: str = "equals"


@dataclass(frozen=True)
class ConditionSpec:
    conditiontype: str
    operator: str = "equals"
    value: str = ""
    value2: str = ""
    formulaid: str = ""


@dataclass(frozen=True)
class FilterSpec:
    evaltype: str = "and_or"
    formula: str = ""
    conditions: tuple[ConditionSpec, ...] = ()


@dataclass(frozen=True, kw_only=True)
class ActionSpec:
    """Validated desired state of one action."""

    name: str
    eventsource: str
    esc_period: str
    operations: tuple[OperationSpec, ...]
    actionid: str = ""
    status: bool = True
    pause_suppressed: bool = False
    def_longdata: str = ""
    def_shortdata: str = ""
    r_longdata: str = ""
    r_shortdata: str = ""
    ack_longdata: str = ""
    ack_shortdata: str = ""
    filter: FilterSpec | None = None


__all__ = [
    "ActionSpec",
    "ConditionSpec",
    "FilterSpec",
    "OpCondition",
    "OperationSpec",
]
