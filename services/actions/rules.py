"""Rule primitives evaluated on operation records before submission."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from contracts.action_schema import OPERATION_PAYLOAD_FIELDS

REQUIRED_FOR_TYPE = "required for this operation type"
NOT_ALLOWED_FOR_TYPE = "not allowed for this operation type"


@dataclass(frozen=True)
class RuleResult:
    """Deterministic rule evaluation result."""

    ok: bool
    field: str = ""
    reason: str = ""


def is_set(value: Any) -> bool:
    """Return True for non-empty lists and strings; None is never set."""
    if value is None:
        return False
    if isinstance(value, str | list | tuple):
        return len(value) > 0
    return True


class OperationRule(ABC):
    """Contract for reusable operation rules."""

    def describe(self) -> str:
        return self.__class__.__name__

    @abstractmethod
    def evaluate(self, record: Mapping[str, Any]) -> RuleResult:
        """Evaluate one rule against an operation record."""
        raise NotImplementedError


@dataclass(frozen=True)
class EscalationStepOrderRule(OperationRule):
    """Escalation steps start at 1 and ``esc_step_from <= esc_step_to``."""

    def evaluate(self, record: Mapping[str, Any]) -> RuleResult:
        step_from = int(record.get("esc_step_from") or 0)
        step_to = int(record.get("esc_step_to") or 0)
        if step_from < 1:
            return RuleResult(ok=False, field="esc_step_from", reason="must be >= 1")
        if step_to < 1:
            return RuleResult(ok=False, field="esc_step_to", reason="must be >= 1")
        if step_from > step_to:
            return RuleResult(
                ok=False,
                field="esc_step_from",
                reason=f"must not be greater than esc_step_to ({step_from} > {step_to})",
            )
        return RuleResult(ok=True)


@dataclass(frozen=True)
class RequiredFieldsRule(OperationRule):
    """At least one of ``fields`` must be set."""

    fields: tuple[str, ...]
    reason: str = REQUIRED_FOR_TYPE

    def evaluate(self, record: Mapping[str, Any]) -> RuleResult:
        if any(is_set(record.get(name)) for name in self.fields):
            return RuleResult(ok=True)
        return RuleResult(ok=False, field=" or ".join(self.fields), reason=self.reason)


@dataclass(frozen=True)
class ForbiddenPayloadRule(OperationRule):
    """Payload fields not listed in ``allowed`` must be absent or empty."""

    allowed: tuple[str, ...]

    def evaluate(self, record: Mapping[str, Any]) -> RuleResult:
        for name in OPERATION_PAYLOAD_FIELDS:
            if name in self.allowed:
                continue
            if is_set(record.get(name)):
                return RuleResult(ok=False, field=name, reason=NOT_ALLOWED_FOR_TYPE)
        return RuleResult(ok=True)


def evaluate_rules(*, rules: Sequence[OperationRule], record: Mapping[str, Any]) -> RuleResult:
    """Evaluate rules in order and return the first failure."""
    for rule in rules:
        result = rule.evaluate(record)
        if not result.ok:
            return result
    return RuleResult(ok=True)
