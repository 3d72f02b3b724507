"""Tests for operation rule primitives."""

from __future__ import annotations

from services.actions.rules import (
    NOT_ALLOWED_FOR_TYPE,
    EscalationStepOrderRule,
    ForbiddenPayloadRule,
    RequiredFieldsRule,
    evaluate_rules,
    is_set,
)


def test_is_set_semantics() -> None:
    assert is_set(None) is False
    assert is_set("") is False
    assert is_set([]) is False
    assert is_set("0") is True
    assert is_set([{}]) is True
    assert is_set(False) is True


def test_step_order_rule() -> None:
    rule = EscalationStepOrderRule()
    assert rule.evaluate({"esc_step_from": 1, "esc_step_to": 1}).ok is True
    result = rule.evaluate({"esc_step_from": 4, "esc_step_to": 2})
    assert result.ok is False
    assert result.field == "esc_step_from"
    assert "(4 > 2)" in result.reason
    assert rule.evaluate({"esc_step_from": 1, "esc_step_to": 0}).field == "esc_step_to"


def test_required_fields_rule_accepts_any_listed_field() -> None:
    rule = RequiredFieldsRule(fields=("opmessage_grp", "opmessage_usr"))
    assert rule.evaluate({"opmessage_usr": [{"userid": "1"}]}).ok is True
    assert rule.evaluate({"opmessage_grp": []}).field == "opmessage_grp or opmessage_usr"


def test_forbidden_payload_rule_reports_first_offender() -> None:
    rule = ForbiddenPayloadRule(allowed=("opgroup",))
    assert rule.evaluate({"opgroup": [{"groupid": "1"}], "opmessage": []}).ok is True
    result = rule.evaluate({"optemplate": [{"templateid": "1"}], "inventory_mode": "manual"})
    assert (result.field, result.reason) == ("optemplate", NOT_ALLOWED_FOR_TYPE)


def test_evaluate_rules_stops_at_first_failure() -> None:
    result = evaluate_rules(
        rules=(EscalationStepOrderRule(), RequiredFieldsRule(fields=("opgroup",))),
        record={"esc_step_from": 2, "esc_step_to": 1},
    )
    assert result.field == "esc_step_from"
    assert evaluate_rules(rules=(), record={}).ok is True
    assert EscalationStepOrderRule().describe() == "EscalationStepOrderRule"
