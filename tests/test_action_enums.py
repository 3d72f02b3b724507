"""Tests for the closed enum registries."""

from __future__ import annotations

import pytest

from contracts.action_enums import CONDITIONS_BY_EVENT_SOURCE, EnumDomain, decode, encode, tokens
from contracts.errors import InvalidEnumValue


@pytest.mark.parametrize("domain", list(EnumDomain))
def test_every_token_round_trips(domain: EnumDomain) -> None:
    for token in tokens(domain):
        assert decode(domain, encode(domain, token)) == token


def test_known_codes_match_the_server_vocabulary() -> None:
    assert encode(EnumDomain.OPERATION_TYPE, "send_message") == 0
    assert encode(EnumDomain.OPERATION_TYPE, "add_to_host_group") == 4
    assert encode(EnumDomain.OPERATION_TYPE, "set_host_inventory_mode") == 10
    assert encode(EnumDomain.EVENT_SOURCE, "internal") == 3
    assert encode(EnumDomain.FILTER_EVAL_TYPE, "custom_expression") == 3
    assert encode(EnumDomain.INVENTORY_MODE, "disabled") == -1


def test_status_polarity_disabled_is_non_zero() -> None:
    assert encode(EnumDomain.STATUS, "enabled") == 0
    assert encode(EnumDomain.STATUS, "disabled") == 1


@pytest.mark.parametrize("token", ["Send_Message", "send message", "SEND_MESSAGE", "", " send_message"])
def test_encode_is_exact_and_case_sensitive(token: str) -> None:
    with pytest.raises(InvalidEnumValue) as excinfo:
        encode(EnumDomain.OPERATION_TYPE, token)
    assert excinfo.value.value == token
    assert excinfo.value.domain == "operation_type"


def test_encode_rejects_non_string_tokens() -> None:
    with pytest.raises(InvalidEnumValue):
        encode(EnumDomain.EVAL_TYPE, 0)


def test_decode_accepts_digit_strings_from_the_api() -> None:
    assert decode(EnumDomain.EVENT_SOURCE, "2") == "auto_registration"
    assert decode(EnumDomain.INVENTORY_MODE, "-1") == "disabled"


@pytest.mark.parametrize("code", [99, "99", "abc", None, True, 1.5])
def test_decode_rejects_unknown_codes(code: object) -> None:
    with pytest.raises(InvalidEnumValue):
        decode(EnumDomain.OPERATION_TYPE, code)


def test_tokens_are_in_code_order() -> None:
    assert tokens(EnumDomain.EVAL_TYPE) == ("and_or", "and", "or")
    assert tokens(EnumDomain.INVENTORY_MODE) == ("disabled", "manual", "automatic")


def test_condition_vocabulary_is_declared_for_every_event_source() -> None:
    assert set(CONDITIONS_BY_EVENT_SOURCE) == set(tokens(EnumDomain.EVENT_SOURCE))
    known = set(tokens(EnumDomain.CONDITION_TYPE))
    for allowed in CONDITIONS_BY_EVENT_SOURCE.values():
        assert allowed <= known


def test_invalid_enum_value_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        encode(EnumDomain.STATUS, "paused")
