"""Tests for attribute <-> wire translation."""

from __future__ import annotations

from typing import Any

import pytest

from contracts.errors import InvalidEnumValue, RegistryMismatchError, ValidationError
from services.actions.resource_data import InMemoryResourceData
from services.actions.translator import ActionTranslator
from tests.zabbix_mocks import FakeActionServer, disk_full_alert, send_message_operation


@pytest.fixture(scope="module")
def translator() -> ActionTranslator:
    return ActionTranslator()


def _to_remote(translator: ActionTranslator, config: dict[str, Any], actionid: str = "") -> dict[str, Any]:
    return dict(translator.to_remote(InMemoryResourceData(config, resource_id=actionid)))


def test_request_for_reference_action(translator: ActionTranslator) -> None:
    request = _to_remote(translator, disk_full_alert())

    assert request["name"] == "disk-full-alert"
    assert request["eventsource"] == 0
    assert request["esc_period"] == "3600"
    assert request["status"] == 0
    assert request["pause_suppressed"] == 0
    assert "actionid" not in request
    assert "filter" not in request
    assert request["operations"] == [
        {
            "operationtype": 4,
            "actionid": "",
            "esc_period": "0",
            "esc_step_from": 1,
            "esc_step_to": 1,
            "evaltype": 0,
            "opgroup": [{"groupid": "12"}],
        }
    ]


def test_request_carries_existing_identifiers(translator: ActionTranslator) -> None:
    config = disk_full_alert()
    config["operation"][0]["operationid"] = "55"
    request = _to_remote(translator, config, actionid="17")

    assert request["actionid"] == "17"
    assert request["operations"][0]["actionid"] == "17"
    assert request["operations"][0]["operationid"] == "55"


def test_update_request_without_filter_clears_it(translator: ActionTranslator) -> None:
    request = _to_remote(translator, disk_full_alert(), actionid="17")

    assert request["filter"] == {"evaltype": 0, "conditions": []}


def test_disabled_status_encodes_to_non_zero_code(translator: ActionTranslator) -> None:
    assert _to_remote(translator, disk_full_alert(status=False))["status"] == 1


@pytest.mark.parametrize("missing", ["name", "eventsource", "esc_period"])
def test_missing_required_field_names_the_field(translator: ActionTranslator, missing: str) -> None:
    config = disk_full_alert()
    del config[missing]
    with pytest.raises(ValidationError) as excinfo:
        _to_remote(translator, config)
    assert excinfo.value.field == missing
    assert excinfo.value.reason == "required"


def test_operation_list_must_not_be_empty(translator: ActionTranslator) -> None:
    with pytest.raises(ValidationError) as excinfo:
        _to_remote(translator, disk_full_alert(operation=[]))
    assert excinfo.value.field == "operation"


def test_short_period_is_rejected(translator: ActionTranslator) -> None:
    with pytest.raises(ValidationError) as excinfo:
        _to_remote(translator, disk_full_alert(esc_period="30s"))
    assert (excinfo.value.field, excinfo.value.reason) == ("esc_period", "below minimum")


def test_unknown_operation_type_is_an_enum_error(translator: ActionTranslator) -> None:
    config = disk_full_alert()
    config["operation"][0]["operationtype"] = "add_to_hostgroup"
    with pytest.raises(InvalidEnumValue) as excinfo:
        _to_remote(translator, config)
    assert excinfo.value.value == "add_to_hostgroup"


def test_unknown_event_source_is_an_enum_error(translator: ActionTranslator) -> None:
    with pytest.raises(InvalidEnumValue):
        _to_remote(translator, disk_full_alert(eventsource="Trigger"))


def test_step_order_is_enforced(translator: ActionTranslator) -> None:
    config = disk_full_alert()
    config["operation"][0].update(esc_step_from=3, esc_step_to=2)
    with pytest.raises(ValidationError) as excinfo:
        _to_remote(translator, config)
    assert excinfo.value.field == "esc_step_from"
    assert excinfo.value.path == "operation.0"


def test_step_zero_is_rejected(translator: ActionTranslator) -> None:
    config = disk_full_alert()
    config["operation"][0]["esc_step_from"] = 0
    with pytest.raises(ValidationError, match="must be >= 1"):
        _to_remote(translator, config)


def test_group_operation_without_groups_is_rejected(translator: ActionTranslator) -> None:
    config = disk_full_alert()
    config["operation"][0]["opgroup"] = []
    with pytest.raises(ValidationError) as excinfo:
        _to_remote(translator, config)
    assert (excinfo.value.field, excinfo.value.reason) == ("opgroup", "required for this operation type")


def test_groups_on_other_operation_types_are_rejected(translator: ActionTranslator) -> None:
    operation = send_message_operation(opgroup=[{"groupid": "12"}])
    with pytest.raises(ValidationError) as excinfo:
        _to_remote(translator, disk_full_alert(operation=[operation]))
    assert (excinfo.value.field, excinfo.value.reason) == ("opgroup", "not allowed for this operation type")
    assert excinfo.value.path == "operation.0"


def test_opgroup_entry_needs_a_group_id(translator: ActionTranslator) -> None:
    config = disk_full_alert()
    config["operation"][0]["opgroup"] = [{"groupid": ""}]
    with pytest.raises(ValidationError) as excinfo:
        _to_remote(translator, config)
    assert excinfo.value.path == "operation.0.opgroup.0"
    assert excinfo.value.field == "groupid"


def test_send_message_requires_recipients(translator: ActionTranslator) -> None:
    operation = send_message_operation(opmessage_grp=[])
    with pytest.raises(ValidationError) as excinfo:
        _to_remote(translator, disk_full_alert(operation=[operation]))
    assert excinfo.value.field == "opmessage_grp or opmessage_usr"


def test_send_message_wire_payload(translator: ActionTranslator) -> None:
    operation = send_message_operation(
        esc_period="10m",
        opmessage=[{"default_msg": False, "subject": "Disk full", "message": "{HOST.NAME}"}],
        opmessage_usr=[{"userid": "3"}],
        opcondition=[{"value": "0"}],
    )
    wire = _to_remote(translator, disk_full_alert(operation=[operation]))["operations"][0]

    assert wire["operationtype"] == 0
    assert wire["esc_period"] == "600"
    assert wire["opmessage"] == {"default_msg": 0, "subject": "Disk full", "message": "{HOST.NAME}", "mediatypeid": "0"}
    assert wire["opmessage_grp"] == [{"usrgrpid": "7"}]
    assert wire["opmessage_usr"] == [{"userid": "3"}]
    assert wire["opconditions"] == [{"conditiontype": 14, "operator": 0, "value": "0"}]


def test_remote_command_with_global_script(translator: ActionTranslator) -> None:
    operation = {
        "operationtype": "remote_command",
        "opcommand": [{"type": "global_script", "scriptid": "4"}],
        "opcommand_hst": [{"hostid": "0"}],
    }
    wire = _to_remote(translator, disk_full_alert(operation=[operation]))["operations"][0]

    assert wire["operationtype"] == 1
    assert wire["opcommand"] == {"type": 4, "execute_on": 0, "scriptid": "4"}
    assert wire["opcommand_hst"] == [{"hostid": "0"}]
    assert wire["opcommand_grp"] == []


def test_remote_command_needs_a_script_id(translator: ActionTranslator) -> None:
    operation = {
        "operationtype": "remote_command",
        "opcommand": [{"type": "global_script"}],
        "opcommand_grp": [{"groupid": "2"}],
    }
    with pytest.raises(ValidationError) as excinfo:
        _to_remote(translator, disk_full_alert(operation=[operation]))
    assert excinfo.value.field == "scriptid"
    assert excinfo.value.path == "operation.0.opcommand.0"


def test_remote_command_needs_targets(translator: ActionTranslator) -> None:
    operation = {"operationtype": "remote_command", "opcommand": [{"command": "reboot"}]}
    with pytest.raises(ValidationError, match="opcommand_hst or opcommand_grp"):
        _to_remote(translator, disk_full_alert(operation=[operation]))


def test_inventory_and_host_operations(translator: ActionTranslator) -> None:
    operations = [
        {"operationtype": "set_host_inventory_mode", "inventory_mode": "automatic"},
        {"operationtype": "disable_host", "esc_step_from": 2, "esc_step_to": 2},
        {"operationtype": "link_to_template", "optemplate": [{"templateid": "10001"}]},
    ]
    wire = _to_remote(translator, disk_full_alert(eventsource="discovery", operation=operations))

    assert "pause_suppressed" not in wire
    assert [item["operationtype"] for item in wire["operations"]] == [10, 9, 6]
    assert wire["operations"][0]["opinventory"] == {"inventory_mode": 1}
    assert "opgroup" not in wire["operations"][1]
    assert wire["operations"][2]["optemplate"] == [{"templateid": "10001"}]


def test_inventory_mode_not_allowed_on_other_types(translator: ActionTranslator) -> None:
    config = disk_full_alert()
    config["operation"][0]["inventory_mode"] = "manual"
    with pytest.raises(ValidationError) as excinfo:
        _to_remote(translator, config)
    assert (excinfo.value.field, excinfo.value.reason) == ("inventory_mode", "not allowed for this operation type")


def test_pause_suppressed_only_for_trigger_actions(translator: ActionTranslator) -> None:
    assert _to_remote(translator, disk_full_alert(pause_suppressed=True))["pause_suppressed"] == 1
    with pytest.raises(ValidationError, match="pause_suppressed"):
        _to_remote(translator, disk_full_alert(eventsource="internal", pause_suppressed=True))


def test_filter_conditions_are_encoded(translator: ActionTranslator) -> None:
    action_filter = {
        "evaltype": "custom_expression",
        "formula": "A and B",
        "condition": [
            {"conditiontype": "trigger_severity", "operator": "greater_or_equal", "value": "4", "formulaid": "A"},
            {"conditiontype": "event_tag_value", "operator": "like", "value": "disk", "value2": "scope", "formulaid": "B"},
        ],
    }
    wire = _to_remote(translator, disk_full_alert(filter=[action_filter]))["filter"]

    assert wire["evaltype"] == 3
    assert wire["formula"] == "A and B"
    assert wire["conditions"][0] == {"conditiontype": 4, "operator": 5, "value": "4", "formulaid": "A"}
    assert wire["conditions"][1]["value2"] == "scope"


def test_filter_condition_must_match_event_source(translator: ActionTranslator) -> None:
    action_filter = {"condition": [{"conditiontype": "host_metadata", "value": "linux"}]}
    with pytest.raises(ValidationError, match="not valid for event source trigger"):
        _to_remote(translator, disk_full_alert(filter=[action_filter]))


def test_custom_expression_needs_formula(translator: ActionTranslator) -> None:
    action_filter = {"evaltype": "custom_expression", "condition": [{"conditiontype": "host", "value": "1", "formulaid": "A"}]}
    with pytest.raises(ValidationError) as excinfo:
        _to_remote(translator, disk_full_alert(filter=[action_filter]))
    assert excinfo.value.field == "formula"


def test_at_most_one_filter_block(translator: ActionTranslator) -> None:
    with pytest.raises(ValidationError, match="at most 1 item"):
        _to_remote(translator, disk_full_alert(filter=[{}, {}]))


def test_wrongly_typed_values_are_rejected(translator: ActionTranslator) -> None:
    with pytest.raises(ValidationError, match="status: must be a boolean"):
        _to_remote(translator, disk_full_alert(status="yes"))
    with pytest.raises(ValidationError, match="operation: must be a list"):
        _to_remote(translator, disk_full_alert(operation={"operationtype": "add_host"}))


def test_from_remote_decodes_server_strings(translator: ActionTranslator) -> None:
    remote = {
        "actionid": "31",
        "name": "disk-full-alert",
        "eventsource": "0",
        "status": "1",
        "esc_period": "1h",
        "pause_suppressed": "1",
        "def_shortdata": "Problem: {EVENT.NAME}",
        "filter": {"evaltype": "0", "formula": "", "conditions": []},
        "operations": [
            {
                "operationid": "7",
                "actionid": "31",
                "operationtype": "4",
                "esc_period": "0",
                "esc_step_from": "1",
                "esc_step_to": "1",
                "evaltype": "0",
                "opgroup": [{"operationid": "7", "groupid": "12"}],
            }
        ],
    }
    attrs = translator.from_remote(remote)

    assert attrs["actionid"] == "31"
    assert attrs["eventsource"] == "trigger"
    assert attrs["status"] is False
    assert attrs["pause_suppressed"] is True
    assert attrs["esc_period"] == "3600"
    assert attrs["def_shortdata"] == "Problem: {EVENT.NAME}"
    assert attrs["r_longdata"] == ""
    assert attrs["filter"] == []
    operation = attrs["operation"][0]
    assert operation["operationid"] == "7"
    assert operation["operationtype"] == "add_to_host_group"
    assert operation["esc_period"] == ""
    assert operation["evaltype"] == "and_or"
    assert operation["opgroup"] == [{"operationid": "7", "groupid": "12"}]
    assert operation["opmessage_grp"] == []


def test_from_remote_keeps_server_operation_order(translator: ActionTranslator) -> None:
    remote = {
        "actionid": "1",
        "name": "n",
        "eventsource": "1",
        "esc_period": "60",
        "operations": [
            {"operationid": "9", "operationtype": "9", "esc_step_from": "3", "esc_step_to": "3"},
            {"operationid": "2", "operationtype": "2", "esc_step_from": "1", "esc_step_to": "1"},
            {"operationid": "5", "operationtype": "8", "esc_step_from": "2", "esc_step_to": "2"},
        ],
    }
    attrs = translator.from_remote(remote)
    assert [op["operationid"] for op in attrs["operation"]] == ["9", "2", "5"]
    assert [op["operationtype"] for op in attrs["operation"]] == ["disable_host", "add_host", "enable_host"]


def test_from_remote_unknown_code_is_a_registry_mismatch(translator: ActionTranslator) -> None:
    remote = {"actionid": "1", "name": "n", "eventsource": "0", "esc_period": "60", "operations": [{"operationtype": "42"}]}
    with pytest.raises(RegistryMismatchError) as excinfo:
        translator.from_remote(remote)
    assert not isinstance(excinfo.value, InvalidEnumValue)
    assert excinfo.value.domain == "operation_type"


def test_custom_filter_survives_the_server(translator: ActionTranslator) -> None:
    action_filter = {
        "evaltype": "custom_expression",
        "formula": "A or B",
        "condition": [
            {"conditiontype": "host_group", "operator": "equals", "value": "2", "formulaid": "A"},
            {"conditiontype": "trigger_name", "operator": "like", "value": "disk", "formulaid": "B"},
        ],
    }
    server = FakeActionServer()
    actionid = server.create(translator.to_remote(InMemoryResourceData(disk_full_alert(filter=[action_filter]))))
    attrs = translator.from_remote(server.fetch(actionid))

    assert attrs["filter"] == [
        {
            "evaltype": "custom_expression",
            "formula": "A or B",
            "condition": [
                {"conditiontype": "host_group", "operator": "equals", "value": "2", "value2": "", "formulaid": "A"},
                {"conditiontype": "trigger_name", "operator": "like", "value": "disk", "value2": "", "formulaid": "B"},
            ],
        }
    ]


def test_round_trip_reproduces_mutable_fields(translator: ActionTranslator) -> None:
    config = disk_full_alert(
        status=False,
        pause_suppressed=True,
        r_shortdata="Resolved: {EVENT.NAME}",
        operation=[
            send_message_operation(esc_period="{$MSG_PERIOD}"),
            {"operationtype": "add_to_host_group", "esc_step_from": 3, "esc_step_to": 5, "evaltype": "or", "opgroup": [{"groupid": "12"}, {"groupid": "13"}]},
        ],
    )
    server = FakeActionServer()
    actionid = server.create(translator.to_remote(InMemoryResourceData(config)))
    attrs = translator.from_remote(server.fetch(actionid))

    assert attrs["status"] is False
    assert attrs["pause_suppressed"] is True
    assert attrs["esc_period"] == "3600"
    assert attrs["r_shortdata"] == "Resolved: {EVENT.NAME}"
    first, second = attrs["operation"]
    assert first["operationtype"] == "send_message"
    assert first["esc_period"] == "{$MSG_PERIOD}"
    assert (first["esc_step_from"], first["esc_step_to"]) == (1, 2)
    assert first["opmessage_grp"] == [{"usrgrpid": "7"}]
    assert first["opmessage"][0]["default_msg"] is True
    assert second["evaltype"] == "or"
    assert (second["esc_step_from"], second["esc_step_to"]) == (3, 5)
    assert [group["groupid"] for group in second["opgroup"]] == ["12", "13"]
    assert {group["operationid"] for group in second["opgroup"]} == {second["operationid"]}


def test_send_message_requires_a_message_block(translator: ActionTranslator) -> None:
    operation = send_message_operation()
    del operation["opmessage"]
    with pytest.raises(ValidationError) as excinfo:
        _to_remote(translator, disk_full_alert(operation=[operation]))
    assert (excinfo.value.field, excinfo.value.reason) == ("opmessage", "required for this operation type")
