"""Tests for the zbx-action command line wiring."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

import cli
from contracts.errors import RemoteError
from tests.zabbix_mocks import FakeActionServer, disk_full_alert


def _write(path: Path, payload: Any) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def _state(path: Path) -> dict[str, Any]:
    return json.loads(path.read_text(encoding="utf-8"))


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    for key in ("ZABBIX_URL", "ZABBIX__URL", "ZABBIX_API_TOKEN", "ZABBIX__API_TOKEN"):
        monkeypatch.delenv(key, raising=False)


def test_full_lifecycle_through_the_cli(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    server = FakeActionServer()
    config = _write(tmp_path / "action.json", disk_full_alert())
    state = tmp_path / "state.json"

    assert cli.main(["create", "--config", str(config), "--state", str(state)], client=server) == 0
    created = _state(state)
    assert created["id"] == "100"
    assert created["attributes"]["esc_period"] == "3600"
    assert json.loads(capsys.readouterr().out) == {"operation": "create", "state": "present", "actionid": "100"}

    _write(config, disk_full_alert(status=False))
    assert cli.main(["update", "--config", str(config), "--state", str(state)], client=server) == 0
    assert _state(state)["attributes"]["status"] is False

    assert cli.main(["read", "--state", str(state)], client=server) == 0
    assert _state(state)["attributes"]["name"] == "disk-full-alert"

    assert cli.main(["delete", "--state", str(state)], client=server) == 0
    assert _state(state) == {"id": "", "attributes": {}}
    assert server.actions == {}


def test_read_of_vanished_action_clears_state(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    state = _write(tmp_path / "state.json", {"id": "77", "attributes": {"name": "old"}})

    assert cli.main(["read", "--state", str(state)], client=FakeActionServer()) == 0
    assert _state(state)["id"] == ""
    assert json.loads(capsys.readouterr().out)["state"] == "gone"


def test_create_keeps_identifier_when_read_back_fails(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    server = FakeActionServer(fail_on={"fetch": RemoteError("Session terminated")})
    config = _write(tmp_path / "action.json", disk_full_alert())
    state = tmp_path / "state.json"

    assert cli.main(["create", "--config", str(config), "--state", str(state)], client=server) == 1
    assert "Session terminated" in capsys.readouterr().err
    assert list(server.actions) == ["100"]
    assert _state(state)["id"] == "100"

    assert cli.main(["update", "--config", str(config), "--state", str(state)], client=server) == 0
    assert _state(state)["attributes"]["name"] == "disk-full-alert"
    assert list(server.actions) == ["100"]


def test_validation_errors_exit_non_zero(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    server = FakeActionServer()
    config = _write(tmp_path / "action.json", disk_full_alert(esc_period="5s"))
    state = tmp_path / "state.json"

    assert cli.main(["create", "--config", str(config), "--state", str(state)], client=server) == 1
    assert "error: esc_period: below minimum" in capsys.readouterr().err
    assert server.calls == []
    assert not state.exists()


def test_create_refuses_tracked_action(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    config = _write(tmp_path / "action.json", disk_full_alert())
    state = _write(tmp_path / "state.json", {"id": "5", "attributes": {}})

    assert cli.main(["create", "--config", str(config), "--state", str(state)], client=FakeActionServer()) == 1
    assert "use update" in capsys.readouterr().err


def test_missing_config_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code = cli.main(
        ["create", "--config", str(tmp_path / "nope.json"), "--state", str(tmp_path / "s.json")],
        client=FakeActionServer(),
    )
    assert code == 1
    assert "config file not found" in capsys.readouterr().err


def test_malformed_state_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    state = tmp_path / "state.json"
    state.write_text("{not json", encoding="utf-8")

    assert cli.main(["read", "--state", str(state)], client=FakeActionServer()) == 1
    assert "state file is not valid JSON" in capsys.readouterr().err


def test_missing_connection_settings(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["read", "--state", str(tmp_path / "state.json")]) == 1
    assert "ZABBIX_URL" in capsys.readouterr().err


def test_version_flag(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--version"])
    assert excinfo.value.code == 0
    assert "zbx-action" in capsys.readouterr().out


def test_invalid_settings_exit_non_zero(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setenv("ZABBIX_TIMEOUT", "0")
    assert cli.main(["read", "--state", str(tmp_path / "state.json")], client=FakeActionServer()) == 1
    assert "invalid settings" in capsys.readouterr().err
