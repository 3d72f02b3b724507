"""
zbx-action CLI (flat-layout friendly).

Usage
-----
zbx-action create --config action.json --state state.json
zbx-action read   --state state.json
zbx-action update --config action.json --state state.json
zbx-action delete --state state.json

The config file holds the desired action attributes. The state file holds
``{"id": ..., "attributes": {...}}`` and is rewritten after every successful call.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, List, Optional

from contracts.errors import ActionResourceError
from contracts.interfaces import ActionClientProtocol
from infra.config import ValidationError as SettingsValidationError
from infra.config import get_settings
from infra.logging_config import clear_lifecycle_context, set_lifecycle_context, setup_logging
from infra.zabbix_client import ZabbixActionClient
from services.actions.reconciler import ActionReconciler, LifecycleOutcome
from services.actions.resource_data import InMemoryResourceData
from version import ENGINE_NAME, ENGINE_VERSION


class CliError(Exception):
    """Usage or input problem reported as a one-line message."""


def _load_json(path: Path, *, what: str) -> dict[str, Any]:
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise CliError(f"{what} file not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise CliError(f"{what} file is not valid JSON: {path} ({exc.msg})") from exc
    if not isinstance(payload, dict):
        raise CliError(f"{what} file must hold a JSON object: {path}")
    return payload


def _load_state(path: Path) -> tuple[str, dict[str, Any]]:
    """Return ``(id, attributes)``; a missing state file means nothing was created yet."""
    if not path.exists():
        return "", {}
    state = _load_json(path, what="state")
    attributes = state.get("attributes") or {}
    if not isinstance(attributes, dict):
        raise CliError(f"state attributes must be a JSON object: {path}")
    return str(state.get("id") or ""), attributes


def _write_state(path: Path, data: InMemoryResourceData) -> None:
    payload = {"id": data.id(), "attributes": data.state() if data.id() else {}}
    path.write_text(json.dumps(payload, indent=2, sort_keys=True) + "\n", encoding="utf-8")


def _build_data(args: argparse.Namespace) -> InMemoryResourceData:
    resource_id, attributes = _load_state(Path(args.state))
    config = _load_json(Path(args.config), what="config") if getattr(args, "config", None) else None
    return InMemoryResourceData(config, state=attributes, resource_id=resource_id)


def _make_client() -> ActionClientProtocol:
    settings = get_settings()
    if not settings.zabbix.is_configured():
        raise CliError("Missing ZABBIX_URL / ZABBIX_API_TOKEN (env vars or .env).")
    return ZabbixActionClient.from_settings(settings)


def _print_outcome(outcome: LifecycleOutcome) -> None:
    print(json.dumps({"operation": outcome.operation, "state": str(outcome.state), "actionid": outcome.actionid}))


def cmd_create(args: argparse.Namespace, reconciler: ActionReconciler) -> None:
    data = _build_data(args)
    if data.id():
        raise CliError(f"state already tracks action {data.id()}; use update")
    try:
        outcome = reconciler.create(data)
    finally:
        # keep the id of an action that exists even if reading it back failed
        if data.id():
            _write_state(Path(args.state), data)
    _print_outcome(outcome)


def cmd_read(args: argparse.Namespace, reconciler: ActionReconciler) -> None:
    data = _build_data(args)
    outcome = reconciler.read(data)
    _write_state(Path(args.state), data)
    _print_outcome(outcome)


def cmd_update(args: argparse.Namespace, reconciler: ActionReconciler) -> None:
    data = _build_data(args)
    outcome = reconciler.update(data)
    _write_state(Path(args.state), data)
    _print_outcome(outcome)


def cmd_delete(args: argparse.Namespace, reconciler: ActionReconciler) -> None:
    data = _build_data(args)
    outcome = reconciler.delete(data)
    _write_state(Path(args.state), data)
    _print_outcome(outcome)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog=ENGINE_NAME, description="Reconcile one Zabbix action")
    p.add_argument("--version", action="version", version=f"{ENGINE_NAME} {ENGINE_VERSION}")
    p.add_argument("--log-level", default=None, help="Override ZBXACT_LOG_LEVEL.")
    p.add_argument("--json-logs", action="store_true", default=None, help="Emit JSON logs on stderr.")
    sub = p.add_subparsers(dest="cmd", required=True)

    def add_state(sp: argparse.ArgumentParser) -> None:
        sp.add_argument("--state", required=True, help="State file path (created on first write).")

    sp = sub.add_parser("create", help="Create the action and record its id in the state file.")
    sp.add_argument("--config", required=True, help="Desired action attributes (JSON).")
    add_state(sp)
    sp.set_defaults(func=cmd_create)

    sp = sub.add_parser("read", help="Refresh the state file from the server.")
    add_state(sp)
    sp.set_defaults(func=cmd_read)

    sp = sub.add_parser("update", help="Push the desired attributes to the existing action.")
    sp.add_argument("--config", required=True, help="Desired action attributes (JSON).")
    add_state(sp)
    sp.set_defaults(func=cmd_update)

    sp = sub.add_parser("delete", help="Delete the action tracked by the state file.")
    add_state(sp)
    sp.set_defaults(func=cmd_delete)

    return p


def main(argv: Optional[List[str]] = None, *, client: ActionClientProtocol | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    set_lifecycle_context(operation=args.cmd, state_file=str(args.state))
    try:
        setup_logging(level=args.log_level, json_logs=args.json_logs)
        reconciler = ActionReconciler(client=client or _make_client())
        args.func(args, reconciler)
    except (ActionResourceError, CliError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    except SettingsValidationError as exc:
        print(f"error: invalid settings: {exc.errors()[0].get('msg', exc)}", file=sys.stderr)
        return 1
    finally:
        clear_lifecycle_context()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
