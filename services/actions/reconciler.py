"""Lifecycle orchestration for one action resource.

States: absent -> (create) -> pending -> (read) -> present; present ->
(read reports NotFound) -> gone; present/gone -> (delete) -> absent.
Local validation and immutability checks always run before the remote call.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

from contracts.action_schema import ACTION_SCHEMA, OPERATION_SCHEMA
from contracts.errors import (
    ActionResourceError,
    ImmutableFieldChanged,
    NotFound,
    RemoteError,
    ValidationError,
)
from contracts.interfaces import ActionClientProtocol, ResourceDataProtocol
from services.actions.audit import LifecycleAuditEvent, LifecycleAuditSink, NoopLifecycleAuditSink
from services.actions.translator import ActionTranslator

logger = logging.getLogger(__name__)


class ResourceState(StrEnum):
    ABSENT = "absent"
    PENDING = "pending"
    PRESENT = "present"
    GONE = "gone"


@dataclass(frozen=True)
class LifecycleOutcome:
    """Result of one lifecycle call."""

    operation: str
    state: ResourceState
    actionid: str = ""


def check_immutable_fields(data: ResourceDataProtocol) -> None:
    """Reject changes to create-only fields, before any remote call.

    Operations are matched by ``operationid``; records without one are new
    and may carry any type.
    """
    for name in ACTION_SCHEMA.immutable_fields():
        if data.has_change(name):
            raise ImmutableFieldChanged(name)
    prior, desired = data.get_change("operation")
    prior_by_id = {
        str(record.get("operationid")): record
        for record in prior or []
        if isinstance(record, dict) and record.get("operationid")
    }
    for record in desired or []:
        existing = prior_by_id.get(str(record.get("operationid") or ""))
        if existing is None:
            continue
        for name in OPERATION_SCHEMA.immutable_fields():
            if record.get(name) != existing.get(name):
                raise ImmutableFieldChanged(name)


class ActionReconciler:
    """Create, read, update and delete one action against the remote client."""

    def __init__(
        self,
        *,
        client: ActionClientProtocol,
        translator: ActionTranslator | None = None,
        audit_sink: LifecycleAuditSink | None = None,
    ) -> None:
        self._client = client
        self._translator = translator or ActionTranslator()
        self._audit_sink = audit_sink or NoopLifecycleAuditSink()

    def create(self, data: ResourceDataProtocol) -> LifecycleOutcome:
        return self._audited("create", data, self._create)

    def read(self, data: ResourceDataProtocol) -> LifecycleOutcome:
        return self._audited("read", data, self._read)

    def update(self, data: ResourceDataProtocol) -> LifecycleOutcome:
        return self._audited("update", data, self._update)

    def delete(self, data: ResourceDataProtocol) -> LifecycleOutcome:
        return self._audited("delete", data, self._delete)

    def _create(self, data: ResourceDataProtocol) -> LifecycleOutcome:
        data.set_id("")
        request = self._translator.to_remote(data)
        actionid = str(self._client.create(request) or "")
        if not actionid:
            raise RemoteError("server did not return an action identifier")
        logger.info("Created action id is %s", actionid)
        data.set_id(actionid)
        data.set("actionid", actionid)
        # pending until the server-normalized values are read back
        return self._read(data, operation="create")

    def _read(self, data: ResourceDataProtocol, *, operation: str = "read") -> LifecycleOutcome:
        actionid = data.id()
        if not actionid:
            return LifecycleOutcome(operation=operation, state=ResourceState.ABSENT)
        logger.info("Will read action with id %s", actionid)
        try:
            remote = self._client.fetch(actionid)
        except NotFound:
            logger.warning("Action %s no longer exists; dropping it from state", actionid)
            data.set_id("")
            return LifecycleOutcome(operation=operation, state=ResourceState.GONE, actionid=actionid)
        attrs = self._translator.from_remote(remote)
        attrs["actionid"] = attrs.get("actionid") or actionid
        for name, value in attrs.items():
            data.set(name, value)
        data.set_id(attrs["actionid"])
        logger.info("Action name is %s", attrs.get("name"))
        return LifecycleOutcome(operation=operation, state=ResourceState.PRESENT, actionid=attrs["actionid"])

    def _update(self, data: ResourceDataProtocol) -> LifecycleOutcome:
        actionid = data.id()
        if not actionid:
            raise ValidationError("actionid", "resource has not been created")
        check_immutable_fields(data)
        request = self._translator.to_remote(data)
        self._client.update(request)
        logger.info("Updated action id is %s", actionid)
        return self._read(data, operation="update")

    def _delete(self, data: ResourceDataProtocol) -> LifecycleOutcome:
        actionid = data.id()
        if not actionid:
            raise ValidationError("actionid", "resource has not been created")
        try:
            self._client.delete({actionid})
        except NotFound:
            logger.warning("Action %s was already deleted", actionid)
        else:
            logger.info("Deleted action id %s", actionid)
        data.set_id("")
        return LifecycleOutcome(operation="delete", state=ResourceState.ABSENT, actionid=actionid)

    def _audited(
        self,
        operation: str,
        data: ResourceDataProtocol,
        handler: Callable[[ResourceDataProtocol], LifecycleOutcome],
    ) -> LifecycleOutcome:
        """Run one lifecycle handler and emit exactly one audit event."""
        actionid = data.id()
        try:
            outcome = handler(data)
        except ActionResourceError as exc:
            # a created action that could not be read back yet stays pending
            state = ResourceState.PENDING if operation == "create" and data.id() else ""
            self._record(
                operation,
                data.id() or actionid,
                ok=False,
                state=state,
                error=type(exc).__name__,
                message=str(exc),
            )
            raise
        self._record(operation, outcome.actionid or actionid, ok=True, state=outcome.state)
        return outcome

    def _record(
        self,
        operation: str,
        actionid: str,
        *,
        ok: bool,
        state: str = "",
        error: str = "",
        message: str = "",
    ) -> None:
        self._audit_sink.record_event(
            LifecycleAuditEvent(
                operation=operation,
                actionid=actionid,
                state=str(state),
                ok=ok,
                error=error,
                message=message,
            )
        )
