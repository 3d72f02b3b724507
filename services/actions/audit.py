"""Audit sink primitives for action lifecycle events."""

from __future__ import annotations

from typing import NamedTuple, Protocol


class LifecycleAuditEvent(NamedTuple):
    """Immutable record of one lifecycle call."""

    operation: str  # create | read | update | delete
    actionid: str
    state: str
    ok: bool
    error: str = ""
    message: str = ""


class LifecycleAuditSink(Protocol):
    """Protocol for lifecycle audit event sinks."""

    def sink_name(self) -> str:
        """Return deterministic sink name for diagnostics."""

    def record_event(self, event: LifecycleAuditEvent) -> None:
        """Record one lifecycle event."""


class NoopLifecycleAuditSink:
    """No-op sink used when no audit destination is configured."""

    def sink_name(self) -> str:
        return "noop"

    def record_event(self, event: LifecycleAuditEvent) -> None:
        _ = event


class InMemoryLifecycleAuditSink:
    """In-memory audit sink for deterministic unit tests."""

    def __init__(self) -> None:
        self._events: list[LifecycleAuditEvent] = []

    def record_event(self, event: LifecycleAuditEvent) -> None:
        """Store audit event in insertion order."""
        self._events.append(event)

    def sink_name(self) -> str:
        return "in_memory"

    def events(self) -> list[LifecycleAuditEvent]:
        """Return a copy of recorded events."""
        return list(self._events)
