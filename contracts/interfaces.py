"""
Protocol definitions for the engine's two collaborators.

The reconciler depends only on these contracts:
- an attribute store holding the declarative resource (``ResourceDataProtocol``)
- a remote action-management client (``ActionClientProtocol``)

Usage:
    from contracts.interfaces import ActionClientProtocol, ResourceDataProtocol

    # In production, use infra.zabbix_client.ZabbixActionClient
    # In tests, use tests.zabbix_mocks.FakeActionServer
"""

from __future__ import annotations

from collections.abc import Set
from typing import Any, Protocol, runtime_checkable

from contracts.typed_dicts import ActionWireFormat


@runtime_checkable
class ResourceDataProtocol(Protocol):
    """Generic attribute store for one declared resource.

    Nested records are mappings exposing the same keys as their schema.
    An empty identifier means "not yet created".
    """

    def id(self) -> str:
        """Return the resource identifier ("" before creation)."""
        ...

    def set_id(self, value: str) -> None:
        """Assign or clear ("") the resource identifier."""
        ...

    def get(self, key: str) -> Any:
        """Return the desired value for ``key`` (None when unset)."""
        ...

    def get_ok(self, key: str) -> tuple[Any, bool]:
        """Return the value and whether it was explicitly set."""
        ...

    def set(self, key: str, value: Any) -> None:
        """Record the authoritative value for ``key``."""
        ...

    def get_change(self, key: str) -> tuple[Any, Any]:
        """Return ``(prior, desired)`` for ``key``."""
        ...

    def has_change(self, key: str) -> bool:
        """Return True when the desired value differs from the prior one."""
        ...


@runtime_checkable
class ActionClientProtocol(Protocol):
    """Typed action-management operations on the remote server.

    ``fetch``/``update`` raise ``NotFound`` for unknown identifiers; every
    other failure is a ``RemoteError``. ``delete`` treats unknown identifiers
    as a no-op or raises ``NotFound``; both are acceptable to callers.
    """

    def create(self, action: ActionWireFormat) -> str:
        """Create one action and return its assigned identifier."""
        ...

    def fetch(self, actionid: str) -> ActionWireFormat:
        """Return the action with its filter and operations."""
        ...

    def update(self, action: ActionWireFormat) -> None:
        """Replace the action identified by ``action['actionid']``."""
        ...

    def delete(self, actionids: Set[str]) -> None:
        """Delete the given actions."""
        ...


__all__ = ["ActionClientProtocol", "ResourceDataProtocol"]
