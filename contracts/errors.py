"""Error taxonomy for the action reconciliation engine.

Local errors (validation, enum, immutability) are raised before any remote
call. Remote errors (``NotFound``, ``RemoteError``) come from the client
collaborator and are passed through unchanged.
"""

from __future__ import annotations

from typing import Any


class ActionResourceError(Exception):
    """Base class for every error raised by the action engine."""


class ValidationError(ActionResourceError, ValueError):
    """Raised when local input is missing, malformed or out of range."""

    def __init__(self, field: str, reason: str, *, path: str = "") -> None:
        location = f"{path}.{field}" if path else field
        super().__init__(f"{location}: {reason}")
        self.field = field
        self.reason = reason
        self.path = path


class InvalidEnumValue(ActionResourceError, ValueError):
    """Raised when a token (or code) is not part of an enum domain."""

    def __init__(self, domain: str, value: Any) -> None:
        super().__init__(f"{value!r} is not a valid {domain}")
        self.domain = domain
        self.value = value


class RegistryMismatchError(ActionResourceError):
    """Raised when the server returns a code the local registries do not know.

    This is an internal-consistency failure (server and engine disagree on an
    enum vocabulary), not a user input error.
    """

    def __init__(self, domain: str, value: Any) -> None:
        super().__init__(f"server returned unknown {domain} code {value!r}")
        self.domain = domain
        self.value = value


class ImmutableFieldChanged(ActionResourceError):
    """Raised when an update tries to change a create-only field."""

    def __init__(self, field: str) -> None:
        super().__init__(f"{field} cannot be changed in place; the action must be recreated")
        self.field = field


class NotFound(ActionResourceError):
    """Raised by the remote client when the referenced action does not exist."""

    def __init__(self, identifier: str) -> None:
        super().__init__(f"action {identifier!r} not found")
        self.identifier = identifier


class RemoteError(ActionResourceError):
    """Opaque transport or server failure, surfaced verbatim."""

    def __init__(self, message: str, *, code: int | None = None, data: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.data = data


__all__ = [
    "ActionResourceError",
    "ValidationError",
    "InvalidEnumValue",
    "RegistryMismatchError",
    "ImmutableFieldChanged",
    "NotFound",
    "RemoteError",
]
