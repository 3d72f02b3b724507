"""Base contract for operation kinds."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from services.actions.models import OperationSpec

if TYPE_CHECKING:
    from services.actions.rules import OperationRule


class OperationKind(ABC):
    """One variant of the operation tagged union.

    A kind owns the operation types it serves, the payload fields that are
    meaningful for them, the rules evaluated on the raw record before parsing,
    and the mapping of its payload to and from the wire format.
    """

    kind: str = ""
    operation_types: tuple[str, ...] = ()
    payload_fields: tuple[str, ...] = ()
    rules: tuple[OperationRule, ...] = ()

    def validate(self, operation: OperationSpec) -> None:
        """Cross-field checks on the parsed operation."""
        _ = operation

    @abstractmethod
    def parse(self, record: Mapping[str, Any], common: Mapping[str, Any]) -> OperationSpec:
        """Build the typed variant from a rule-checked attribute record."""
        raise NotImplementedError

    @abstractmethod
    def to_wire(self, operation: OperationSpec) -> dict[str, Any]:
        """Return the kind-specific wire keys for ``operation``."""
        raise NotImplementedError

    @abstractmethod
    def from_wire(self, remote: Mapping[str, Any]) -> dict[str, Any]:
        """Return the kind-specific attributes of a server operation."""
        raise NotImplementedError
