"""Registry and discovery for operation kind implementations."""

from __future__ import annotations

import importlib
import pkgutil
from collections.abc import Callable

from contracts.action_enums import EnumDomain, tokens
from services.actions.base import OperationKind

KindType = type[OperationKind]

_KIND_REGISTRY: dict[str, KindType] = {}


def register_operation_kind(*operation_types: str) -> Callable[[KindType], KindType]:
    """Register an operation kind class for one or more operation types."""
    known = set(tokens(EnumDomain.OPERATION_TYPE))
    if not operation_types:
        raise ValueError("at least one operation type is required")
    for operation_type in operation_types:
        if operation_type not in known:
            raise ValueError(f"unknown operation type: {operation_type!r}")

    def _decorator(klass: KindType) -> KindType:
        for operation_type in operation_types:
            if operation_type in _KIND_REGISTRY:
                raise KeyError(f"Operation kind already registered for '{operation_type}'")
        for operation_type in operation_types:
            _KIND_REGISTRY[operation_type] = klass
        klass.operation_types = tuple(operation_types)
        return klass

    return _decorator


def list_operation_types() -> list[str]:
    """Return registered operation types in deterministic order."""
    return sorted(_KIND_REGISTRY.keys())


class OperationKindRegistry:
    """Operation kind registry facade with discovery and instantiation helpers."""

    def discover(self, package_name: str = "services.actions.operations") -> None:
        """Import all modules under the operations package."""
        package = importlib.import_module(package_name)
        package_path = getattr(package, "__path__", None)
        if package_path is None:
            return
        prefix = package.__name__ + "."
        for module_info in pkgutil.walk_packages(package_path, prefix):
            importlib.import_module(module_info.name)

    def list_types(self) -> list[str]:
        return list_operation_types()

    def get_class(self, operation_type: str) -> KindType | None:
        return _KIND_REGISTRY.get(operation_type)

    def create(self, operation_type: str) -> OperationKind:
        """Instantiate the kind serving ``operation_type``."""
        klass = self.get_class(operation_type)
        if klass is None:
            raise KeyError(f"No operation kind registered for {operation_type!r}")
        return klass()
