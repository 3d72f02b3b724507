"""Action resource reconciliation engine.

This package contains:
- operation kind contracts (`base.py`), rules (`rules.py`) and registry (`registry.py`)
- built-in operation kinds (`operations/`)
- the translator between attribute store and wire format (`translator.py`)
- the lifecycle reconciler (`reconciler.py`)
"""

from services.actions.audit import (
    InMemoryLifecycleAuditSink,
    LifecycleAuditEvent,
    NoopLifecycleAuditSink,
)
from services.actions.base import OperationKind
from services.actions.reconciler import (
    ActionReconciler,
    LifecycleOutcome,
    ResourceState,
    check_immutable_fields,
)
from services.actions.registry import OperationKindRegistry, list_operation_types, register_operation_kind
from services.actions.resource_data import InMemoryResourceData
from services.actions.translator import ActionTranslator

__all__ = [
    "ActionReconciler",
    "ActionTranslator",
    "InMemoryLifecycleAuditSink",
    "InMemoryResourceData",
    "LifecycleAuditEvent",
    "LifecycleOutcome",
    "NoopLifecycleAuditSink",
    "OperationKind",
    "OperationKindRegistry",
    "ResourceState",
    "check_immutable_fields",
    "list_operation_types",
    "register_operation_kind",
]
