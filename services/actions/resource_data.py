"""In-memory attribute store for one declared action."""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any

from contracts.action_schema import ACTION_SCHEMA, FieldType, ResourceSchema


def _merge_computed(schema: ResourceSchema, desired: Any, prior: Any) -> Any:
    """Carry computed fields of nested records from prior state, by position."""
    if not isinstance(desired, list) or not isinstance(prior, list):
        return desired
    merged: list[Any] = []
    for index, item in enumerate(desired):
        if not isinstance(item, Mapping) or index >= len(prior) or not isinstance(prior[index], Mapping):
            merged.append(item)
            continue
        record = dict(item)
        for name, spec in schema.fields.items():
            if spec.computed and not record.get(name) and prior[index].get(name):
                record[name] = prior[index][name]
            elif spec.type is FieldType.LIST and spec.elem is not None and name in record:
                record[name] = _merge_computed(spec.elem, record[name], prior[index].get(name))
        merged.append(record)
    return merged


class InMemoryResourceData:
    """Desired configuration plus engine-written state.

    ``get`` returns the configured value. Once a configuration is given, a
    declared field missing from it reads as its schema default, so removing
    an optional field resets it; only computed fields fall back to state.
    Without a configuration (read and delete) every field reads from state.
    Computed fields of nested records (operation ids) are filled in from
    state by position. ``set`` only ever writes state.
    """

    def __init__(
        self,
        config: Mapping[str, Any] | None = None,
        *,
        state: Mapping[str, Any] | None = None,
        resource_id: str = "",
        schema: ResourceSchema = ACTION_SCHEMA,
    ) -> None:
        self._config = copy.deepcopy(dict(config or {}))
        self._planned = config is not None
        self._state = copy.deepcopy(dict(state or {}))
        self._id = str(resource_id or "")
        self._schema = schema

    def id(self) -> str:
        return self._id

    def set_id(self, value: str) -> None:
        self._id = str(value or "")

    def get(self, key: str) -> Any:
        value, _ = self.get_ok(key)
        return value

    def get_ok(self, key: str) -> tuple[Any, bool]:
        spec = self._schema.fields.get(key)
        if key not in self._config:
            if self._planned and spec is not None and not spec.computed:
                return self._schema.defaults().get(key), False
            return copy.deepcopy(self._state.get(key)), False
        value = copy.deepcopy(self._config[key])
        if spec is not None and spec.elem is not None:
            value = _merge_computed(spec.elem, value, self._state.get(key))
        return value, True

    def set(self, key: str, value: Any) -> None:
        self._state[key] = copy.deepcopy(value)

    def get_change(self, key: str) -> tuple[Any, Any]:
        return copy.deepcopy(self._state.get(key)), self.get(key)

    def has_change(self, key: str) -> bool:
        if key not in self._state:
            return False
        prior, desired = self.get_change(key)
        return prior != desired

    def update_config(self, **values: Any) -> None:
        """Change the desired configuration (as a new plan would)."""
        self._config.update(copy.deepcopy(values))
        self._planned = True

    def config(self) -> dict[str, Any]:
        return copy.deepcopy(self._config)

    def state(self) -> dict[str, Any]:
        return copy.deepcopy(self._state)

    def clear_state(self) -> None:
        self._state.clear()
