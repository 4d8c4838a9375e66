"""Shared surface of every context adapter.

A context borrows one record together with its enclosing instrumentation
scope and resource for the duration of a single evaluation. It never
copies them; statements mutate the record through it in place.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, ClassVar

from telemetry_transform.paths import Field, FieldEntry, Struct
from telemetry_transform.records import InstrumentationScope, Resource
from telemetry_transform.values import ValueType


def attribute(name: str, value_type: ValueType, *, writable: bool = True) -> Field:
    """A field stored as a plain attribute of its owner."""

    def get(owner: Any) -> Any:
        return getattr(owner, name)

    if not writable:
        return Field(value_type, get)

    def set_(owner: Any, value: Any) -> None:
        setattr(owner, name, value)

    return Field(value_type, get, set_)


def on(owner: Callable[[Any], Any], fields: Mapping[str, Field]) -> dict[str, FieldEntry]:
    """Re-root a field table so its fields are reached through *owner*."""
    return {name: field.through(owner) for name, field in fields.items()}


RESOURCE_FIELDS: dict[str, Field] = {
    "attributes": attribute("attributes", ValueType.MAP),
    "dropped_attributes_count": attribute("dropped_attributes_count", ValueType.INT),
}

SCOPE_FIELDS: dict[str, Field] = {
    "name": attribute("name", ValueType.STRING),
    "version": attribute("version", ValueType.STRING),
    "attributes": attribute("attributes", ValueType.MAP),
    "dropped_attributes_count": attribute("dropped_attributes_count", ValueType.INT),
}


class TransformContext:
    """Per-record binding handed to getters, setters and functions."""

    kind: ClassVar[str]
    fields: ClassVar[Mapping[str, FieldEntry]]

    def __init__(
        self,
        item: Any,
        scope: InstrumentationScope | None,
        resource: Resource,
    ) -> None:
        self._item = item
        self._scope = scope
        self._resource = resource

    def get_item(self) -> Any:
        return self._item

    def get_instrumentation_scope(self) -> InstrumentationScope | None:
        return self._scope

    def get_resource(self) -> Resource:
        return self._resource

    def __repr__(self) -> str:
        return f"{type(self).__name__}({type(self._item).__name__})"


def enclosing_fields() -> dict[str, FieldEntry]:
    """The ``resource`` and ``instrumentation_scope`` hops shared by record contexts."""
    return {
        "resource": Struct(TransformContext.get_resource, RESOURCE_FIELDS),
        "instrumentation_scope": Struct(
            TransformContext.get_instrumentation_scope, SCOPE_FIELDS
        ),
    }
