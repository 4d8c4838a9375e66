"""set: write a value to a path."""

from __future__ import annotations

from telemetry_transform.contexts.base import TransformContext
from telemetry_transform.expressions import (
    ExprFunc,
    Getter,
    GetSetter,
    LiteralGetter,
    PathGetSetter,
    PathGetter,
)
from telemetry_transform.values import ValueType, can_coerce, value_type_of


def _declared_type(getter: Getter) -> ValueType | None:
    """The type a getter is known to produce before any record is seen."""
    if isinstance(getter, LiteralGetter):
        return value_type_of(getter.value)
    if isinstance(getter, (PathGetter, PathGetSetter)) and not getter.accessor.keys:
        declared = getter.accessor.field.value_type
        return None if declared is ValueType.ANY else declared
    return None


def set_value(target: GetSetter, value: Getter) -> ExprFunc:
    """Write the value to the target path. A None value is ignored."""
    source = _declared_type(value)
    destination = _declared_type(target)
    if (
        source is not None
        and source is not ValueType.NONE
        and destination is not None
        and not can_coerce(source, destination)
    ):
        raise ValueError(f"cannot assign {source.value} value to {destination.value} field")

    def assign(ctx: TransformContext) -> None:
        resolved = value.get(ctx)
        if resolved is not None:
            target.set(ctx, resolved)
        return None

    return assign
