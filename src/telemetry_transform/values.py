"""Value types flowing through getters and setters, and the coercion table.

Every value read from or written to a record is classified into one
ValueType. Writes go through ``coerce`` which consults a fixed table of
allowed (source, target) pairs; anything not in the table is a
TypeMismatchError. Maps and slices are copied on the way in so a record
never ends up sharing a container with another record.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import Any

from telemetry_transform.errors import TypeMismatchError


class ValueType(str, Enum):
    NONE = "none"
    STRING = "string"
    BOOL = "bool"
    INT = "int"
    DOUBLE = "double"
    BYTES = "bytes"
    MAP = "map"
    SLICE = "slice"
    # Declaration-only: a field that holds any value (attribute values, log body)
    ANY = "any"


CONCRETE_TYPES: tuple[ValueType, ...] = tuple(t for t in ValueType if t is not ValueType.ANY)


def value_type_of(value: Any) -> ValueType:
    """Classify a Python value. Raises TypeMismatchError for foreign objects."""
    if value is None:
        return ValueType.NONE
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return ValueType.BOOL
    if isinstance(value, int):
        return ValueType.INT
    if isinstance(value, float):
        return ValueType.DOUBLE
    if isinstance(value, str):
        return ValueType.STRING
    if isinstance(value, (bytes, bytearray)):
        return ValueType.BYTES
    if isinstance(value, dict):
        return ValueType.MAP
    if isinstance(value, (list, tuple)):
        return ValueType.SLICE
    raise TypeMismatchError(f"Unsupported value of type {type(value).__name__}")


def copy_value(value: Any) -> Any:
    """Return a detached copy of a value, validating nested contents."""
    vtype = value_type_of(value)
    if vtype is ValueType.MAP:
        copied: dict[str, Any] = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise TypeMismatchError(
                    f"Map keys must be strings, got {type(key).__name__}"
                )
            copied[key] = copy_value(item)
        return copied
    if vtype is ValueType.SLICE:
        return [copy_value(item) for item in value]
    if vtype is ValueType.BYTES:
        return bytes(value)
    if vtype is ValueType.INT:
        # Drop IntEnum subclasses so records only carry plain ints
        return int(value)
    return value


_COERCIONS: dict[tuple[ValueType, ValueType], Callable[[Any], Any]] = {
    **{(t, t): copy_value for t in CONCRETE_TYPES},
    **{(t, ValueType.ANY): copy_value for t in CONCRETE_TYPES},
    (ValueType.INT, ValueType.DOUBLE): float,
}


def can_coerce(source: ValueType, target: ValueType) -> bool:
    return (source, target) in _COERCIONS


def coerce(value: Any, target: ValueType) -> Any:
    """Convert *value* for storage in a location declared as *target*.

    Raises:
        TypeMismatchError: If the (source, target) pair is not allowed.
    """
    source = value_type_of(value)
    try:
        convert = _COERCIONS[(source, target)]
    except KeyError:
        raise TypeMismatchError(
            f"Cannot assign {source.value} value to {target.value} location"
        ) from None
    return convert(value)
