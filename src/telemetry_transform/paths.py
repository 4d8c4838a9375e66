"""Path resolution: turn a field path into typed accessors for a context kind.

A context kind publishes a field table: a mapping of names to ``Field``
leaves (a typed get/set pair) or ``Struct`` nodes (a hop into a nested
object such as the enclosing resource). ``resolve_path`` walks that
table once, at bind time, and returns a ``PathAccessor``. Every
structural problem with a path is reported there as a BindError; at run
time an accessor can only fail on data the record actually holds.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Union

from telemetry_transform.errors import BindError, PathNotFoundError, TypeMismatchError
from telemetry_transform.values import ValueType, coerce

if TYPE_CHECKING:
    from telemetry_transform.contexts.base import TransformContext
    from telemetry_transform.models import PathSegment


@dataclass(frozen=True)
class Field:
    """A typed leaf location. ``get``/``set`` receive the owning object."""

    value_type: ValueType
    get: Callable[[Any], Any]
    set: Callable[[Any, Any], None] | None = None

    def through(self, owner: Callable[[Any], Any]) -> Field:
        """Return the same field reached by first applying *owner*."""
        getter = self.get
        setter = self.set

        def get(obj: Any) -> Any:
            return getter(owner(obj))

        if setter is None:
            return Field(self.value_type, get)

        def set_(obj: Any, value: Any) -> None:
            setter(owner(obj), value)

        return Field(self.value_type, get, set_)


@dataclass(frozen=True)
class Struct:
    """A named hop into a nested object with its own field table."""

    get: Callable[[Any], Any]
    fields: Mapping[str, FieldEntry]


FieldEntry = Union[Field, Struct]

Key = Union[str, int]


def render_path(segments: Sequence[PathSegment]) -> str:
    """Render path segments as ``resource.attributes["k"][0]``."""
    parts = []
    for segment in segments:
        keys = "".join(f"[{json.dumps(key)}]" for key in segment.keys)
        parts.append(f"{segment.name}{keys}")
    return ".".join(parts)


def _index(value: Any, key: Key, path: str) -> Any:
    if isinstance(key, str):
        if not isinstance(value, dict):
            raise TypeMismatchError(
                f"Path '{path}': cannot look up key {key!r} in a "
                f"{type(value).__name__} value"
            )
        return value.get(key)
    if not isinstance(value, list):
        raise TypeMismatchError(
            f"Path '{path}': cannot index a {type(value).__name__} value with {key}"
        )
    if not 0 <= key < len(value):
        raise PathNotFoundError(
            f"Path '{path}': index {key} out of range for slice of length {len(value)}"
        )
    return value[key]


@dataclass(frozen=True)
class PathAccessor:
    """Bound read/write access to one location inside a context."""

    path: str
    hops: tuple[Callable[[Any], Any], ...]
    field: Field
    keys: tuple[Key, ...] = ()

    @property
    def writable(self) -> bool:
        return self.field.set is not None

    def _owner(self, ctx: TransformContext) -> Any:
        obj: Any = ctx
        for hop in self.hops:
            obj = hop(obj)
        return obj

    def get(self, ctx: TransformContext) -> Any:
        value = self.field.get(self._owner(ctx))
        for key in self.keys:
            if value is None:
                return None
            value = _index(value, key, self.path)
        return value

    def set(self, ctx: TransformContext, value: Any) -> None:
        if self.field.set is None:
            raise TypeMismatchError(f"Path '{self.path}' is read-only")
        owner = self._owner(ctx)
        if not self.keys:
            self.field.set(owner, coerce(value, self.field.value_type))
            return

        container = self.field.get(owner)
        for key in self.keys[:-1]:
            if container is None:
                break
            container = _index(container, key, self.path)
        if container is None:
            raise PathNotFoundError(f"Path '{self.path}': parent container does not exist")

        last = self.keys[-1]
        stored = coerce(value, ValueType.ANY)
        if isinstance(last, str):
            if not isinstance(container, dict):
                raise TypeMismatchError(
                    f"Path '{self.path}': cannot set key {last!r} on a "
                    f"{type(container).__name__} value"
                )
            container[last] = stored
        else:
            _index(container, last, self.path)
            container[last] = stored


def _check_keys(segment: PathSegment, field: Field, path: str) -> None:
    if not segment.keys:
        return
    if field.value_type not in (ValueType.MAP, ValueType.SLICE, ValueType.ANY):
        raise BindError(
            f"Path '{path}': field '{segment.name}' holds a "
            f"{field.value_type.value} and cannot be indexed"
        )
    first = segment.keys[0]
    if field.value_type is ValueType.MAP and not isinstance(first, str):
        raise BindError(
            f"Path '{path}': map field '{segment.name}' must be indexed by string, got {first!r}"
        )
    if field.value_type is ValueType.SLICE and not isinstance(first, int):
        raise BindError(
            f"Path '{path}': slice field '{segment.name}' must be indexed by integer, got {first!r}"
        )


def resolve_path(
    segments: Sequence[PathSegment],
    context_type: type[TransformContext],
) -> PathAccessor:
    """Resolve *segments* against the field table of *context_type*.

    Raises:
        BindError: If the path does not name a field of the context kind,
            or indexes it in a way its declared type does not allow.
    """
    if not segments:
        raise BindError(f"Empty path for {context_type.kind} context")

    path = render_path(segments)
    table: Mapping[str, FieldEntry] = context_type.fields
    scope = f"{context_type.kind} context"
    hops: list[Callable[[Any], Any]] = []

    for i, segment in enumerate(segments):
        entry = table.get(segment.name)
        if entry is None:
            raise BindError(
                f"Path '{path}': unknown field '{segment.name}' in {scope}. "
                f"Available: {sorted(table)}"
            )
        is_last = i == len(segments) - 1

        if isinstance(entry, Struct):
            if segment.keys:
                raise BindError(
                    f"Path '{path}': '{segment.name}' is a structure and cannot be indexed"
                )
            if is_last:
                raise BindError(
                    f"Path '{path}' ends on structure '{segment.name}'; "
                    f"select one of its fields: {sorted(entry.fields)}"
                )
            hops.append(entry.get)
            table = entry.fields
            scope = f"'{segment.name}'"
            continue

        if not is_last:
            raise BindError(
                f"Path '{path}': field '{segment.name}' has no sub-field "
                f"'{segments[i + 1].name}'"
            )
        _check_keys(segment, entry, path)
        return PathAccessor(path, tuple(hops), entry, tuple(segment.keys))

    raise AssertionError("unreachable")
