"""Getter / Setter primitives and bound function calls.

Every argument of a bound statement is one of these objects. They are
immutable once built and hold no per-record state, so one bound
statement can be evaluated against many contexts, concurrently.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from telemetry_transform.contexts.base import TransformContext
from telemetry_transform.errors import FunctionExecutionError, TransformError
from telemetry_transform.paths import PathAccessor
from telemetry_transform.values import copy_value

# A bound function body: called with a context, returns a value or None.
ExprFunc = Callable[[TransformContext], Any]


class Getter(ABC):
    """Read capability: literal, path or nested call."""

    @abstractmethod
    def get(self, ctx: TransformContext) -> Any: ...


class Setter(ABC):
    """Write capability through a path."""

    @abstractmethod
    def set(self, ctx: TransformContext, value: Any) -> None: ...


class GetSetter(Getter, Setter):
    """A writable path: both readable and writable."""


@dataclass(frozen=True)
class LiteralGetter(Getter):
    value: Any

    def get(self, ctx: TransformContext) -> Any:
        # Containers are handed out as copies; the bound literal is shared
        if isinstance(self.value, (dict, list)):
            return copy_value(self.value)
        return self.value


@dataclass(frozen=True)
class PathGetter(Getter):
    accessor: PathAccessor

    def get(self, ctx: TransformContext) -> Any:
        return self.accessor.get(ctx)


@dataclass(frozen=True)
class PathGetSetter(GetSetter):
    accessor: PathAccessor

    def get(self, ctx: TransformContext) -> Any:
        return self.accessor.get(ctx)

    def set(self, ctx: TransformContext, value: Any) -> None:
        self.accessor.set(ctx, value)


@dataclass(frozen=True)
class BoundCall:
    """A function bound to its arguments, ready to invoke per context."""

    name: str
    func: ExprFunc
    source: str

    def invoke(self, ctx: TransformContext) -> Any:
        """Run the function.

        Package errors (e.g. a PathNotFoundError while resolving an
        argument) propagate unchanged; anything else the function raises
        is wrapped in FunctionExecutionError.
        """
        try:
            return self.func(ctx)
        except TransformError:
            raise
        except Exception as e:
            raise FunctionExecutionError(self.name, e) from e


@dataclass(frozen=True)
class CallGetter(Getter):
    """A nested function call used as an argument, invoked lazily."""

    call: BoundCall

    def get(self, ctx: TransformContext) -> Any:
        return self.call.invoke(ctx)
