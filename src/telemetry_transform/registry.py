"""Function registry: maps function names to factories.

A factory is a plain Python callable. Its annotated parameters declare
the argument shapes it accepts (see ``ArgKind``); the binder resolves
statement arguments to those shapes and calls the factory once, at bind
time. The factory validates what it received and returns the ExprFunc
that will run per record, or raises ValueError to reject the arguments.
"""

from __future__ import annotations

import inspect
import typing
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Any

from telemetry_transform.errors import BindError
from telemetry_transform.expressions import ExprFunc, Getter, GetSetter


class ArgKind(str, Enum):
    GETTER = "getter"
    GETSETTER = "writable path"
    STRING = "string"
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    STRING_LIST = "list of strings"


_ANNOTATION_KINDS: dict[Any, ArgKind] = {
    Getter: ArgKind.GETTER,
    GetSetter: ArgKind.GETSETTER,
    str: ArgKind.STRING,
    int: ArgKind.INT,
    float: ArgKind.FLOAT,
    bool: ArgKind.BOOL,
}


def _arg_kind(annotation: Any) -> ArgKind:
    if annotation in _ANNOTATION_KINDS:
        return _ANNOTATION_KINDS[annotation]
    if typing.get_origin(annotation) is list and typing.get_args(annotation) == (str,):
        return ArgKind.STRING_LIST
    raise TypeError(f"Unsupported function parameter annotation: {annotation!r}")


@dataclass(frozen=True)
class Parameter:
    name: str
    kind: ArgKind
    required: bool = True
    variadic: bool = False


def _parameters(factory: Callable[..., ExprFunc]) -> tuple[Parameter, ...]:
    hints = typing.get_type_hints(factory)
    params: list[Parameter] = []
    for param in inspect.signature(factory).parameters.values():
        if param.name not in hints:
            raise TypeError(f"Parameter '{param.name}' of {factory.__name__} is not annotated")
        kind = _arg_kind(hints[param.name])
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            params.append(Parameter(param.name, kind, required=False, variadic=True))
        elif param.kind in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
        ):
            params.append(
                Parameter(param.name, kind, required=param.default is inspect.Parameter.empty)
            )
        else:
            raise TypeError(
                f"Parameter '{param.name}' of {factory.__name__} must be positional"
            )
    return tuple(params)


@dataclass(frozen=True)
class FunctionSpec:
    """A registered function: its factory and the argument shapes it takes."""

    name: str
    factory: Callable[..., ExprFunc]
    parameters: tuple[Parameter, ...]
    contexts: frozenset[str] | None = None

    @property
    def description(self) -> str:
        doc = inspect.getdoc(self.factory) or ""
        return doc.split("\n", 1)[0]

    def available_in(self, context_kind: str) -> bool:
        return self.contexts is None or context_kind in self.contexts

    def signature(self) -> str:
        parts = []
        for p in self.parameters:
            label = f"{p.name}: {p.kind.value}"
            if p.variadic:
                label = f"*{label}"
            elif not p.required:
                label = f"[{label}]"
            parts.append(label)
        return f"{self.name}({', '.join(parts)})"


class FunctionRegistry:
    """Name -> FunctionSpec. Read-only once frozen."""

    def __init__(self) -> None:
        self._functions: dict[str, FunctionSpec] = {}
        self._frozen = False

    def register(
        self,
        name: str,
        factory: Callable[..., ExprFunc],
        *,
        contexts: Iterable[str] | None = None,
    ) -> FunctionSpec:
        """Register *factory* under *name*.

        Raises:
            RuntimeError: If the registry is frozen.
            ValueError: If *name* is already registered.
            TypeError: If the factory's parameters cannot be bound.
        """
        if self._frozen:
            raise RuntimeError(f"Cannot register '{name}': registry is frozen")
        if name in self._functions:
            raise ValueError(f"Function '{name}' is already registered")
        spec = FunctionSpec(
            name=name,
            factory=factory,
            parameters=_parameters(factory),
            contexts=frozenset(contexts) if contexts is not None else None,
        )
        self._functions[name] = spec
        return spec

    def function(
        self, name: str, *, contexts: Iterable[str] | None = None
    ) -> Callable[[Callable[..., ExprFunc]], Callable[..., ExprFunc]]:
        """Decorator form of ``register``."""

        def decorator(factory: Callable[..., ExprFunc]) -> Callable[..., ExprFunc]:
            self.register(name, factory, contexts=contexts)
            return factory

        return decorator

    def get(self, name: str) -> FunctionSpec:
        try:
            return self._functions[name]
        except KeyError:
            raise BindError(
                f"Unknown function '{name}'. Available: {self.names()}"
            ) from None

    def names(self) -> list[str]:
        return sorted(self._functions)

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __contains__(self, name: object) -> bool:
        return name in self._functions

    def __iter__(self) -> Iterator[FunctionSpec]:
        return iter(self._functions[name] for name in self.names())

    def __len__(self) -> int:
        return len(self._functions)


def default_registry() -> FunctionRegistry:
    """Return a new, unfrozen registry holding every built-in function."""
    from telemetry_transform.functions import register_builtins

    registry = FunctionRegistry()
    register_builtins(registry)
    return registry
