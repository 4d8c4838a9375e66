"""Statement binding and per-record evaluation.

Binding turns a StatementNode into a Statement for one context kind:
every path is resolved, every nested call is bound, every literal is
checked against the parameter it feeds. Nothing about a statement is
looked up again per record.

Evaluation runs a record's statements strictly in declared order. A
failing statement is recorded and the next one still runs; earlier
mutations are kept.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from telemetry_transform import transform_logger
from telemetry_transform.contexts.base import TransformContext
from telemetry_transform.errors import BindError, EvaluationError, TypeMismatchError
from telemetry_transform.expressions import (
    BoundCall,
    CallGetter,
    Getter,
    LiteralGetter,
    PathGetSetter,
    PathGetter,
)
from telemetry_transform.models import (
    ArgumentNode,
    CallNode,
    LiteralNode,
    PathNode,
    StatementNode,
)
from telemetry_transform.paths import resolve_path
from telemetry_transform.registry import ArgKind, FunctionRegistry, Parameter
from telemetry_transform.values import ValueType, copy_value


# ── Binding ───────────────────────────────────────────────────────


def _literal_value(value: Any, param: Parameter, function: str) -> Any:
    kind = param.kind
    ok = (
        (kind is ArgKind.STRING and isinstance(value, str))
        or (kind is ArgKind.BOOL and isinstance(value, bool))
        or (kind is ArgKind.INT and isinstance(value, int) and not isinstance(value, bool))
        or (
            kind is ArgKind.FLOAT
            and isinstance(value, (int, float))
            and not isinstance(value, bool)
        )
        or (
            kind is ArgKind.STRING_LIST
            and isinstance(value, list)
            and all(isinstance(item, str) for item in value)
        )
    )
    if not ok:
        raise BindError(
            f"Function '{function}' argument '{param.name}' expects a "
            f"{kind.value} literal, got {json.dumps(value)}"
        )
    if kind is ArgKind.FLOAT:
        return float(value)
    if kind is ArgKind.STRING_LIST:
        return list(value)
    return value


def bind_getter(
    node: ArgumentNode,
    context_type: type[TransformContext],
    registry: FunctionRegistry,
) -> Getter:
    """Bind a literal, path or nested call to a Getter."""
    if isinstance(node, LiteralNode):
        try:
            copy_value(node.literal)
        except TypeMismatchError as e:
            raise BindError(str(e)) from e
        return LiteralGetter(node.literal)
    if isinstance(node, PathNode):
        return PathGetter(resolve_path(node.path, context_type))
    return CallGetter(bind_call(node.call, context_type, registry))


def bind_argument(
    node: ArgumentNode,
    param: Parameter,
    function: str,
    context_type: type[TransformContext],
    registry: FunctionRegistry,
) -> Any:
    """Bind one argument node to the shape *param* declares."""
    if param.kind is ArgKind.GETTER:
        return bind_getter(node, context_type, registry)

    if param.kind is ArgKind.GETSETTER:
        if not isinstance(node, PathNode):
            raise BindError(
                f"Function '{function}' argument '{param.name}' must be a path, "
                f"got {node.render()}"
            )
        accessor = resolve_path(node.path, context_type)
        if not accessor.writable:
            raise BindError(f"Path '{accessor.path}' is read-only")
        return PathGetSetter(accessor)

    if not isinstance(node, LiteralNode):
        raise BindError(
            f"Function '{function}' argument '{param.name}' must be a literal "
            f"{param.kind.value}, got {node.render()}"
        )
    return _literal_value(node.literal, param, function)


def bind_call(
    node: CallNode,
    context_type: type[TransformContext],
    registry: FunctionRegistry,
) -> BoundCall:
    """Resolve a function call and its arguments, then build the ExprFunc."""
    spec = registry.get(node.function)
    if not spec.available_in(context_type.kind):
        raise BindError(
            f"Function '{spec.name}' is not available in {context_type.kind} context"
        )

    fixed = [p for p in spec.parameters if not p.variadic]
    variadic = next((p for p in spec.parameters if p.variadic), None)
    required = sum(1 for p in fixed if p.required)
    given = len(node.arguments)
    if given < required or (variadic is None and given > len(fixed)):
        raise BindError(
            f"Function '{spec.name}' expects {spec.signature()}, "
            f"got {given} argument(s)"
        )

    args = []
    for i, arg in enumerate(node.arguments):
        param = fixed[i] if i < len(fixed) else variadic
        assert param is not None
        args.append(bind_argument(arg, param, spec.name, context_type, registry))

    try:
        func = spec.factory(*args)
    except ValueError as e:
        raise BindError(f"Function '{spec.name}': {e}") from e
    # CallNode.render: a statement's own render would append its condition
    return BoundCall(spec.name, func, CallNode.render(node))


def _bind_condition(
    node: ArgumentNode,
    context_type: type[TransformContext],
    registry: FunctionRegistry,
) -> Getter:
    if isinstance(node, LiteralNode) and not isinstance(node.literal, bool):
        raise BindError(f"Condition literal must be a bool, got {node.render()}")
    getter = bind_getter(node, context_type, registry)
    if isinstance(getter, PathGetter):
        accessor = getter.accessor
        declared = ValueType.ANY if accessor.keys else accessor.field.value_type
        if declared not in (ValueType.BOOL, ValueType.ANY):
            raise BindError(
                f"Condition path '{accessor.path}' is a {declared.value}, not a bool"
            )
    return getter


@dataclass(frozen=True)
class Statement:
    """A bound function call plus an optional guard condition."""

    call: BoundCall
    condition: Getter | None
    source: str
    context: str

    def execute(self, ctx: TransformContext) -> tuple[Any, bool]:
        """Evaluate the guard, then the call.

        Returns ``(result, ran)``; ``ran`` is False when the guard was false.
        """
        if self.condition is not None:
            matched = self.condition.get(ctx)
            if not isinstance(matched, bool):
                raise TypeMismatchError(
                    f"Condition must evaluate to a bool, got {type(matched).__name__}"
                )
            if not matched:
                return None, False
        return self.call.invoke(ctx), True


def bind_statement(
    node: StatementNode,
    context_type: type[TransformContext],
    registry: FunctionRegistry,
) -> Statement:
    """Bind one statement to *context_type*.

    Raises:
        BindError: Unknown function, arity mismatch, unresolvable path,
            or an argument the function rejects.
    """
    source = node.render()
    try:
        call = bind_call(node, context_type, registry)
        condition = (
            _bind_condition(node.condition, context_type, registry)
            if node.condition is not None
            else None
        )
    except BindError as e:
        raise BindError(str(e), statement=source) from e
    return Statement(call, condition, source, context_type.kind)


def bind_statements(
    nodes: Sequence[StatementNode],
    context_type: type[TransformContext],
    registry: FunctionRegistry,
) -> tuple[Statement, ...]:
    statements = tuple(bind_statement(node, context_type, registry) for node in nodes)
    if statements:
        transform_logger.log_statements_bound(context_type.kind, len(statements))
    return statements


# ── Evaluation ────────────────────────────────────────────────────


@dataclass(frozen=True)
class StatementFailure:
    statement: Statement
    error: EvaluationError


def evaluate_record(
    statements: Sequence[Statement],
    ctx: TransformContext,
) -> list[StatementFailure]:
    """Run every statement against one context, in order.

    Returns the failures; an empty list means every statement either ran
    or was skipped by its guard.
    """
    failures: list[StatementFailure] = []
    for statement in statements:
        try:
            statement.execute(ctx)
        except EvaluationError as e:
            failures.append(StatementFailure(statement, e))
    return failures
