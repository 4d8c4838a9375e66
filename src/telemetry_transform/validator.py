"""Pre-flight config validator.

Binds every statement of a configuration without processing any data
and reports all problems at once, where constructing a
TransformProcessor stops at the first BindError.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from telemetry_transform.contexts import CONTEXTS
from telemetry_transform.errors import BindError
from telemetry_transform.models import (
    LiteralNode,
    StatementNode,
    TransformConfig,
)
from telemetry_transform.registry import FunctionRegistry, default_registry
from telemetry_transform.statements import bind_statement

# ---------------------------------------------------------------------------
# Data types
# ---------------------------------------------------------------------------


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Diagnostic:
    """A single validation finding."""

    severity: Severity
    statement: str
    message: str
    field: str  # e.g. "trace_statements[2]"


@dataclass(frozen=True)
class ValidationResult:
    """Aggregate result of config validation."""

    diagnostics: list[Diagnostic]

    @property
    def ok(self) -> bool:
        """True when there are no error-severity diagnostics."""
        return not any(d.severity == Severity.ERROR for d in self.diagnostics)

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == Severity.WARNING]


# ---------------------------------------------------------------------------
# 1. Binding
# ---------------------------------------------------------------------------


def _check_binding(
    node: StatementNode,
    context_kind: str,
    field: str,
    registry: FunctionRegistry,
) -> list[Diagnostic]:
    """Bind one statement; a BindError becomes an error diagnostic."""
    try:
        bind_statement(node, CONTEXTS[context_kind], registry)
    except BindError as e:
        return [
            Diagnostic(
                severity=Severity.ERROR,
                statement=node.render(),
                message=str(e),
                field=field,
            )
        ]
    return []


# ---------------------------------------------------------------------------
# 2. Constant conditions
# ---------------------------------------------------------------------------


def _check_condition(node: StatementNode, field: str) -> list[Diagnostic]:
    """Warn about literal conditions: they either never or always apply."""
    if not isinstance(node.condition, LiteralNode):
        return []
    if node.condition.literal is True:
        message = "Condition is always true; it can be removed"
    elif node.condition.literal is False:
        message = "Condition is always false; the statement never runs"
    else:
        return []
    return [
        Diagnostic(
            severity=Severity.WARNING,
            statement=node.render(),
            message=message,
            field=f"{field}.condition",
        )
    ]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def validate_config(
    config: TransformConfig,
    registry: FunctionRegistry | None = None,
) -> ValidationResult:
    """Statically validate a configuration without processing data.

    Checks:
    - Every statement binds in its context (functions, arity, paths, literals)
    - Literal conditions that make a statement unconditional or dead
    - A configuration with no statements at all

    Returns a ``ValidationResult``. The config is considered valid when
    ``result.ok`` is True (no error-severity diagnostics).
    """
    registry = registry if registry is not None else default_registry()
    diagnostics: list[Diagnostic] = []
    total = 0

    for context_kind, (config_field, nodes) in config.statements_by_context().items():
        for i, node in enumerate(nodes):
            field = f"{config_field}[{i}]"
            diagnostics.extend(_check_binding(node, context_kind, field, registry))
            diagnostics.extend(_check_condition(node, field))
            total += 1

    if total == 0:
        diagnostics.append(
            Diagnostic(
                severity=Severity.WARNING,
                statement="",
                message="Configuration has no statements; records pass through unchanged",
                field="",
            )
        )

    return ValidationResult(diagnostics=diagnostics)


def load_and_validate_config(
    path: str | Path,
) -> tuple[TransformConfig, ValidationResult]:
    """Load a config from YAML and validate it.

    Convenience wrapper: calls ``load_config`` then ``validate_config``.
    Raises ``ConfigLoadError`` if YAML/Pydantic parsing fails.
    """
    from telemetry_transform.loader import load_config

    config = load_config(path)
    result = validate_config(config)
    return config, result
