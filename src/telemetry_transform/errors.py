"""Custom exception hierarchy for telemetry-transform.

All exceptions inherit from TransformError so callers can catch broadly
or narrowly as needed. Bind-time problems raise BindError; everything
raised while a statement runs against a record is an EvaluationError
and is recoverable per statement.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from telemetry_transform.models import BatchReport


class TransformError(Exception):
    """Base for all telemetry-transform errors."""


class ConfigLoadError(TransformError):
    """YAML parsing or configuration structure validation failed."""


class BatchValidationError(TransformError):
    """An input batch document does not have the expected shape."""


class BindError(TransformError):
    """A statement could not be bound to a context kind."""

    def __init__(self, message: str, statement: str | None = None) -> None:
        self.statement = statement
        if statement:
            message = f"{message} (in '{statement}')"
        super().__init__(message)


class EvaluationError(TransformError):
    """Base for errors raised while evaluating a statement on one record."""


class PathNotFoundError(EvaluationError):
    """A path could not be followed inside the current record."""


class TypeMismatchError(EvaluationError):
    """A value has a type the target location or operation does not accept."""


class FunctionExecutionError(EvaluationError):
    """A bound function failed with its own (non-package) error."""

    def __init__(self, function: str, cause: Exception) -> None:
        self.function = function
        self.cause = cause
        super().__init__(f"Function '{function}' failed: {cause}")


class BatchError(TransformError):
    """Raised after a batch when error_mode is ``propagate`` and records failed."""

    def __init__(self, report: BatchReport) -> None:
        self.report = report
        super().__init__(
            f"{report.records_failed} of {report.records_total} "
            f"{report.signal} record(s) failed"
        )


class ProcessorClosedError(TransformError):
    """A batch was submitted to a processor after shutdown."""
