"""telemetry-transform: declarative statements applied to telemetry records."""

from telemetry_transform.contexts import (
    DataPointContext,
    LogContext,
    ResourceContext,
    SpanContext,
    TransformContext,
)
from telemetry_transform.errors import (
    BatchError,
    BatchValidationError,
    BindError,
    ConfigLoadError,
    EvaluationError,
    FunctionExecutionError,
    PathNotFoundError,
    ProcessorClosedError,
    TransformError,
    TypeMismatchError,
)
from telemetry_transform.executor import TransformProcessor
from telemetry_transform.loader import load_batch, load_config, parse_config
from telemetry_transform.models import BatchReport, RecordError, StatementNode, TransformConfig
from telemetry_transform.registry import FunctionRegistry, default_registry
from telemetry_transform.statements import Statement, bind_statement, evaluate_record
from telemetry_transform.transform_logger import configure_logging
from telemetry_transform.validator import (
    Diagnostic,
    Severity,
    ValidationResult,
    load_and_validate_config,
    validate_config,
)

__all__ = [
    "BatchError",
    "BatchReport",
    "BatchValidationError",
    "bind_statement",
    "BindError",
    "ConfigLoadError",
    "configure_logging",
    "DataPointContext",
    "default_registry",
    "Diagnostic",
    "evaluate_record",
    "EvaluationError",
    "FunctionExecutionError",
    "FunctionRegistry",
    "load_and_validate_config",
    "load_batch",
    "load_config",
    "LogContext",
    "parse_config",
    "PathNotFoundError",
    "ProcessorClosedError",
    "RecordError",
    "ResourceContext",
    "Severity",
    "SpanContext",
    "Statement",
    "StatementNode",
    "TransformConfig",
    "TransformContext",
    "TransformError",
    "TransformProcessor",
    "TypeMismatchError",
    "validate_config",
    "ValidationResult",
]
