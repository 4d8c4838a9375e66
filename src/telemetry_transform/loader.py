"""YAML config loading and JSON batch loading with JSON Schema validation."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Literal

import jsonschema
import yaml
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from telemetry_transform.errors import BatchValidationError, ConfigLoadError
from telemetry_transform.models import TransformConfig
from telemetry_transform.records import LogsData, MetricsData, TracesData

Signal = Literal["traces", "metrics", "logs"]


def load_config(path: str | Path) -> TransformConfig:
    """Load a transform configuration from a YAML file.

    Parses YAML, then validates the structure via Pydantic.

    Args:
        path: Path to the YAML config file.

    Returns:
        Validated TransformConfig.

    Raises:
        ConfigLoadError: If the file doesn't exist, YAML is invalid,
            or the structure doesn't match the expected schema.
    """
    path = Path(path)
    if not path.is_file():
        raise ConfigLoadError(f"Config file not found: {path}")

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigLoadError(f"Invalid YAML in {path}: {e}") from e

    return parse_config(raw)


def parse_config(raw: Any) -> TransformConfig:
    """Validate an already-parsed config mapping."""
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigLoadError(
            f"Config YAML must be a mapping, got {type(raw).__name__}"
        )

    try:
        return TransformConfig.model_validate(raw)
    except PydanticValidationError as e:
        raise ConfigLoadError(f"Config structure invalid: {e}") from e


# ── Batches ───────────────────────────────────────────────────────


def _envelope_schema(resource_key: str, scope_key: str, items_key: str) -> dict[str, Any]:
    """Schema of the resource -> scope -> items nesting shared by every signal."""
    return {
        "type": "object",
        "properties": {
            resource_key: {
                "type": "array",
                "items": {
                    "type": "object",
                    "properties": {
                        "resource": {"type": "object"},
                        scope_key: {
                            "type": "array",
                            "items": {
                                "type": "object",
                                "properties": {
                                    "scope": {"type": "object"},
                                    items_key: {
                                        "type": "array",
                                        "items": {"type": "object"},
                                    },
                                },
                            },
                        },
                    },
                },
            },
        },
        "required": [resource_key],
    }


BATCH_SCHEMAS: dict[str, dict[str, Any]] = {
    "traces": _envelope_schema("resource_spans", "scope_spans", "spans"),
    "metrics": _envelope_schema("resource_metrics", "scope_metrics", "metrics"),
    "logs": _envelope_schema("resource_logs", "scope_logs", "log_records"),
}

_BATCH_MODELS: dict[str, type[BaseModel]] = {
    "traces": TracesData,
    "metrics": MetricsData,
    "logs": LogsData,
}


def validate_batch(signal: Signal, data: Any) -> None:
    """Validate a batch document's envelope against its JSON Schema.

    Raises:
        BatchValidationError: If data doesn't match schema.
    """
    try:
        jsonschema.validate(instance=data, schema=BATCH_SCHEMAS[signal])
    except jsonschema.ValidationError as e:
        raise BatchValidationError(f"Invalid {signal} batch: {e.message}") from e


def parse_batch(signal: Signal, data: Any) -> TracesData | MetricsData | LogsData:
    """Validate and parse an already-decoded batch document."""
    if signal not in BATCH_SCHEMAS:
        raise BatchValidationError(f"Unknown signal: {signal!r}")
    validate_batch(signal, data)
    try:
        return _BATCH_MODELS[signal].model_validate(data)  # type: ignore[return-value]
    except PydanticValidationError as e:
        raise BatchValidationError(f"Invalid {signal} batch: {e}") from e


def load_batch(path: str | Path, signal: Signal) -> TracesData | MetricsData | LogsData:
    """Load a JSON batch file for *signal*.

    Raises:
        BatchValidationError: If the file is missing, not JSON, or not a
            valid batch for the signal.
    """
    path = Path(path)
    if not path.is_file():
        raise BatchValidationError(f"Batch file not found: {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise BatchValidationError(f"Invalid JSON in {path}: {e}") from e
    return parse_batch(signal, data)
