"""Structured JSON logging for statement binding and batch processing.

Writes JSON-lines to disk so operators can see which statements failed
on which records after the fact. Each log entry is a single JSON object
on one line.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

_logger = logging.getLogger("telemetry_transform")
_logger.addHandler(logging.NullHandler())


def configure_logging(
    log_dir: str | Path, level: int = logging.DEBUG
) -> None:
    """Set up logging to write JSON-lines to a file.

    Args:
        log_dir: Directory to write ``transform.log`` into.
        level: Logging level (default: DEBUG).
    """
    log_path = Path(log_dir) / "transform.log"
    log_path.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.FileHandler(str(log_path))
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(message)s"))

    _logger.addHandler(handler)
    _logger.setLevel(level)


def _log(event: dict[str, Any], level: int = logging.INFO) -> None:
    _logger.log(level, json.dumps(event, default=str))


def log_statements_bound(context: str, count: int) -> None:
    _log({"event": "statements_bound", "context": context, "count": count})


def log_statement_error(
    context: str, record_index: int, statement: str, error: Exception
) -> None:
    _log(
        {
            "event": "statement_error",
            "context": context,
            "record_index": record_index,
            "statement": statement,
            "error_type": type(error).__name__,
            "error": str(error),
        },
        logging.WARNING,
    )


def log_record_dropped(context: str, record_index: int, error_mode: str) -> None:
    _log({
        "event": "record_dropped",
        "context": context,
        "record_index": record_index,
        "error_mode": error_mode,
    })


def log_batch_complete(
    signal: str, records_total: int, records_failed: int, duration_ms: float
) -> None:
    _log({
        "event": "batch_complete",
        "signal": signal,
        "records_total": records_total,
        "records_failed": records_failed,
        "duration_ms": round(duration_ms, 2),
    })
