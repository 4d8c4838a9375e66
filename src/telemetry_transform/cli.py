"""Command-line interface for telemetry-transform.

Enables execution via ``python -m telemetry_transform.cli`` or a plain
``telemetry-transform`` command after install.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from telemetry_transform.errors import (
    BatchError,
    BatchValidationError,
    BindError,
    ConfigLoadError,
)

# ── Human-readable help strings ──────────────────────────────────────────────

_TOP_DESCRIPTION = """\
Apply declarative transformation statements to telemetry batches.

A config file lists statements per context (resource, span, datapoint,
log). Each statement calls a function such as delete_key or
convert_gauge_to_sum, optionally guarded by a condition. Statements are
bound once and then applied to every record of a batch, in order.
"""

_TOP_EPILOG = """\
For a machine-readable JSON description of this CLI and the available
functions:

  telemetry-transform schema

Quick examples:
  telemetry-transform run transform.yaml --signal traces --input spans.json
  telemetry-transform validate transform.yaml
"""

_RUN_DESCRIPTION = """\
Apply a config to one JSON batch and emit the transformed batch and a
partial-failure report as JSON.
"""

_RUN_EPILOG = """\
Output schema (JSON written to stdout, or to the --output file):

  {
    "report": {
      "signal":          <str>,  -- traces | metrics | logs
      "records_total":   <int>,  -- records evaluated
      "records_failed":  <int>,  -- records with at least one failing statement
      "records_dropped": <int>,  -- removed by error_mode drop / quarantine
      "errors": [{"record_index", "context", "statement", "error_type", "message"}],
      "quarantined": [...],
      "duration_ms": <num>
    },
    "batch": <object>            -- the batch after transformation
  }

Exit codes:
  0 -- batch processed (individual records may still have failed; see report)
  1 -- config could not be loaded or bound, or the batch is malformed
  2 -- error_mode is "propagate" and at least one record failed
"""

_VALIDATE_DESCRIPTION = """\
Bind every statement of a config without processing data.

Reports unknown functions, wrong argument counts or types, paths that do
not exist in the statement's context, and rejected literals. All problems
are reported, not just the first.
"""

_VALIDATE_EPILOG = """\
Diagnostic output format (written to stderr on failure):
  [error]   field: message  -- the config cannot be used
  [warning] field: message  -- the config works but is probably not what you meant

Exit codes:
  0 -- config is valid
  1 -- one or more errors found
"""

_SCHEMA_DESCRIPTION = """\
Print a machine-readable JSON description of this CLI to stdout, including
every registered function and its parameters.
"""


# ── Structured JSON schema (for `telemetry-transform schema`) ────────────────

def _cli_schema() -> dict[str, Any]:
    """Return a structured JSON description of the CLI and its functions."""
    from telemetry_transform.contexts import CONTEXTS
    from telemetry_transform.registry import default_registry

    registry = default_registry()
    return {
        "tool": "telemetry-transform",
        "description": (
            "Applies declarative transformation statements to telemetry "
            "batches (traces, metrics, logs)."
        ),
        "commands": [
            {
                "name": "run",
                "arguments": {
                    "config": {"type": "string", "format": "file path", "required": True},
                    "--signal": {"type": "string", "enum": ["traces", "metrics", "logs"], "required": True},
                    "--input": {"type": "string", "format": "file path", "required": True},
                    "--output": {"type": "string", "format": "file path", "required": False},
                    "--log-dir": {"type": "string", "format": "directory path", "required": False},
                },
                "exit_codes": {
                    "0": "batch processed",
                    "1": "config load, bind or batch validation error",
                    "2": "error_mode propagate and records failed",
                },
            },
            {
                "name": "validate",
                "arguments": {
                    "config": {"type": "string", "format": "file path", "required": True},
                },
                "exit_codes": {"0": "config is valid", "1": "errors found"},
            },
            {"name": "schema", "arguments": {}, "exit_codes": {"0": "always succeeds"}},
        ],
        "config_format": {
            "error_mode": ["ignore", "drop", "quarantine", "propagate"],
            "workers": "integer >= 1",
            "statement_lists": {
                "resource_statements": "resource",
                "trace_statements": "span",
                "metric_statements": "datapoint",
                "log_statements": "log",
            },
            "argument_nodes": [
                "{literal: <value>}",
                "{path: [<name> | {name: <name>, keys: [<str|int>, ...]}, ...]}",
                "{call: {function: <name>, arguments: [...]}}",
            ],
        },
        "contexts": {
            kind: sorted(context_type.fields) for kind, context_type in CONTEXTS.items()
        },
        "functions": [
            {
                "name": spec.name,
                "signature": spec.signature(),
                "description": spec.description,
                "contexts": sorted(spec.contexts) if spec.contexts else "all",
            }
            for spec in registry
        ],
    }


# ── Argument parser ───────────────────────────────────────────────────────────

def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="telemetry-transform",
        description=_TOP_DESCRIPTION,
        epilog=_TOP_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    sub = parser.add_subparsers(dest="command")

    # ── run ──────────────────────────────────────────────────────────────────
    run_p = sub.add_parser(
        "run",
        help="Apply a config to a JSON batch",
        description=_RUN_DESCRIPTION,
        epilog=_RUN_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    run_p.add_argument("config", type=Path, help="Path to the config YAML file")
    run_p.add_argument(
        "--signal", "-s",
        required=True,
        choices=["traces", "metrics", "logs"],
        help="Kind of batch in the input file",
    )
    run_p.add_argument(
        "--input", "-i",
        required=True,
        type=Path,
        metavar="FILE",
        help="JSON batch file (OTLP-style, snake_case field names)",
    )
    run_p.add_argument(
        "--output", "-o",
        type=Path,
        metavar="FILE",
        help="Write JSON output to FILE instead of stdout.",
    )
    run_p.add_argument(
        "--log-dir",
        type=Path,
        metavar="DIR",
        help=(
            "Write JSONL logs to DIR/transform.log: statements_bound, "
            "statement_error, record_dropped and batch_complete events."
        ),
    )

    # ── validate ─────────────────────────────────────────────────────────────
    val_p = sub.add_parser(
        "validate",
        help="Bind every statement of a config without processing data",
        description=_VALIDATE_DESCRIPTION,
        epilog=_VALIDATE_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    val_p.add_argument("config", type=Path, help="Path to the config YAML file")

    # ── schema ───────────────────────────────────────────────────────────────
    sub.add_parser(
        "schema",
        help="Print a machine-readable JSON schema of this CLI to stdout",
        description=_SCHEMA_DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    return parser


# ── Command handlers ──────────────────────────────────────────────────────────

def _emit(payload: dict[str, Any], output: Path | None) -> None:
    text = json.dumps(payload, indent=2)
    if output:
        output.write_text(text)
        print(f"Output written to {output}", file=sys.stderr)
    else:
        print(text)


def _cmd_run(args: argparse.Namespace) -> int:
    from telemetry_transform import TransformProcessor, configure_logging
    from telemetry_transform.loader import load_batch, load_config

    if args.log_dir:
        configure_logging(args.log_dir)

    try:
        config = load_config(args.config)
        batch = load_batch(args.input, args.signal)
        processor = TransformProcessor(config)
    except (ConfigLoadError, BatchValidationError, BindError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    exit_code = 0
    with processor:
        try:
            report = processor.process(batch)
        except BatchError as e:
            report = e.report
            exit_code = 2
            print(f"Error: {e}", file=sys.stderr)

    _emit(
        {
            "report": report.model_dump(mode="json"),
            "batch": batch.model_dump(mode="json"),
        },
        args.output,
    )
    return exit_code


def _cmd_validate(args: argparse.Namespace) -> int:
    from telemetry_transform import load_and_validate_config

    try:
        config, result = load_and_validate_config(args.config)
    except ConfigLoadError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    count = sum(len(nodes) for _, nodes in config.statements_by_context().values())
    for d in result.diagnostics:
        label = d.field or "config"
        print(f"[{d.severity.value}] {label}: {d.message}", file=sys.stderr)

    if result.ok:
        print(f"Config is valid ({count} statements)")
        return 0

    error_count = len(result.errors)
    warning_count = len(result.warnings)
    print(f"\n{error_count} error(s), {warning_count} warning(s)", file=sys.stderr)
    return 1


def _cmd_schema() -> int:
    print(json.dumps(_cli_schema(), indent=2))
    return 0


# ── Entry point ───────────────────────────────────────────────────────────────

def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "run":
        sys.exit(_cmd_run(args))
    elif args.command == "validate":
        sys.exit(_cmd_validate(args))
    elif args.command == "schema":
        sys.exit(_cmd_schema())


if __name__ == "__main__":
    main()
