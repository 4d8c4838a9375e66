"""Batch processor: the main orchestrator.

Binds every configured statement once, then for each batch wraps each
record in a context, runs the statements for its kind and aggregates
per-record failures into a BatchReport.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Iterator, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from functools import partial
from typing import Any

from telemetry_transform import transform_logger
from telemetry_transform.contexts import (
    CONTEXTS,
    DataPointContext,
    LogContext,
    ResourceContext,
    SpanContext,
    TransformContext,
)
from telemetry_transform.errors import BatchError, ProcessorClosedError
from telemetry_transform.models import BatchReport, RecordError, TransformConfig
from telemetry_transform.records import LogsData, Metric, MetricsData, TracesData
from telemetry_transform.registry import FunctionRegistry, default_registry
from telemetry_transform.statements import (
    Statement,
    StatementFailure,
    bind_statements,
    evaluate_record,
)


@dataclass(frozen=True, eq=False)
class _Unit:
    """One record to evaluate, and where it lives in the batch."""

    context: TransformContext
    container: Callable[[], list[Any]]
    entry: Any
    # Units sharing a group run sequentially on one worker. Record units are
    # grouped by resource envelope: statements may write the shared resource,
    # scope or metric.
    group: Any = None


def _data_points(metric: Metric) -> list[Any]:
    return metric.data.data_points


def _resource_units(envelopes: list[Any]) -> Iterator[_Unit]:
    for envelope in envelopes:
        yield _Unit(
            ResourceContext(envelope.resource),
            lambda: envelopes,
            envelope,
        )


def _span_units(data: TracesData) -> Iterator[_Unit]:
    for resource_spans in data.resource_spans:
        for scope_spans in resource_spans.scope_spans:
            for span in scope_spans.spans:
                yield _Unit(
                    SpanContext(span, scope_spans.scope, resource_spans.resource),
                    partial(getattr, scope_spans, "spans"),
                    span,
                    group=resource_spans,
                )


def _log_units(data: LogsData) -> Iterator[_Unit]:
    for resource_logs in data.resource_logs:
        for scope_logs in resource_logs.scope_logs:
            for record in scope_logs.log_records:
                yield _Unit(
                    LogContext(record, scope_logs.scope, resource_logs.resource),
                    partial(getattr, scope_logs, "log_records"),
                    record,
                    group=resource_logs,
                )


def _datapoint_units(data: MetricsData) -> Iterator[_Unit]:
    for resource_metrics in data.resource_metrics:
        for scope_metrics in resource_metrics.scope_metrics:
            for metric in scope_metrics.metrics:
                # Snapshot: a statement may retag the metric mid-iteration
                for point in list(metric.data.data_points):
                    yield _Unit(
                        DataPointContext(
                            point, metric, scope_metrics.scope, resource_metrics.resource
                        ),
                        partial(_data_points, metric),
                        point,
                        group=resource_metrics,
                    )


def _evaluate_group(
    statements: Sequence[Statement], units: Sequence[_Unit]
) -> list[list[StatementFailure]]:
    return [evaluate_record(statements, unit.context) for unit in units]


class TransformProcessor:
    """Applies a TransformConfig to telemetry batches.

    All statements are bound in the constructor, so a bad configuration
    fails here (BindError) and never on a record.
    """

    def __init__(
        self,
        config: TransformConfig,
        registry: FunctionRegistry | None = None,
    ) -> None:
        self._config = config
        self._registry = registry if registry is not None else default_registry()
        self._registry.freeze()
        self._statements: dict[str, tuple[Statement, ...]] = {
            kind: bind_statements(nodes, CONTEXTS[kind], self._registry)
            for kind, (_, nodes) in config.statements_by_context().items()
        }
        self._pool = (
            ThreadPoolExecutor(max_workers=config.workers, thread_name_prefix="transform")
            if config.workers > 1
            else None
        )
        self._lock = threading.Lock()
        self._closed = False

    @property
    def config(self) -> TransformConfig:
        return self._config

    def statements(self, context_kind: str) -> tuple[Statement, ...]:
        return self._statements[context_kind]

    # ── Public batch API ─────────────────────────────────────────

    def process_traces(self, data: TracesData) -> BatchReport:
        return self._run(
            "traces", list(_resource_units(data.resource_spans)), list(_span_units(data)), "span"
        )

    def process_metrics(self, data: MetricsData) -> BatchReport:
        return self._run(
            "metrics",
            list(_resource_units(data.resource_metrics)),
            list(_datapoint_units(data)),
            "datapoint",
        )

    def process_logs(self, data: LogsData) -> BatchReport:
        return self._run(
            "logs", list(_resource_units(data.resource_logs)), list(_log_units(data)), "log"
        )

    def process(self, data: TracesData | MetricsData | LogsData) -> BatchReport:
        """Dispatch a batch to the matching ``process_*`` method."""
        match data:
            case TracesData():
                return self.process_traces(data)
            case MetricsData():
                return self.process_metrics(data)
            case LogsData():
                return self.process_logs(data)
            case _:
                raise TypeError(f"Unsupported batch type: {type(data).__name__}")

    def shutdown(self) -> None:
        """Let the in-flight batch finish, then refuse new batches."""
        with self._lock:
            self._closed = True
        if self._pool is not None:
            self._pool.shutdown(wait=True)

    def __enter__(self) -> TransformProcessor:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()

    # ── Internals ────────────────────────────────────────────────

    def _evaluate(
        self, statements: Sequence[Statement], units: list[_Unit]
    ) -> list[list[StatementFailure]]:
        if self._pool is None or len(units) < 2:
            return _evaluate_group(statements, units)

        groups: dict[int, list[int]] = {}
        for index, unit in enumerate(units):
            key = id(unit.group) if unit.group is not None else id(unit)
            groups.setdefault(key, []).append(index)
        ordered = list(groups.values())

        results: list[list[StatementFailure]] = [[] for _ in units]
        grouped = self._pool.map(
            lambda indexes: _evaluate_group(statements, [units[i] for i in indexes]),
            ordered,
        )
        for indexes, failures in zip(ordered, grouped):
            for i, record_failures in zip(indexes, failures):
                results[i] = record_failures
        return results

    def _run(
        self,
        signal: str,
        resource_units: list[_Unit],
        record_units: list[_Unit],
        record_kind: str,
    ) -> BatchReport:
        with self._lock:
            if self._closed:
                raise ProcessorClosedError("Processor has been shut down")

            start = time.monotonic()
            report = BatchReport(signal=signal)
            failed: list[tuple[str, int, _Unit]] = []

            # Resource statements first: record statements may read their results
            for kind, units in (("resource", resource_units), (record_kind, record_units)):
                statements = self._statements[kind]
                if not statements:
                    continue
                results = self._evaluate(statements, units)
                for index, (unit, failures) in enumerate(zip(units, results)):
                    report.records_total += 1
                    if not failures:
                        continue
                    report.records_failed += 1
                    failed.append((kind, index, unit))
                    for failure in failures:
                        report.errors.append(
                            RecordError(
                                record_index=index,
                                context=kind,
                                statement=failure.statement.source,
                                error_type=type(failure.error).__name__,
                                message=str(failure.error),
                            )
                        )
                        transform_logger.log_statement_error(
                            kind, index, failure.statement.source, failure.error
                        )

            self._dispose(failed, report)
            report.duration_ms = (time.monotonic() - start) * 1000
            transform_logger.log_batch_complete(
                signal, report.records_total, report.records_failed, report.duration_ms
            )

        if self._config.error_mode == "propagate" and report.records_failed:
            raise BatchError(report)
        return report

    def _dispose(self, failed: list[tuple[str, int, _Unit]], report: BatchReport) -> None:
        mode = self._config.error_mode
        if mode not in ("drop", "quarantine"):
            return
        # Envelopes are disposed of first; their records go with them
        dropped_resources: set[int] = set()
        for kind, index, unit in failed:
            if id(unit.context.get_resource()) in dropped_resources:
                continue
            container = unit.container()
            # Identity, not equality: pydantic models compare by value
            position = next(
                (i for i, entry in enumerate(container) if entry is unit.entry), None
            )
            if position is None:
                continue
            del container[position]
            if kind == "resource":
                dropped_resources.add(id(unit.context.get_resource()))
            report.records_dropped += 1
            if mode == "quarantine":
                report.quarantined.append(
                    {"context": kind, "record": unit.entry.model_dump(mode="json")}
                )
            transform_logger.log_record_dropped(kind, index, mode)
