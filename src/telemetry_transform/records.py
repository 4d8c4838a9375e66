"""Pydantic models for the telemetry records statements operate on.

Shapes follow the OTLP JSON encoding closely enough that an exported
batch can be loaded as-is (snake_case field names). The models are
deliberately mutable: statements rewrite records in place. Metric data
uses a discriminated union on the ``type`` field so a metric can be
retagged by swapping its ``data`` for another member of the union.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field


class AggregationTemporality(IntEnum):
    UNSPECIFIED = 0
    DELTA = 1
    CUMULATIVE = 2


# ── Shared envelopes ──────────────────────────────────────────────


class Resource(BaseModel):
    attributes: dict[str, Any] = Field(default_factory=dict)
    dropped_attributes_count: int = 0


class InstrumentationScope(BaseModel):
    name: str = ""
    version: str = ""
    attributes: dict[str, Any] = Field(default_factory=dict)
    dropped_attributes_count: int = 0


# ── Traces ────────────────────────────────────────────────────────


class Status(BaseModel):
    code: int = 0
    message: str = ""


class SpanEvent(BaseModel):
    time_unix_nano: int = 0
    name: str = ""
    attributes: dict[str, Any] = Field(default_factory=dict)
    dropped_attributes_count: int = 0


class SpanLink(BaseModel):
    trace_id: str = ""
    span_id: str = ""
    trace_state: str = ""
    attributes: dict[str, Any] = Field(default_factory=dict)
    dropped_attributes_count: int = 0


class Span(BaseModel):
    trace_id: str = ""
    span_id: str = ""
    parent_span_id: str = ""
    trace_state: str = ""
    name: str = ""
    kind: int = 0
    start_time_unix_nano: int = 0
    end_time_unix_nano: int = 0
    attributes: dict[str, Any] = Field(default_factory=dict)
    dropped_attributes_count: int = 0
    events: list[SpanEvent] = Field(default_factory=list)
    dropped_events_count: int = 0
    links: list[SpanLink] = Field(default_factory=list)
    dropped_links_count: int = 0
    status: Status = Field(default_factory=Status)


class ScopeSpans(BaseModel):
    scope: InstrumentationScope = Field(default_factory=InstrumentationScope)
    spans: list[Span] = Field(default_factory=list)


class ResourceSpans(BaseModel):
    resource: Resource = Field(default_factory=Resource)
    scope_spans: list[ScopeSpans] = Field(default_factory=list)


class TracesData(BaseModel):
    resource_spans: list[ResourceSpans] = Field(default_factory=list)


# ── Logs ──────────────────────────────────────────────────────────


class LogRecord(BaseModel):
    time_unix_nano: int = 0
    observed_time_unix_nano: int = 0
    severity_number: int = 0
    severity_text: str = ""
    body: Any = None
    attributes: dict[str, Any] = Field(default_factory=dict)
    dropped_attributes_count: int = 0
    flags: int = 0
    trace_id: str = ""
    span_id: str = ""


class ScopeLogs(BaseModel):
    scope: InstrumentationScope = Field(default_factory=InstrumentationScope)
    log_records: list[LogRecord] = Field(default_factory=list)


class ResourceLogs(BaseModel):
    resource: Resource = Field(default_factory=Resource)
    scope_logs: list[ScopeLogs] = Field(default_factory=list)


class LogsData(BaseModel):
    resource_logs: list[ResourceLogs] = Field(default_factory=list)


# ── Metrics ───────────────────────────────────────────────────────


class NumberDataPoint(BaseModel):
    attributes: dict[str, Any] = Field(default_factory=dict)
    start_time_unix_nano: int = 0
    time_unix_nano: int = 0
    as_int: int | None = None
    as_double: float | None = None
    flags: int = 0


class HistogramDataPoint(BaseModel):
    attributes: dict[str, Any] = Field(default_factory=dict)
    start_time_unix_nano: int = 0
    time_unix_nano: int = 0
    count: int = 0
    sum: float | None = None
    bucket_counts: list[int] = Field(default_factory=list)
    explicit_bounds: list[float] = Field(default_factory=list)
    min: float | None = None
    max: float | None = None
    flags: int = 0


class ValueAtQuantile(BaseModel):
    quantile: float = 0.0
    value: float = 0.0


class SummaryDataPoint(BaseModel):
    attributes: dict[str, Any] = Field(default_factory=dict)
    start_time_unix_nano: int = 0
    time_unix_nano: int = 0
    count: int = 0
    sum: float = 0.0
    quantile_values: list[ValueAtQuantile] = Field(default_factory=list)
    flags: int = 0


DataPoint = NumberDataPoint | HistogramDataPoint | SummaryDataPoint


class Gauge(BaseModel):
    type: Literal["gauge"] = "gauge"
    data_points: list[NumberDataPoint] = Field(default_factory=list)


class Sum(BaseModel):
    type: Literal["sum"] = "sum"
    data_points: list[NumberDataPoint] = Field(default_factory=list)
    aggregation_temporality: AggregationTemporality = AggregationTemporality.UNSPECIFIED
    is_monotonic: bool = False


class Histogram(BaseModel):
    type: Literal["histogram"] = "histogram"
    data_points: list[HistogramDataPoint] = Field(default_factory=list)
    aggregation_temporality: AggregationTemporality = AggregationTemporality.UNSPECIFIED


class Summary(BaseModel):
    type: Literal["summary"] = "summary"
    data_points: list[SummaryDataPoint] = Field(default_factory=list)


# Discriminated union: Pydantic picks the right model based on `type`
MetricData = Annotated[
    Gauge | Sum | Histogram | Summary,
    Field(discriminator="type"),
]


class Metric(BaseModel):
    name: str = ""
    description: str = ""
    unit: str = ""
    data: MetricData = Field(default_factory=Gauge)


class ScopeMetrics(BaseModel):
    scope: InstrumentationScope = Field(default_factory=InstrumentationScope)
    metrics: list[Metric] = Field(default_factory=list)


class ResourceMetrics(BaseModel):
    resource: Resource = Field(default_factory=Resource)
    scope_metrics: list[ScopeMetrics] = Field(default_factory=list)


class MetricsData(BaseModel):
    resource_metrics: list[ResourceMetrics] = Field(default_factory=list)
