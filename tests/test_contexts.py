"""Tests for the context adapters and their field tables."""

from __future__ import annotations

from typing import ClassVar

import pytest

from telemetry_transform.contexts import (
    CONTEXTS,
    DataPointContext,
    ResourceContext,
    SpanContext,
    TransformContext,
)
from telemetry_transform.contexts.base import attribute, on
from telemetry_transform.errors import BindError, TypeMismatchError
from telemetry_transform.models import PathNode, StatementNode
from telemetry_transform.paths import resolve_path
from telemetry_transform.records import (
    AggregationTemporality,
    HistogramDataPoint,
    Metric,
    Sum,
)
from telemetry_transform.statements import bind_statement, evaluate_record
from telemetry_transform.values import ValueType


def _accessor(context_type, *parts):
    return resolve_path(PathNode.model_validate({"path": list(parts)}).path, context_type)


# ── Shared surface ────────────────────────────────────────────────


def test_registered_kinds():
    assert set(CONTEXTS) == {"resource", "span", "log", "datapoint"}


def test_span_context_borrows_records(span_ctx, span, scope, resource):
    assert span_ctx.get_item() is span
    assert span_ctx.get_instrumentation_scope() is scope
    assert span_ctx.get_resource() is resource


def test_repr_names_record_type(span_ctx):
    assert repr(span_ctx) == "SpanContext(Span)"


def test_resource_context_has_no_scope(resource):
    ctx = ResourceContext(resource)
    assert ctx.get_item() is resource
    assert ctx.get_instrumentation_scope() is None
    assert _accessor(ResourceContext, "attributes").get(ctx)["service.name"] == "checkout"


def test_resource_context_cannot_reach_scope():
    with pytest.raises(BindError, match="unknown field 'instrumentation_scope'"):
        _accessor(ResourceContext, "instrumentation_scope", "name")


def test_scope_fields(span_ctx):
    assert _accessor(SpanContext, "instrumentation_scope", "version").get(span_ctx) == "1.2.0"


# ── Span ──────────────────────────────────────────────────────────


def test_span_status_structure(span_ctx, span):
    accessor = _accessor(SpanContext, "status", "message")
    accessor.set(span_ctx, "boom")
    assert span.status.message == "boom"
    assert _accessor(SpanContext, "status", "code").get(span_ctx) == 1


# ── Data points ───────────────────────────────────────────────────


def test_number_value_fields(point_ctx):
    point = point_ctx.get_item()
    assert _accessor(DataPointContext, "value_double").get(point_ctx) == 0.25
    assert _accessor(DataPointContext, "value_int").get(point_ctx) is None

    _accessor(DataPointContext, "value_int").set(point_ctx, 4)
    assert point.as_int == 4
    assert point.as_double is None


def test_histogram_field_reads_none_on_number_point(point_ctx):
    assert _accessor(DataPointContext, "count").get(point_ctx) is None


def test_histogram_field_refuses_write_on_number_point(point_ctx):
    with pytest.raises(TypeMismatchError, match="NumberDataPoint has no field 'count'"):
        _accessor(DataPointContext, "count").set(point_ctx, 5)


def test_explicit_bounds_widen_to_float(scope, resource):
    point = HistogramDataPoint()
    ctx = DataPointContext(point, Metric(), scope, resource)
    _accessor(DataPointContext, "explicit_bounds").set(ctx, [1, 2.5])
    assert point.explicit_bounds == [1.0, 2.5]


def test_bucket_counts_reject_non_numbers(scope, resource):
    point = HistogramDataPoint()
    ctx = DataPointContext(point, Metric(), scope, resource)
    with pytest.raises(TypeMismatchError, match="only holds numbers"):
        _accessor(DataPointContext, "bucket_counts").set(ctx, ["a"])
    with pytest.raises(TypeMismatchError, match="only holds integers"):
        _accessor(DataPointContext, "bucket_counts").set(ctx, [1.5])


def test_metric_fields(point_ctx, gauge_metric):
    assert _accessor(DataPointContext, "metric", "name").get(point_ctx) == "system.cpu.utilization"
    _accessor(DataPointContext, "metric", "unit").set(point_ctx, "%")
    assert gauge_metric.unit == "%"


def test_temporality_absent_on_gauge(point_ctx):
    accessor = _accessor(DataPointContext, "metric", "aggregation_temporality")
    assert accessor.get(point_ctx) is None
    with pytest.raises(TypeMismatchError, match="gauge metric has no field"):
        accessor.set(point_ctx, 1)


def test_temporality_on_sum(scope, resource):
    metric = Metric(data=Sum(aggregation_temporality=AggregationTemporality.CUMULATIVE))
    ctx = DataPointContext(None, metric, scope, resource)
    accessor = _accessor(DataPointContext, "metric", "aggregation_temporality")
    assert accessor.get(ctx) == 2

    accessor.set(ctx, 1)
    assert metric.data.aggregation_temporality is AggregationTemporality.DELTA

    with pytest.raises(TypeMismatchError, match="Invalid aggregation_temporality"):
        accessor.set(ctx, 7)


def test_is_monotonic_on_sum(scope, resource):
    metric = Metric(data=Sum())
    ctx = DataPointContext(None, metric, scope, resource)
    _accessor(DataPointContext, "metric", "is_monotonic").set(ctx, True)
    assert metric.data.is_monotonic is True


# ── New context kinds ─────────────────────────────────────────────


class _Event:
    def __init__(self, name: str) -> None:
        self.name = name


class EventContext(TransformContext):
    kind: ClassVar[str] = "event"
    fields: ClassVar[dict] = on(
        TransformContext.get_item, {"name": attribute("name", ValueType.STRING)}
    )


def test_new_context_kind_binds_builtins(registry, resource):
    node = StatementNode.model_validate(
        {"function": "set", "arguments": [{"path": ["name"]}, {"literal": "renamed"}]}
    )
    statement = bind_statement(node, EventContext, registry)
    event = _Event("original")

    assert evaluate_record([statement], EventContext(event, None, resource)) == []
    assert event.name == "renamed"
