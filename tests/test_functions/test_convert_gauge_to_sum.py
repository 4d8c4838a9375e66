"""Tests for convert_gauge_to_sum."""

from __future__ import annotations

import pytest

from telemetry_transform.contexts import DataPointContext
from telemetry_transform.errors import BindError
from telemetry_transform.records import (
    AggregationTemporality,
    Histogram,
    HistogramDataPoint,
    Metric,
    NumberDataPoint,
    Sum,
)


def _convert(temporality, monotonic):
    return {
        "function": "convert_gauge_to_sum",
        "arguments": [{"literal": temporality}, {"literal": monotonic}],
    }


def test_cumulative_monotonic(bind, point_ctx, gauge_metric):
    points = list(gauge_metric.data.data_points)
    statement = bind(_convert("cumulative", True), DataPointContext)

    assert statement.execute(point_ctx) == (None, True)

    data = gauge_metric.data
    assert isinstance(data, Sum)
    assert data.type == "sum"
    assert data.aggregation_temporality is AggregationTemporality.CUMULATIVE
    assert data.is_monotonic is True
    assert len(data.data_points) == 3
    # Same points, same order, values untouched
    assert all(a is b for a, b in zip(data.data_points, points))
    assert [p.as_double for p in data.data_points] == [0.25, 0.5, None]
    assert data.data_points[2].as_int == 3


def test_delta_non_monotonic(bind, point_ctx, gauge_metric):
    bind(_convert("delta", False), DataPointContext).execute(point_ctx)
    assert gauge_metric.data.aggregation_temporality is AggregationTemporality.DELTA
    assert gauge_metric.data.is_monotonic is False


def test_old_point_list_is_not_aliased(bind, point_ctx, gauge_metric):
    gauge = gauge_metric.data
    bind(_convert("delta", False), DataPointContext).execute(point_ctx)
    assert gauge_metric.data.data_points is not gauge.data_points
    assert len(gauge.data_points) == 3


def test_sum_metric_is_skipped(bind, scope, resource):
    data = Sum(
        data_points=[NumberDataPoint(as_int=1)],
        aggregation_temporality=AggregationTemporality.DELTA,
    )
    metric = Metric(name="requests", data=data)
    ctx = DataPointContext(data.data_points[0], metric, scope, resource)

    assert bind(_convert("cumulative", True), DataPointContext).execute(ctx) == (None, True)
    assert metric.data is data
    assert data.aggregation_temporality is AggregationTemporality.DELTA
    assert data.is_monotonic is False


def test_histogram_metric_is_skipped(bind, scope, resource):
    data = Histogram(data_points=[HistogramDataPoint(count=2)])
    metric = Metric(name="latency", data=data)
    ctx = DataPointContext(data.data_points[0], metric, scope, resource)

    bind(_convert("delta", True), DataPointContext).execute(ctx)
    assert metric.data is data


def test_second_run_changes_nothing(bind, point_ctx, gauge_metric):
    statement = bind(_convert("cumulative", True), DataPointContext)
    statement.execute(point_ctx)
    converted = gauge_metric.data
    snapshot = gauge_metric.model_dump()

    statement.execute(point_ctx)
    assert gauge_metric.data is converted
    assert gauge_metric.model_dump() == snapshot


@pytest.mark.parametrize("temporality", ["monthly", "Cumulative", ""])
def test_unknown_temporality_is_bind_error(bind, temporality):
    with pytest.raises(BindError, match="unknown aggregation temporality"):
        bind(_convert(temporality, True), DataPointContext)


def test_monotonic_must_be_a_bool_literal(bind):
    with pytest.raises(BindError, match="argument 'monotonic' expects a bool literal"):
        bind(_convert("delta", "yes"), DataPointContext)
