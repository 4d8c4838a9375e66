"""convert_gauge_to_sum: retag a gauge metric as a sum."""

from __future__ import annotations

from telemetry_transform.contexts.datapoint import DataPointContext
from telemetry_transform.expressions import ExprFunc
from telemetry_transform.records import AggregationTemporality, Gauge, Sum

TEMPORALITIES: dict[str, AggregationTemporality] = {
    "delta": AggregationTemporality.DELTA,
    "cumulative": AggregationTemporality.CUMULATIVE,
}


def convert_gauge_to_sum(aggregation_temporality: str, monotonic: bool) -> ExprFunc:
    """Convert the current metric from a gauge to a sum.

    Metrics that are not gauges are skipped: the function returns None
    without raising. Data points keep their count, values and order.
    """
    try:
        temporality = TEMPORALITIES[aggregation_temporality]
    except KeyError:
        raise ValueError(
            f"unknown aggregation temporality: {aggregation_temporality!r} "
            f"(expected one of {sorted(TEMPORALITIES)})"
        ) from None

    def convert(ctx: DataPointContext) -> None:
        metric = ctx.get_metric()
        if not isinstance(metric.data, Gauge):
            return None

        # Snapshot the points before the gauge is replaced
        points = list(metric.data.data_points)
        metric.data = Sum(aggregation_temporality=temporality, is_monotonic=monotonic)
        metric.data.data_points.extend(points)
        return None

    return convert
