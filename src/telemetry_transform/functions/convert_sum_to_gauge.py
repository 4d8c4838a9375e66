"""convert_sum_to_gauge: retag a sum metric as a gauge."""

from __future__ import annotations

from telemetry_transform.contexts.datapoint import DataPointContext
from telemetry_transform.expressions import ExprFunc
from telemetry_transform.records import Gauge, Sum


def convert_sum_to_gauge() -> ExprFunc:
    """Convert the current metric from a sum to a gauge.

    Temporality and monotonicity are discarded. Metrics that are not sums
    are skipped.
    """

    def convert(ctx: DataPointContext) -> None:
        metric = ctx.get_metric()
        if not isinstance(metric.data, Sum):
            return None

        points = list(metric.data.data_points)
        metric.data = Gauge()
        metric.data.data_points.extend(points)
        return None

    return convert
