"""Metric data point context.

One context covers number, histogram and summary points. Fields that
only exist on some point kinds read as None elsewhere and refuse writes
with a TypeMismatchError, since that is a property of the record, not
of the statement.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, ClassVar

from telemetry_transform.contexts.base import (
    TransformContext,
    attribute,
    enclosing_fields,
    on,
)
from telemetry_transform.errors import TypeMismatchError
from telemetry_transform.paths import Field, FieldEntry, Struct
from telemetry_transform.records import (
    AggregationTemporality,
    DataPoint,
    HistogramDataPoint,
    InstrumentationScope,
    Metric,
    NumberDataPoint,
    Resource,
    SummaryDataPoint,
)
from telemetry_transform.values import ValueType


def _optional_get(name: str, *kinds: type) -> Callable[[Any], Any]:
    def get(owner: Any) -> Any:
        if isinstance(owner, kinds):
            return getattr(owner, name)
        return None

    return get


def _optional_set(name: str, *kinds: type) -> Callable[[Any, Any], None]:
    def set_(owner: Any, value: Any) -> None:
        if not isinstance(owner, kinds):
            raise TypeMismatchError(
                f"{type(owner).__name__} has no field '{name}'"
            )
        setattr(owner, name, value)

    return set_


def _optional(name: str, value_type: ValueType, *kinds: type) -> Field:
    """A field present only on the given owner types."""
    return Field(value_type, _optional_get(name, *kinds), _optional_set(name, *kinds))


def _number_value(name: str, value_type: ValueType) -> Field:
    """``value_int`` / ``value_double``: setting one clears the other."""
    own, other = ("as_int", "as_double") if name == "value_int" else ("as_double", "as_int")

    def get(point: Any) -> Any:
        if isinstance(point, NumberDataPoint):
            return getattr(point, own)
        return None

    def set_(point: Any, value: Any) -> None:
        if not isinstance(point, NumberDataPoint):
            raise TypeMismatchError(f"{type(point).__name__} has no field '{name}'")
        setattr(point, own, value)
        setattr(point, other, None)

    return Field(value_type, get, set_)


def _numbers(name: str, element: type, *kinds: type) -> Field:
    """A list field whose elements must be numeric."""
    store = _optional_set(name, *kinds)

    def set_(owner: Any, value: Any) -> None:
        for item in value:
            if isinstance(item, bool) or not isinstance(item, (int, float)):
                raise TypeMismatchError(f"'{name}' only holds numbers, got {item!r}")
            if element is int and not isinstance(item, int):
                raise TypeMismatchError(f"'{name}' only holds integers, got {item!r}")
        store(owner, [element(item) for item in value])

    return Field(ValueType.SLICE, _optional_get(name, *kinds), set_)


DATAPOINT_FIELDS: dict[str, Field] = {
    "attributes": attribute("attributes", ValueType.MAP),
    "start_time_unix_nano": attribute("start_time_unix_nano", ValueType.INT),
    "time_unix_nano": attribute("time_unix_nano", ValueType.INT),
    "flags": attribute("flags", ValueType.INT),
    "value_int": _number_value("value_int", ValueType.INT),
    "value_double": _number_value("value_double", ValueType.DOUBLE),
    "count": _optional("count", ValueType.INT, HistogramDataPoint, SummaryDataPoint),
    "sum": _optional("sum", ValueType.DOUBLE, HistogramDataPoint, SummaryDataPoint),
    "bucket_counts": _numbers("bucket_counts", int, HistogramDataPoint),
    "explicit_bounds": _numbers("explicit_bounds", float, HistogramDataPoint),
}


def _metric_type(metric: Metric) -> str:
    return metric.data.type


def _data_field(name: str, value_type: ValueType, convert: Any) -> Field:
    """A field of the metric's data union, absent on some metric types."""

    def get(metric: Metric) -> Any:
        value = getattr(metric.data, name, None)
        if isinstance(value, AggregationTemporality):
            return int(value)
        return value

    def set_(metric: Metric, value: Any) -> None:
        if not hasattr(metric.data, name):
            raise TypeMismatchError(f"{metric.data.type} metric has no field '{name}'")
        try:
            setattr(metric.data, name, convert(value))
        except ValueError as e:
            raise TypeMismatchError(f"Invalid {name}: {value!r}") from e

    return Field(value_type, get, set_)


METRIC_FIELDS: dict[str, Field] = {
    "name": attribute("name", ValueType.STRING),
    "description": attribute("description", ValueType.STRING),
    "unit": attribute("unit", ValueType.STRING),
    "type": Field(ValueType.STRING, _metric_type),
    "aggregation_temporality": _data_field(
        "aggregation_temporality", ValueType.INT, AggregationTemporality
    ),
    "is_monotonic": _data_field("is_monotonic", ValueType.BOOL, bool),
}


class DataPointContext(TransformContext):
    kind: ClassVar[str] = "datapoint"
    fields: ClassVar[dict[str, FieldEntry]] = {
        **on(TransformContext.get_item, DATAPOINT_FIELDS),
        "metric": Struct(lambda ctx: ctx.get_metric(), METRIC_FIELDS),
        **enclosing_fields(),
    }

    def __init__(
        self,
        data_point: DataPoint,
        metric: Metric,
        scope: InstrumentationScope,
        resource: Resource,
    ) -> None:
        super().__init__(data_point, scope, resource)
        self._metric = metric

    def get_metric(self) -> Metric:
        return self._metric
