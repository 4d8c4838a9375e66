"""Tests for path resolution and typed path access."""

from __future__ import annotations

import pytest

from telemetry_transform.contexts import DataPointContext, LogContext, SpanContext
from telemetry_transform.errors import BindError, PathNotFoundError, TypeMismatchError
from telemetry_transform.models import PathNode
from telemetry_transform.paths import render_path, resolve_path
from telemetry_transform.records import Histogram, HistogramDataPoint, Metric


def _segments(*parts):
    return PathNode.model_validate({"path": list(parts)}).path


@pytest.fixture
def histogram_ctx(scope, resource):
    point = HistogramDataPoint(count=4, sum=10.0, bucket_counts=[1, 3], explicit_bounds=[5.0])
    metric = Metric(name="latency", data=Histogram(data_points=[point]))
    return DataPointContext(point, metric, scope, resource)


# ── Resolution ────────────────────────────────────────────────────


def test_resolve_plain_field(span_ctx):
    accessor = resolve_path(_segments("name"), SpanContext)
    assert accessor.get(span_ctx) == "GET /cart"
    assert accessor.writable


def test_resolve_through_structure(span_ctx):
    accessor = resolve_path(_segments("resource", "attributes"), SpanContext)
    assert accessor.get(span_ctx) == {"service.name": "checkout", "host.name": "web-1"}


def test_resolve_map_key(span_ctx):
    accessor = resolve_path(
        _segments({"name": "attributes", "keys": ["http.method"]}), SpanContext
    )
    assert accessor.get(span_ctx) == "GET"


def test_missing_map_key_reads_none(span_ctx):
    accessor = resolve_path(_segments({"name": "attributes", "keys": ["nope"]}), SpanContext)
    assert accessor.get(span_ctx) is None


def test_empty_path_is_bind_error():
    with pytest.raises(BindError, match="Empty path"):
        resolve_path([], SpanContext)


def test_unknown_field_lists_available():
    with pytest.raises(BindError, match="unknown field 'nope' in span context") as exc:
        resolve_path(_segments("nope"), SpanContext)
    assert "attributes" in str(exc.value)


def test_unknown_field_inside_structure():
    with pytest.raises(BindError, match="unknown field 'nope' in 'resource'"):
        resolve_path(_segments("resource", "nope"), SpanContext)


def test_sub_field_of_leaf():
    with pytest.raises(BindError, match="has no sub-field 'first'"):
        resolve_path(_segments("name", "first"), SpanContext)


def test_path_ending_on_structure():
    with pytest.raises(BindError, match="ends on structure 'resource'"):
        resolve_path(_segments("resource"), SpanContext)


def test_indexing_a_structure():
    with pytest.raises(BindError, match="is a structure and cannot be indexed"):
        resolve_path(_segments({"name": "resource", "keys": ["x"]}, "attributes"), SpanContext)


def test_indexing_a_scalar():
    with pytest.raises(BindError, match="holds a string and cannot be indexed"):
        resolve_path(_segments({"name": "name", "keys": ["x"]}), SpanContext)


def test_map_indexed_by_integer():
    with pytest.raises(BindError, match="must be indexed by string"):
        resolve_path(_segments({"name": "attributes", "keys": [0]}), SpanContext)


def test_slice_indexed_by_string():
    with pytest.raises(BindError, match="must be indexed by integer"):
        resolve_path(_segments({"name": "bucket_counts", "keys": ["x"]}), DataPointContext)


def test_field_of_another_context_kind():
    with pytest.raises(BindError, match="unknown field 'body'"):
        resolve_path(_segments("body"), SpanContext)


def test_render_path():
    segments = _segments("resource", {"name": "attributes", "keys": ["k", 0]})
    assert render_path(segments) == 'resource.attributes["k"][0]'


# ── Reading ───────────────────────────────────────────────────────


def test_nested_keys_into_log_body(log_ctx):
    accessor = resolve_path(_segments({"name": "body", "keys": ["user", "id"]}), LogContext)
    assert accessor.get(log_ctx) == 7


def test_key_lookup_on_non_map_is_type_mismatch(log_ctx, log_record):
    log_record.body = "plain text"
    accessor = resolve_path(_segments({"name": "body", "keys": ["user"]}), LogContext)
    with pytest.raises(TypeMismatchError, match="cannot look up key 'user' in a str"):
        accessor.get(log_ctx)


def test_slice_index(histogram_ctx):
    accessor = resolve_path(_segments({"name": "bucket_counts", "keys": [1]}), DataPointContext)
    assert accessor.get(histogram_ctx) == 3


def test_slice_index_out_of_range(histogram_ctx):
    accessor = resolve_path(_segments({"name": "bucket_counts", "keys": [5]}), DataPointContext)
    with pytest.raises(PathNotFoundError, match="index 5 out of range"):
        accessor.get(histogram_ctx)


# ── Writing ───────────────────────────────────────────────────────


def test_set_plain_field(span_ctx, span):
    resolve_path(_segments("name"), SpanContext).set(span_ctx, "POST /cart")
    assert span.name == "POST /cart"


def test_set_into_map_key(span_ctx, span):
    accessor = resolve_path(_segments({"name": "attributes", "keys": ["new"]}), SpanContext)
    accessor.set(span_ctx, "v")
    assert span.attributes["new"] == "v"


def test_set_nested_key(log_ctx, log_record):
    accessor = resolve_path(_segments({"name": "body", "keys": ["user", "id"]}), LogContext)
    accessor.set(log_ctx, 8)
    assert log_record.body["user"]["id"] == 8


def test_set_with_missing_parent(log_ctx, log_record):
    log_record.body = None
    accessor = resolve_path(_segments({"name": "body", "keys": ["a"]}), LogContext)
    with pytest.raises(PathNotFoundError, match="parent container does not exist"):
        accessor.set(log_ctx, 1)


def test_set_coerces_int_to_double(histogram_ctx):
    accessor = resolve_path(_segments("sum"), DataPointContext)
    accessor.set(histogram_ctx, 3)
    value = histogram_ctx.get_item().sum
    assert value == 3.0
    assert isinstance(value, float)


def test_set_rejects_string_into_map(span_ctx, span):
    accessor = resolve_path(_segments("attributes"), SpanContext)
    with pytest.raises(TypeMismatchError):
        accessor.set(span_ctx, "x")
    assert span.attributes["http.method"] == "GET"


def test_set_map_stores_a_copy(span_ctx, span):
    value = {"k": "v"}
    resolve_path(_segments("attributes"), SpanContext).set(span_ctx, value)
    value["k"] = "changed"
    assert span.attributes == {"k": "v"}


def test_read_only_field(point_ctx):
    accessor = resolve_path(_segments("metric", "type"), DataPointContext)
    assert not accessor.writable
    assert accessor.get(point_ctx) == "gauge"
    with pytest.raises(TypeMismatchError, match="read-only"):
        accessor.set(point_ctx, "sum")
