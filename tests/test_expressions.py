"""Tests for getters, setters and bound calls."""

from __future__ import annotations

import pytest

from telemetry_transform.contexts import SpanContext
from telemetry_transform.errors import FunctionExecutionError, PathNotFoundError
from telemetry_transform.expressions import (
    BoundCall,
    CallGetter,
    LiteralGetter,
    PathGetSetter,
    PathGetter,
)
from telemetry_transform.models import PathNode
from telemetry_transform.paths import resolve_path


def _accessor(*parts):
    return resolve_path(PathNode.model_validate({"path": list(parts)}).path, SpanContext)


def test_literal_getter_returns_value(span_ctx):
    assert LiteralGetter("x").get(span_ctx) == "x"


def test_literal_getter_hands_out_copies(span_ctx):
    getter = LiteralGetter({"a": [1]})
    first = getter.get(span_ctx)
    first["a"].append(2)
    assert getter.get(span_ctx) == {"a": [1]}


def test_path_getter(span_ctx):
    assert PathGetter(_accessor("name")).get(span_ctx) == "GET /cart"


def test_path_getsetter(span_ctx, span):
    getsetter = PathGetSetter(_accessor("name"))
    getsetter.set(span_ctx, "renamed")
    assert getsetter.get(span_ctx) == "renamed"
    assert span.name == "renamed"


def test_bound_call_wraps_foreign_errors(span_ctx):
    def boom(ctx):
        raise RuntimeError("kaput")

    call = BoundCall("boom", boom, "boom()")
    with pytest.raises(FunctionExecutionError, match="Function 'boom' failed: kaput") as exc:
        call.invoke(span_ctx)
    assert isinstance(exc.value.cause, RuntimeError)
    assert exc.value.function == "boom"


def test_bound_call_passes_package_errors_through(span_ctx):
    def missing(ctx):
        raise PathNotFoundError("gone")

    with pytest.raises(PathNotFoundError, match="gone"):
        BoundCall("missing", missing, "missing()").invoke(span_ctx)


def test_call_getter_is_lazy(span_ctx):
    calls = []

    def record(ctx):
        calls.append(ctx)
        return len(calls)

    getter = CallGetter(BoundCall("record", record, "record()"))
    assert calls == []
    assert getter.get(span_ctx) == 1
    assert getter.get(span_ctx) == 2
