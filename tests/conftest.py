"""Shared fixtures: small records, their contexts and a binder."""

from __future__ import annotations

from typing import Any

import pytest

from telemetry_transform.contexts import DataPointContext, LogContext, SpanContext
from telemetry_transform.models import StatementNode
from telemetry_transform.records import (
    Gauge,
    InstrumentationScope,
    LogRecord,
    Metric,
    NumberDataPoint,
    Resource,
    Span,
    Status,
)
from telemetry_transform.registry import default_registry
from telemetry_transform.statements import bind_statement


@pytest.fixture
def resource():
    return Resource(attributes={"service.name": "checkout", "host.name": "web-1"})


@pytest.fixture
def scope():
    return InstrumentationScope(name="io.opentelemetry.http", version="1.2.0")


@pytest.fixture
def span():
    return Span(
        name="GET /cart",
        kind=2,
        attributes={
            "http.method": "GET",
            "http.url": "https://shop.example/cart",
            "http.user_agent": "curl/8.0",
        },
        status=Status(code=1),
    )


@pytest.fixture
def span_ctx(span, scope, resource):
    return SpanContext(span, scope, resource)


@pytest.fixture
def log_record():
    return LogRecord(
        severity_text="INFO",
        body={"user": {"id": 7, "password": "hunter2"}, "message": "login"},
        attributes={"component": "auth"},
    )


@pytest.fixture
def log_ctx(log_record, scope, resource):
    return LogContext(log_record, scope, resource)


@pytest.fixture
def gauge_metric():
    return Metric(
        name="system.cpu.utilization",
        unit="1",
        data=Gauge(
            data_points=[
                NumberDataPoint(as_double=0.25, attributes={"cpu": "0"}),
                NumberDataPoint(as_double=0.5, attributes={"cpu": "1"}),
                NumberDataPoint(as_int=3, attributes={"cpu": "2"}),
            ]
        ),
    )


@pytest.fixture
def point_ctx(gauge_metric, scope, resource):
    return DataPointContext(gauge_metric.data.data_points[0], gauge_metric, scope, resource)


@pytest.fixture
def registry():
    return default_registry()


@pytest.fixture
def bind(registry):
    """Bind a raw statement mapping; defaults to the span context."""

    def _bind(raw: dict[str, Any], context_type=SpanContext):
        return bind_statement(StatementNode.model_validate(raw), context_type, registry)

    return _bind
