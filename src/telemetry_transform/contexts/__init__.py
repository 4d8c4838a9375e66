"""Context adapters, one per telemetry record kind."""

from __future__ import annotations

from telemetry_transform.contexts.base import TransformContext
from telemetry_transform.contexts.datapoint import DataPointContext
from telemetry_transform.contexts.log import LogContext
from telemetry_transform.contexts.resource import ResourceContext
from telemetry_transform.contexts.span import SpanContext

CONTEXTS: dict[str, type[TransformContext]] = {
    context_type.kind: context_type
    for context_type in (ResourceContext, SpanContext, LogContext, DataPointContext)
}

__all__ = [
    "CONTEXTS",
    "DataPointContext",
    "LogContext",
    "ResourceContext",
    "SpanContext",
    "TransformContext",
]
