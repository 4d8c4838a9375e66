"""Span context."""

from __future__ import annotations

from typing import ClassVar

from telemetry_transform.contexts.base import (
    TransformContext,
    attribute,
    enclosing_fields,
    on,
)
from telemetry_transform.paths import Field, FieldEntry, Struct
from telemetry_transform.records import InstrumentationScope, Resource, Span, Status
from telemetry_transform.values import ValueType

SPAN_FIELDS: dict[str, Field] = {
    "trace_id": attribute("trace_id", ValueType.STRING),
    "span_id": attribute("span_id", ValueType.STRING),
    "parent_span_id": attribute("parent_span_id", ValueType.STRING),
    "trace_state": attribute("trace_state", ValueType.STRING),
    "name": attribute("name", ValueType.STRING),
    "kind": attribute("kind", ValueType.INT),
    "start_time_unix_nano": attribute("start_time_unix_nano", ValueType.INT),
    "end_time_unix_nano": attribute("end_time_unix_nano", ValueType.INT),
    "attributes": attribute("attributes", ValueType.MAP),
    "dropped_attributes_count": attribute("dropped_attributes_count", ValueType.INT),
    "dropped_events_count": attribute("dropped_events_count", ValueType.INT),
    "dropped_links_count": attribute("dropped_links_count", ValueType.INT),
}

STATUS_FIELDS: dict[str, Field] = {
    "code": attribute("code", ValueType.INT),
    "message": attribute("message", ValueType.STRING),
}


def _status(ctx: TransformContext) -> Status:
    return ctx.get_item().status


class SpanContext(TransformContext):
    kind: ClassVar[str] = "span"
    fields: ClassVar[dict[str, FieldEntry]] = {
        **on(TransformContext.get_item, SPAN_FIELDS),
        "status": Struct(_status, STATUS_FIELDS),
        **enclosing_fields(),
    }

    def __init__(
        self,
        span: Span,
        scope: InstrumentationScope,
        resource: Resource,
    ) -> None:
        super().__init__(span, scope, resource)
