"""Log record context."""

from __future__ import annotations

from typing import ClassVar

from telemetry_transform.contexts.base import (
    TransformContext,
    attribute,
    enclosing_fields,
    on,
)
from telemetry_transform.paths import Field, FieldEntry
from telemetry_transform.records import InstrumentationScope, LogRecord, Resource
from telemetry_transform.values import ValueType

LOG_FIELDS: dict[str, Field] = {
    "time_unix_nano": attribute("time_unix_nano", ValueType.INT),
    "observed_time_unix_nano": attribute("observed_time_unix_nano", ValueType.INT),
    "severity_number": attribute("severity_number", ValueType.INT),
    "severity_text": attribute("severity_text", ValueType.STRING),
    "body": attribute("body", ValueType.ANY),
    "attributes": attribute("attributes", ValueType.MAP),
    "dropped_attributes_count": attribute("dropped_attributes_count", ValueType.INT),
    "flags": attribute("flags", ValueType.INT),
    "trace_id": attribute("trace_id", ValueType.STRING),
    "span_id": attribute("span_id", ValueType.STRING),
}


class LogContext(TransformContext):
    kind: ClassVar[str] = "log"
    fields: ClassVar[dict[str, FieldEntry]] = {
        **on(TransformContext.get_item, LOG_FIELDS),
        **enclosing_fields(),
    }

    def __init__(
        self,
        log_record: LogRecord,
        scope: InstrumentationScope,
        resource: Resource,
    ) -> None:
        super().__init__(log_record, scope, resource)
