"""Resource context: statements that run once per resource envelope."""

from __future__ import annotations

from typing import ClassVar

from telemetry_transform.contexts.base import RESOURCE_FIELDS, TransformContext, on
from telemetry_transform.paths import FieldEntry
from telemetry_transform.records import Resource


class ResourceContext(TransformContext):
    kind: ClassVar[str] = "resource"
    fields: ClassVar[dict[str, FieldEntry]] = on(TransformContext.get_item, RESOURCE_FIELDS)

    def __init__(self, resource: Resource) -> None:
        super().__init__(resource, None, resource)
