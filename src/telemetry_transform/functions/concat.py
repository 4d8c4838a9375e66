"""concat: join values into one string."""

from __future__ import annotations

import json
from typing import Any

from telemetry_transform.contexts.base import TransformContext
from telemetry_transform.expressions import ExprFunc, Getter


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (bytes, bytearray)):
        return value.hex()
    if isinstance(value, (dict, list)):
        return json.dumps(value, sort_keys=True)
    return str(value)


def concat(delimiter: str, *values: Getter) -> ExprFunc:
    """Join the values with the delimiter. None renders as an empty string."""

    def join(ctx: TransformContext) -> str:
        return delimiter.join(_as_text(getter.get(ctx)) for getter in values)

    return join
