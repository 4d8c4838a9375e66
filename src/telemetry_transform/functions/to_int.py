"""int: numeric conversion."""

from __future__ import annotations

import math

from telemetry_transform.contexts.base import TransformContext
from telemetry_transform.expressions import ExprFunc, Getter


def to_int(value: Getter) -> ExprFunc:
    """Convert a bool, number or numeric string to an int; None otherwise.

    Floats are truncated toward zero.
    """

    def convert(ctx: TransformContext) -> int | None:
        resolved = value.get(ctx)
        if isinstance(resolved, bool):
            return int(resolved)
        if isinstance(resolved, int):
            return resolved
        if isinstance(resolved, float):
            return int(resolved) if math.isfinite(resolved) else None
        if isinstance(resolved, str):
            try:
                return int(resolved.strip())
            except ValueError:
                pass
            try:
                parsed = float(resolved)
            except ValueError:
                return None
            return int(parsed) if math.isfinite(parsed) else None
        return None

    return convert
