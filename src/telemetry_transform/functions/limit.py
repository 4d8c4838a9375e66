"""limit: cap the number of entries in a map."""

from __future__ import annotations

from telemetry_transform.contexts.base import TransformContext
from telemetry_transform.expressions import ExprFunc, Getter


def limit(target: Getter, limit: int) -> ExprFunc:
    """Keep at most *limit* entries of the target map, in insertion order."""
    if limit < 0:
        raise ValueError(f"limit cannot be negative: {limit}")

    def cap(ctx: TransformContext) -> None:
        value = target.get(ctx)
        if isinstance(value, dict) and len(value) > limit:
            for key in list(value)[limit:]:
                del value[key]
        return None

    return cap
