"""truncate_all: cap the length of every string value in a map."""

from __future__ import annotations

from telemetry_transform.contexts.base import TransformContext
from telemetry_transform.expressions import ExprFunc, Getter


def truncate_all(target: Getter, limit: int) -> ExprFunc:
    """Truncate string values of the target map to *limit* characters."""
    if limit < 0:
        raise ValueError(f"limit cannot be negative: {limit}")

    def truncate(ctx: TransformContext) -> None:
        value = target.get(ctx)
        if isinstance(value, dict):
            for key, item in value.items():
                if isinstance(item, str) and len(item) > limit:
                    value[key] = item[:limit]
        return None

    return truncate
