"""keep_keys: drop every map key not in an allow-list."""

from __future__ import annotations

from telemetry_transform.contexts.base import TransformContext
from telemetry_transform.expressions import ExprFunc, Getter


def keep_keys(target: Getter, keys: list[str]) -> ExprFunc:
    """Keep only the listed keys of the target map."""
    keep = frozenset(keys)

    def retain(ctx: TransformContext) -> None:
        value = target.get(ctx)
        if isinstance(value, dict):
            for key in [k for k in value if k not in keep]:
                del value[key]
        return None

    return retain
