"""delete_key: remove one key from a map."""

from __future__ import annotations

from telemetry_transform.contexts.base import TransformContext
from telemetry_transform.expressions import ExprFunc, Getter


def delete_key(target: Getter, key: str) -> ExprFunc:
    """Remove a key from the map the target resolves to.

    Values that are not maps (including a missing value) are left alone
    without error. Errors from resolving the target itself propagate.
    """

    def delete(ctx: TransformContext) -> None:
        value = target.get(ctx)
        if isinstance(value, dict):
            value.pop(key, None)
        return None

    return delete
