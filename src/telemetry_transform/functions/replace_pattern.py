"""replace_pattern: regex substitution on a string field."""

from __future__ import annotations

from telemetry_transform.contexts.base import TransformContext
from telemetry_transform.expressions import ExprFunc, GetSetter
from telemetry_transform.functions.delete_matching_keys import compile_pattern


def replace_pattern(target: GetSetter, pattern: str, replacement: str) -> ExprFunc:
    """Replace every match of the regex in the target string.

    The replacement uses Python ``re.sub`` syntax (``\\1`` for groups).
    Non-string values are left alone.
    """
    compiled = compile_pattern(pattern)

    def replace(ctx: TransformContext) -> None:
        value = target.get(ctx)
        if isinstance(value, str):
            updated = compiled.sub(replacement, value)
            if updated != value:
                target.set(ctx, updated)
        return None

    return replace
