"""is_match: regex test, for use in conditions."""

from __future__ import annotations

from telemetry_transform.contexts.base import TransformContext
from telemetry_transform.expressions import ExprFunc, Getter
from telemetry_transform.functions.delete_matching_keys import compile_pattern


def is_match(target: Getter, pattern: str) -> ExprFunc:
    """True when the target is a string containing a match of the regex."""
    compiled = compile_pattern(pattern)

    def match(ctx: TransformContext) -> bool:
        value = target.get(ctx)
        return isinstance(value, str) and compiled.search(value) is not None

    return match
