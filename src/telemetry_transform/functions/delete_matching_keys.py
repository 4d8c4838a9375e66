"""delete_matching_keys: remove every map key matching a regex."""

from __future__ import annotations

import re

from telemetry_transform.contexts.base import TransformContext
from telemetry_transform.expressions import ExprFunc, Getter


def compile_pattern(pattern: str) -> re.Pattern[str]:
    """Compile a regex, reporting bad patterns as ValueError."""
    try:
        return re.compile(pattern)
    except re.error as e:
        raise ValueError(f"invalid regex {pattern!r}: {e}") from e


def delete_matching_keys(target: Getter, pattern: str) -> ExprFunc:
    """Remove map keys matching the pattern (matched anywhere in the key)."""
    compiled = compile_pattern(pattern)

    def delete(ctx: TransformContext) -> None:
        value = target.get(ctx)
        if isinstance(value, dict):
            for key in [k for k in value if compiled.search(k)]:
                del value[key]
        return None

    return delete
