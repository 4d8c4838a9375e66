"""replace_all_matches: replace map string values matching a glob."""

from __future__ import annotations

from fnmatch import fnmatchcase

from telemetry_transform.contexts.base import TransformContext
from telemetry_transform.expressions import ExprFunc, Getter


def replace_all_matches(target: Getter, pattern: str, replacement: str) -> ExprFunc:
    """Replace each string value of the target map that matches the glob."""

    def replace(ctx: TransformContext) -> None:
        value = target.get(ctx)
        if isinstance(value, dict):
            for key, item in value.items():
                if isinstance(item, str) and fnmatchcase(item, pattern):
                    value[key] = replacement
        return None

    return replace
