"""convert_case: change the case style of a string."""

from __future__ import annotations

import re
from collections.abc import Callable

from telemetry_transform.contexts.base import TransformContext
from telemetry_transform.expressions import ExprFunc, Getter

_WORD_BREAK = re.compile(r"[\s_\-.]+|(?<=[a-z0-9])(?=[A-Z])")


def _words(value: str) -> list[str]:
    return [word for word in _WORD_BREAK.split(value) if word]


def _snake(value: str) -> str:
    return "_".join(word.lower() for word in _words(value))


def _camel(value: str) -> str:
    return "".join(word[:1].upper() + word[1:].lower() for word in _words(value))


CASES: dict[str, Callable[[str], str]] = {
    "lower": str.lower,
    "upper": str.upper,
    "snake": _snake,
    "camel": _camel,
}


def convert_case(target: Getter, to_case: str) -> ExprFunc:
    """Return the target string in another case (lower, upper, snake, camel).

    ``camel`` produces UpperCamelCase. Non-strings yield None.
    """
    try:
        converter = CASES[to_case]
    except KeyError:
        raise ValueError(
            f"unknown case {to_case!r} (expected one of {sorted(CASES)})"
        ) from None

    def convert(ctx: TransformContext) -> str | None:
        value = target.get(ctx)
        if not isinstance(value, str):
            return None
        return converter(value)

    return convert
