"""Built-in functions.

Each module holds one factory. ``BUILTINS`` lists them under the names
statements use; metric-shape functions are restricted to the datapoint
context.
"""

from __future__ import annotations

from collections.abc import Callable

from telemetry_transform.expressions import ExprFunc
from telemetry_transform.functions.concat import concat
from telemetry_transform.functions.convert_case import convert_case
from telemetry_transform.functions.convert_gauge_to_sum import convert_gauge_to_sum
from telemetry_transform.functions.convert_sum_to_gauge import convert_sum_to_gauge
from telemetry_transform.functions.delete_key import delete_key
from telemetry_transform.functions.delete_matching_keys import delete_matching_keys
from telemetry_transform.functions.is_match import is_match
from telemetry_transform.functions.keep_keys import keep_keys
from telemetry_transform.functions.limit import limit
from telemetry_transform.functions.replace_all_matches import replace_all_matches
from telemetry_transform.functions.replace_pattern import replace_pattern
from telemetry_transform.functions.set_value import set_value
from telemetry_transform.functions.to_int import to_int
from telemetry_transform.functions.truncate_all import truncate_all
from telemetry_transform.registry import FunctionRegistry

_METRICS_ONLY = frozenset({"datapoint"})

BUILTINS: tuple[tuple[str, Callable[..., ExprFunc], frozenset[str] | None], ...] = (
    ("set", set_value, None),
    ("delete_key", delete_key, None),
    ("delete_matching_keys", delete_matching_keys, None),
    ("keep_keys", keep_keys, None),
    ("truncate_all", truncate_all, None),
    ("limit", limit, None),
    ("replace_pattern", replace_pattern, None),
    ("replace_all_matches", replace_all_matches, None),
    ("concat", concat, None),
    ("is_match", is_match, None),
    ("convert_case", convert_case, None),
    ("int", to_int, None),
    ("convert_gauge_to_sum", convert_gauge_to_sum, _METRICS_ONLY),
    ("convert_sum_to_gauge", convert_sum_to_gauge, _METRICS_ONLY),
)


def register_builtins(registry: FunctionRegistry) -> None:
    for name, factory, contexts in BUILTINS:
        registry.register(name, factory, contexts=contexts)
