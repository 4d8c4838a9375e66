"""Tests for the function registry."""

from __future__ import annotations

import pytest

from telemetry_transform.contexts.base import TransformContext
from telemetry_transform.errors import BindError
from telemetry_transform.expressions import ExprFunc, Getter, GetSetter
from telemetry_transform.functions import BUILTINS
from telemetry_transform.registry import ArgKind, FunctionRegistry, Parameter, default_registry


def _noop(target: Getter) -> ExprFunc:
    """Do nothing."""

    def run(ctx: TransformContext) -> None:
        return None

    return run


# ── Built-ins ─────────────────────────────────────────────────────


def test_default_registry_holds_builtins(registry):
    assert len(registry) == len(BUILTINS)
    for name in ("set", "delete_key", "convert_gauge_to_sum", "int", "concat"):
        assert name in registry


def test_default_registry_is_fresh():
    first = default_registry()
    first.freeze()
    assert not default_registry().frozen


def test_parameters_read_from_annotations(registry):
    spec = registry.get("delete_key")
    assert spec.parameters == (
        Parameter("target", ArgKind.GETTER),
        Parameter("key", ArgKind.STRING),
    )


def test_getsetter_and_list_parameters(registry):
    assert registry.get("replace_pattern").parameters[0].kind is ArgKind.GETSETTER
    assert registry.get("keep_keys").parameters[1].kind is ArgKind.STRING_LIST


def test_variadic_parameter(registry):
    spec = registry.get("concat")
    assert spec.parameters[1].variadic
    assert spec.signature() == "concat(delimiter: string, *values: getter)"


def test_signature_and_description(registry):
    spec = registry.get("delete_key")
    assert spec.signature() == "delete_key(target: getter, key: string)"
    assert spec.description == "Remove a key from the map the target resolves to."


def test_metric_functions_restricted_to_datapoints(registry):
    spec = registry.get("convert_gauge_to_sum")
    assert spec.available_in("datapoint")
    assert not spec.available_in("span")
    assert registry.get("set").available_in("span")


def test_iterates_sorted(registry):
    names = [spec.name for spec in registry]
    assert names == sorted(names)


# ── Registration ──────────────────────────────────────────────────


def test_register_and_get():
    registry = FunctionRegistry()
    spec = registry.register("noop", _noop)
    assert registry.get("noop") is spec
    assert registry.names() == ["noop"]


def test_decorator_registration():
    registry = FunctionRegistry()

    @registry.function("touch", contexts=["span"])
    def touch(target: GetSetter, value: int = 0) -> ExprFunc:
        def run(ctx: TransformContext) -> None:
            return None

        return run

    spec = registry.get("touch")
    assert spec.contexts == frozenset({"span"})
    assert spec.parameters[1] == Parameter("value", ArgKind.INT, required=False)
    assert spec.signature() == "touch(target: writable path, [value: int])"


def test_duplicate_name_rejected():
    registry = FunctionRegistry()
    registry.register("noop", _noop)
    with pytest.raises(ValueError, match="already registered"):
        registry.register("noop", _noop)


def test_frozen_registry_rejects_registration():
    registry = FunctionRegistry()
    registry.freeze()
    with pytest.raises(RuntimeError, match="frozen"):
        registry.register("noop", _noop)


def test_unknown_function():
    registry = FunctionRegistry()
    registry.register("noop", _noop)
    with pytest.raises(BindError, match=r"Unknown function 'nope'. Available: \['noop'\]"):
        registry.get("nope")


def test_unsupported_annotation_rejected():
    def bad(target: dict) -> ExprFunc:
        raise AssertionError

    with pytest.raises(TypeError, match="Unsupported function parameter annotation"):
        FunctionRegistry().register("bad", bad)


def test_unannotated_parameter_rejected():
    def bad(target) -> ExprFunc:
        raise AssertionError

    with pytest.raises(TypeError, match="is not annotated"):
        FunctionRegistry().register("bad", bad)


def test_keyword_only_parameter_rejected():
    def bad(*, target: Getter) -> ExprFunc:
        raise AssertionError

    with pytest.raises(TypeError, match="must be positional"):
        FunctionRegistry().register("bad", bad)
