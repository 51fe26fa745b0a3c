"""Tests for the built-in constant and function registry."""

from __future__ import annotations

import math

import pytest

from exprcalc.core.expression_lang.registry import (
    REGISTRY,
    FunctionEntry,
    Registry,
    ieee_pow,
)

REQUIRED_UNARY = ["sin", "cos", "tan", "sqrt", "abs", "ln", "log10", "exp", "floor", "ceil"]


class TestDefaultRegistry:
    def test_required_constants(self) -> None:
        assert REGISTRY.constant("pi") == math.pi
        assert REGISTRY.constant("e") == math.e

    def test_required_functions(self) -> None:
        for name in REQUIRED_UNARY:
            entry = REGISTRY.function(name)
            assert entry is not None, name
            assert entry.arity == 1
        pow_entry = REGISTRY.function("pow")
        assert pow_entry is not None
        assert pow_entry.arity == 2

    def test_lookup_is_case_sensitive(self) -> None:
        assert REGISTRY.function("Sin") is None
        assert REGISTRY.constant("PI") is None
        assert "pi" in REGISTRY
        assert "Pi" not in REGISTRY

    def test_is_read_only(self) -> None:
        with pytest.raises(TypeError):
            REGISTRY.constants["pi"] = 3.0  # type: ignore[index]
        with pytest.raises(TypeError):
            REGISTRY.functions["foo"] = REGISTRY.functions["sin"]  # type: ignore[index]
        with pytest.raises(AttributeError):
            REGISTRY.constants = {}  # type: ignore[misc]
        with pytest.raises(AttributeError):
            REGISTRY.extra = 1  # type: ignore[attr-defined]

    def test_iteration_lists_every_name(self) -> None:
        names = list(REGISTRY)
        assert len(names) == len(REGISTRY)
        assert names[:2] == ["e", "pi"]
        assert "atan2" in names


class TestRegistryConstruction:
    def test_rejects_bad_arity(self) -> None:
        with pytest.raises(ValueError, match="arity"):
            Registry({}, [FunctionEntry("f", 3, lambda a, b, c: a)])

    def test_rejects_overlapping_names(self) -> None:
        with pytest.raises(ValueError, match="both"):
            Registry({"f": 1.0}, [FunctionEntry("f", 1, abs)])

    def test_source_mapping_is_copied(self) -> None:
        constants = {"k": 1.0}
        registry = Registry(constants, [])
        constants["k"] = 2.0
        assert registry.constant("k") == 1.0


class TestFunctionSemantics:
    """Functions return IEEE results instead of raising."""

    def call(self, name: str, *args: float) -> float:
        entry = REGISTRY.function(name)
        assert entry is not None
        return entry(*args)

    def test_round_half_away_from_zero(self) -> None:
        assert self.call("round", 2.5) == 3.0
        assert self.call("round", -2.5) == -3.0
        assert self.call("round", 2.4) == 2.0

    def test_signum(self) -> None:
        assert self.call("signum", -3.0) == -1.0
        assert self.call("signum", 0.0) == 1.0
        assert self.call("signum", -0.0) == -1.0
        assert math.isnan(self.call("signum", math.nan))

    def test_max_min_ignore_nan(self) -> None:
        assert self.call("max", math.nan, 1.0) == 1.0
        assert self.call("min", 2.0, math.nan) == 2.0

    def test_atanh_poles(self) -> None:
        assert self.call("atanh", 1.0) == math.inf
        assert self.call("atanh", -1.0) == -math.inf
        assert math.isnan(self.call("atanh", 2.0))

    def test_trig_of_infinity(self) -> None:
        assert math.isnan(self.call("sin", math.inf))

    def test_hyperbolic_overflow(self) -> None:
        assert self.call("sinh", -1000.0) == -math.inf
        assert self.call("cosh", -1000.0) == math.inf

    def test_floor_ceil_non_finite(self) -> None:
        assert self.call("floor", -math.inf) == -math.inf
        assert math.isnan(self.call("ceil", math.nan))

    def test_floor_returns_float(self) -> None:
        assert isinstance(self.call("floor", 2.7), float)

    def test_log_poles(self) -> None:
        assert self.call("log10", 0.0) == -math.inf
        assert math.isnan(self.call("log10", -1.0))


class TestIEEEPow:
    def test_zero_to_zero(self) -> None:
        assert ieee_pow(0.0, 0.0) == 1.0

    def test_negative_overflow_odd_exponent(self) -> None:
        assert ieee_pow(-10.0, 401.0) == -math.inf

    def test_negative_zero_pole(self) -> None:
        assert ieee_pow(-0.0, -1.0) == -math.inf
        assert ieee_pow(-0.0, -2.0) == math.inf

    def test_negative_base_fractional_exponent(self) -> None:
        assert math.isnan(ieee_pow(-2.0, 0.5))
