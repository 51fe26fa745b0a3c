"""Shared pytest fixtures for exprcalc tests."""

import pytest

from exprcalc.core.config import CalculatorConfig, ExpressionLimits


@pytest.fixture
def strict_config() -> CalculatorConfig:
    """Config with tight limits for complexity tests."""
    return CalculatorConfig(limits=ExpressionLimits(max_length=64, max_nesting=8, max_depth=16))
