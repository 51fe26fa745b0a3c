"""Tests for exprcalc.toml loading."""

from pathlib import Path

import pytest

from exprcalc.core.config import (
    CONFIG_FILENAME,
    MAX_DEPTH_CEILING,
    MAX_NESTING_CEILING,
    CalculatorConfig,
    ExpressionLimits,
    find_config,
    load_config,
)
from exprcalc.core.errors import ConfigError


def test_defaults() -> None:
    config = CalculatorConfig()
    assert config.limits == ExpressionLimits()
    assert config.limits.max_nesting == 100
    assert config.output.precision is None
    assert config.source is None


def test_load_full_config(tmp_path: Path) -> None:
    path = tmp_path / CONFIG_FILENAME
    path.write_text(
        """
[limits]
max_length = 500
max_nesting = 20
max_depth = 50

[output]
precision = 8
"""
    )

    config = load_config(path)
    assert config.limits == ExpressionLimits(max_length=500, max_nesting=20, max_depth=50)
    assert config.output.precision == 8
    assert config.source == path


def test_missing_keys_use_defaults(tmp_path: Path) -> None:
    path = tmp_path / CONFIG_FILENAME
    path.write_text("[limits]\nmax_depth = 10\n")

    config = load_config(path)
    assert config.limits.max_depth == 10
    assert config.limits.max_length == ExpressionLimits().max_length
    assert config.output.precision is None


def test_empty_file(tmp_path: Path) -> None:
    path = tmp_path / CONFIG_FILENAME
    path.write_text("")
    assert load_config(path).limits == ExpressionLimits()


@pytest.mark.parametrize(
    ("body", "key"),
    [
        ("[limits]\nmax_depth = 0\n", "limits.max_depth"),
        ("[limits]\nmax_length = -5\n", "limits.max_length"),
        ('[limits]\nmax_nesting = "deep"\n', "limits.max_nesting"),
        ("[limits]\nmax_nesting = true\n", "limits.max_nesting"),
        ("[output]\nprecision = 1.5\n", "output.precision"),
    ],
)
def test_invalid_values(tmp_path: Path, body: str, key: str) -> None:
    path = tmp_path / CONFIG_FILENAME
    path.write_text(body)

    with pytest.raises(ConfigError) as exc_info:
        load_config(path)
    assert exc_info.value.key == key


def test_invalid_toml(tmp_path: Path) -> None:
    path = tmp_path / CONFIG_FILENAME
    path.write_text("[limits\n")

    with pytest.raises(ConfigError, match="invalid TOML"):
        load_config(path)


def test_find_config(tmp_path: Path) -> None:
    assert find_config(tmp_path) is None
    (tmp_path / CONFIG_FILENAME).write_text("")
    assert find_config(tmp_path) == tmp_path / CONFIG_FILENAME


@pytest.mark.parametrize(
    ("body", "key"),
    [
        ("[limits]\nmax_depth = 100000\n", "limits.max_depth"),
        ("[limits]\nmax_nesting = 100000\n", "limits.max_nesting"),
    ],
)
def test_limits_above_ceiling(tmp_path: Path, body: str, key: str) -> None:
    path = tmp_path / CONFIG_FILENAME
    path.write_text(body)

    with pytest.raises(ConfigError, match="at most") as exc_info:
        load_config(path)
    assert exc_info.value.key == key


def test_limits_at_ceiling(tmp_path: Path) -> None:
    path = tmp_path / CONFIG_FILENAME
    path.write_text(
        f"[limits]\nmax_depth = {MAX_DEPTH_CEILING}\nmax_nesting = {MAX_NESTING_CEILING}\n"
    )

    limits = load_config(path).limits
    assert limits.max_depth == MAX_DEPTH_CEILING
    assert limits.max_nesting == MAX_NESTING_CEILING


@pytest.mark.parametrize("body", ["limits = 5\n", 'output = "wide"\n'])
def test_section_must_be_table(tmp_path: Path, body: str) -> None:
    path = tmp_path / CONFIG_FILENAME
    path.write_text(body)

    with pytest.raises(ConfigError, match="table"):
        load_config(path)


def test_unreadable_path(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="cannot read") as exc_info:
        load_config(tmp_path)
    assert exc_info.value.key == str(tmp_path)
