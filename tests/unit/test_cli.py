"""Tests for CLI commands."""

import json
import math
import tomllib
from pathlib import Path

import pytest
from typer.testing import CliRunner

from exprcalc._version import __version__
from exprcalc.cli import app


@pytest.fixture
def cli_runner():
    """Return a CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run each test where no stray exprcalc.toml can be picked up."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_version(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_version_matches_pyproject():
    pyproject = Path(__file__).resolve().parents[2] / "pyproject.toml"
    with pyproject.open("rb") as fh:
        assert __version__ == tomllib.load(fh)["project"]["version"]


def test_eval_single(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["eval", "2+3*4"])
    assert result.exit_code == 0
    assert result.stdout.strip() == "14.0"


def test_eval_many(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["eval", "(2+3)*4", "2^3^2"])
    assert result.exit_code == 0
    assert result.stdout.splitlines() == ["(2+3)*4 = 20.0", "2^3^2 = 512.0"]


def test_eval_error(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["eval", "foo(1)"])
    assert result.exit_code == 1
    assert "Error: unknown identifier 'foo'" in result.output


def test_eval_division_by_zero_is_not_an_error(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["eval", "1/0", "0/0"])
    assert result.exit_code == 0
    assert result.stdout.splitlines() == ["1/0 = inf", "0/0 = NaN"]


def test_eval_variables(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["eval", "--var", "x=3", "--var", "y = 0.5", "x * y"])
    assert result.exit_code == 0
    assert result.stdout.strip() == "1.5"


def test_eval_bad_variable(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["eval", "--var", "x", "x"])
    assert result.exit_code == 2


def test_eval_json(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["eval", "--json", "1/0", "2+"])
    assert result.exit_code == 1
    data = json.loads(result.stdout)
    assert data[0]["ok"] is True
    assert data[0]["value"] == math.inf
    assert data[1]["ok"] is False
    assert data[1]["error_kind"] == "ParseError.unexpected_token"
    assert data[1]["detail"]["position"] == 2


def test_eval_uses_config_precision(cli_runner: CliRunner, isolated_cwd: Path):
    (isolated_cwd / "exprcalc.toml").write_text("[output]\nprecision = 6\n")
    result = cli_runner.invoke(app, ["eval", "1/3"])
    assert result.exit_code == 0
    assert result.stdout.strip() == "0.333333"


def test_explicit_config_path(cli_runner: CliRunner, tmp_path: Path):
    config = tmp_path / "strict.toml"
    config.write_text("[limits]\nmax_length = 4\n")
    result = cli_runner.invoke(app, ["--config", str(config), "eval", "1 + 2 + 3"])
    assert result.exit_code == 1
    assert "expression is too long" in result.output


def test_invalid_config(cli_runner: CliRunner, isolated_cwd: Path):
    (isolated_cwd / "exprcalc.toml").write_text("[limits]\nmax_depth = 0\n")
    result = cli_runner.invoke(app, ["eval", "1"])
    assert result.exit_code == 2
    assert "Invalid config" in result.output


def test_config_limit_above_ceiling(cli_runner: CliRunner, isolated_cwd: Path):
    (isolated_cwd / "exprcalc.toml").write_text("[limits]\nmax_depth = 100000\n")
    result = cli_runner.invoke(app, ["eval", "+".join(["1"] * 3000)])
    assert result.exit_code == 2
    assert "Invalid config" in result.output
    assert "limits.max_depth" in result.output


def test_parse(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["parse", "-2^2 + sqrt(x)"])
    assert result.exit_code == 0
    lines = result.stdout.splitlines()
    assert lines[0] == "((-(2.0 ^ 2.0)) + sqrt(x))"
    assert lines[1] == "depth: 4"


def test_parse_json(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["parse", "--json", "1 + 2"])
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data == {"op": "+", "left": {"value": 1.0}, "right": {"value": 2.0}}


def test_parse_error(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["parse", "(1"])
    assert result.exit_code == 1
    assert "missing ')' at position 2" in result.output


def test_check(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["check", "sin(pi)", "sqrt(1, 2) + y", "1 +"])
    assert result.exit_code == 1
    out = result.stdout
    assert "sin(pi): ok" in out
    assert "sqrt(1, 2) + y: sqrt() takes 1 argument, got 2" in out
    assert "sqrt(1, 2) + y: unknown identifier 'y'" in out
    assert "1 +: expected expression at position 3" in out


def test_check_with_bound_variable(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["check", "--var", "y=1", "y ^ 2"])
    assert result.exit_code == 0


def test_functions(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["functions"])
    assert result.exit_code == 0
    for name in ["pi", "sqrt", "log10", "atan2"]:
        assert name in result.stdout


def test_repl(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["repl"], input="1 + 1\n\n2 +\nquit\n3\n")
    assert result.exit_code == 0
    assert "2.0" in result.stdout
    assert "Error: expected expression at position 3" in result.stdout
    assert "3.0" not in result.stdout


def test_repl_ends_on_eof(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["repl"], input="2 * 4\n")
    assert result.exit_code == 0
    assert "8.0" in result.stdout
