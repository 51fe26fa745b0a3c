"""
Calculator configuration loaded from an optional ``exprcalc.toml``.

Example:

    [limits]
    max_length = 10000
    max_nesting = 100
    max_depth = 300

    [output]
    precision = 12
"""

import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from .errors import ConfigError

CONFIG_FILENAME = "exprcalc.toml"


@dataclass(frozen=True)
class ExpressionLimits:
    """Bounds that keep pathological input from exhausting the stack."""

    max_length: int = 10_000  # characters of source text
    max_nesting: int = 100  # parser recursion levels (parentheses, signs, ^)
    max_depth: int = 300  # levels in the parsed tree


DEFAULT_LIMITS = ExpressionLimits()


@dataclass(frozen=True)
class OutputConfig:
    """How the CLI renders numbers."""

    precision: int | None = None  # significant digits; None = shortest repr


@dataclass(frozen=True)
class CalculatorConfig:
    limits: ExpressionLimits = field(default_factory=ExpressionLimits)
    output: OutputConfig = field(default_factory=OutputConfig)
    source: Path | None = None


# Deepest limits a config file may set; beyond these the recursive parser
# and evaluator would outrun CPython's default recursion limit.
MAX_NESTING_CEILING = 150
MAX_DEPTH_CEILING = 500


def _positive_int(
    section: dict,
    section_name: str,
    key: str,
    default: int | None,
    ceiling: int | None = None,
) -> int | None:
    value = section.get(key, default)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{section_name}.{key}", f"expected an integer, got {value!r}")
    if value <= 0:
        raise ConfigError(f"{section_name}.{key}", f"must be positive, got {value}")
    if ceiling is not None and value > ceiling:
        raise ConfigError(f"{section_name}.{key}", f"must be at most {ceiling}, got {value}")
    return value


def _table(data: dict, name: str) -> dict:
    section = data.get(name, {})
    if not isinstance(section, dict):
        raise ConfigError(name, f"expected a [{name}] table, got {section!r}")
    return section


def load_config(path: Path) -> CalculatorConfig:
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(str(path), f"cannot read file: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(str(path), f"invalid TOML: {e}") from e

    limits_data = _table(data, "limits")
    output_data = _table(data, "output")

    defaults = ExpressionLimits()
    limits = ExpressionLimits(
        max_length=_positive_int(limits_data, "limits", "max_length", defaults.max_length),
        max_nesting=_positive_int(
            limits_data, "limits", "max_nesting", defaults.max_nesting, MAX_NESTING_CEILING
        ),
        max_depth=_positive_int(
            limits_data, "limits", "max_depth", defaults.max_depth, MAX_DEPTH_CEILING
        ),
    )
    output = OutputConfig(
        precision=_positive_int(output_data, "output", "precision", None),
    )

    return CalculatorConfig(limits=limits, output=output, source=path)


def find_config(start: Path | None = None) -> Path | None:
    """Return ``exprcalc.toml`` in ``start`` (default: cwd) if it exists."""
    candidate = (start or Path.cwd()) / CONFIG_FILENAME
    if candidate.is_file():
        return candidate
    return None
