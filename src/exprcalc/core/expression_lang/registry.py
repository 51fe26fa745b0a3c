"""
Built-in constants and functions for exprcalc expressions.

The default :data:`REGISTRY` is built once at import time and exposed through
read-only mappings. Every function follows IEEE-754 conventions instead of
raising: out-of-domain arguments give NaN, poles and overflow give infinities.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType

NumericFunc = Callable[..., float]


@dataclass(frozen=True)
class FunctionEntry:
    """A named numeric function with a fixed argument count."""

    name: str
    arity: int
    func: NumericFunc
    description: str = ""

    def __call__(self, *args: float) -> float:
        return self.func(*args)


class Registry:
    """Immutable name table of constants and functions."""

    __slots__ = ("_constants", "_functions")

    def __init__(
        self,
        constants: Mapping[str, float],
        functions: Mapping[str, FunctionEntry] | list[FunctionEntry],
    ) -> None:
        if not isinstance(functions, Mapping):
            functions = {entry.name: entry for entry in functions}
        for name, entry in functions.items():
            if entry.arity not in (1, 2):
                raise ValueError(f"{name}: arity must be 1 or 2, got {entry.arity}")
        overlap = set(constants) & set(functions)
        if overlap:
            raise ValueError(f"Names are both constants and functions: {sorted(overlap)}")
        self._constants = MappingProxyType(dict(constants))
        self._functions = MappingProxyType(dict(functions))

    @property
    def constants(self) -> Mapping[str, float]:
        return self._constants

    @property
    def functions(self) -> Mapping[str, FunctionEntry]:
        return self._functions

    def constant(self, name: str) -> float | None:
        return self._constants.get(name)

    def function(self, name: str) -> FunctionEntry | None:
        return self._functions.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._constants or name in self._functions

    def __iter__(self) -> Iterator[str]:
        yield from sorted(self._constants)
        yield from sorted(self._functions)

    def __len__(self) -> int:
        return len(self._constants) + len(self._functions)


# ---------------------------------------------------------------------------
# IEEE-754 helpers
# ---------------------------------------------------------------------------


def _nan_on_domain_error(func: Callable[[float], float]) -> Callable[[float], float]:
    """Wrap a ``math`` function so a domain error yields NaN."""

    def wrapped(x: float) -> float:
        try:
            return func(x)
        except ValueError:
            return math.nan

    wrapped.__name__ = func.__name__
    return wrapped


def ieee_pow(base: float, exponent: float) -> float:
    """Power with IEEE results where ``math.pow`` raises.

    ``0^0`` is 1.0 as in ``math.pow``.
    """
    try:
        return math.pow(base, exponent)
    except OverflowError:
        # |result| too large; negative only for a negative base and odd integer exponent
        if base < 0 and _is_odd_integer(exponent):
            return -math.inf
        return math.inf
    except ValueError:
        if base == 0 and exponent < 0:
            # Pole: keeps the sign of zero for odd integer exponents
            if _is_odd_integer(exponent):
                return math.copysign(math.inf, base)
            return math.inf
        # Negative base with a non-integer exponent
        return math.nan


def _is_odd_integer(x: float) -> bool:
    return math.isfinite(x) and x.is_integer() and int(x) % 2 == 1


def _ln(x: float) -> float:
    if x == 0:
        return -math.inf
    if x < 0:
        return math.nan
    return math.log(x)


def _log10(x: float) -> float:
    if x == 0:
        return -math.inf
    if x < 0:
        return math.nan
    return math.log10(x)


def _exp(x: float) -> float:
    try:
        return math.exp(x)
    except OverflowError:
        return math.inf


def _sinh(x: float) -> float:
    try:
        return math.sinh(x)
    except OverflowError:
        return math.copysign(math.inf, x)


def _cosh(x: float) -> float:
    try:
        return math.cosh(x)
    except OverflowError:
        return math.inf


def _atanh(x: float) -> float:
    if x == 1:
        return math.inf
    if x == -1:
        return -math.inf
    if abs(x) > 1:
        return math.nan
    return math.atanh(x)


def _floor(x: float) -> float:
    if not math.isfinite(x):
        return x
    return float(math.floor(x))


def _ceil(x: float) -> float:
    if not math.isfinite(x):
        return x
    return float(math.ceil(x))


def _round(x: float) -> float:
    """Round half away from zero (Python's ``round`` rounds half to even)."""
    if not math.isfinite(x):
        return x
    rounded = math.floor(abs(x))
    if abs(x) - rounded >= 0.5:
        rounded += 1
    return math.copysign(float(rounded), x)


def _signum(x: float) -> float:
    if math.isnan(x):
        return math.nan
    return math.copysign(1.0, x)


def _max(a: float, b: float) -> float:
    if math.isnan(a):
        return b
    if math.isnan(b):
        return a
    return max(a, b)


def _min(a: float, b: float) -> float:
    if math.isnan(a):
        return b
    if math.isnan(b):
        return a
    return min(a, b)


# ---------------------------------------------------------------------------
# Default registry
# ---------------------------------------------------------------------------

_CONSTANTS: dict[str, float] = {
    "pi": math.pi,
    "e": math.e,
}

_FUNCTIONS: list[FunctionEntry] = [
    # Trigonometric
    FunctionEntry("sin", 1, _nan_on_domain_error(math.sin), "Sine (radians)"),
    FunctionEntry("cos", 1, _nan_on_domain_error(math.cos), "Cosine (radians)"),
    FunctionEntry("tan", 1, _nan_on_domain_error(math.tan), "Tangent (radians)"),
    FunctionEntry("asin", 1, _nan_on_domain_error(math.asin), "Inverse sine"),
    FunctionEntry("acos", 1, _nan_on_domain_error(math.acos), "Inverse cosine"),
    FunctionEntry("atan", 1, math.atan, "Inverse tangent"),
    FunctionEntry("atan2", 2, math.atan2, "Angle of the point (x, y), called as atan2(y, x)"),
    # Hyperbolic
    FunctionEntry("sinh", 1, _sinh, "Hyperbolic sine"),
    FunctionEntry("cosh", 1, _cosh, "Hyperbolic cosine"),
    FunctionEntry("tanh", 1, math.tanh, "Hyperbolic tangent"),
    FunctionEntry("asinh", 1, math.asinh, "Inverse hyperbolic sine"),
    FunctionEntry("acosh", 1, _nan_on_domain_error(math.acosh), "Inverse hyperbolic cosine"),
    FunctionEntry("atanh", 1, _atanh, "Inverse hyperbolic tangent"),
    # Powers and logarithms
    FunctionEntry("sqrt", 1, _nan_on_domain_error(math.sqrt), "Square root"),
    FunctionEntry("exp", 1, _exp, "e raised to x"),
    FunctionEntry("ln", 1, _ln, "Natural logarithm"),
    FunctionEntry("log10", 1, _log10, "Base-10 logarithm"),
    FunctionEntry("pow", 2, ieee_pow, "x raised to y, same as x ^ y"),
    # Rounding and sign
    FunctionEntry("abs", 1, math.fabs, "Absolute value"),
    FunctionEntry("floor", 1, _floor, "Largest integer <= x"),
    FunctionEntry("ceil", 1, _ceil, "Smallest integer >= x"),
    FunctionEntry("round", 1, _round, "Nearest integer, halves away from zero"),
    FunctionEntry("signum", 1, _signum, "Sign of x as 1.0 or -1.0 (NaN for NaN)"),
    FunctionEntry("max", 2, _max, "Larger of two values, ignoring NaN"),
    FunctionEntry("min", 2, _min, "Smaller of two values, ignoring NaN"),
]

REGISTRY = Registry(_CONSTANTS, _FUNCTIONS)
