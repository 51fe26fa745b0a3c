"""
Calculator boundary for exprcalc.

Wraps the core evaluator for callers that want either a number or a
human-readable message, and renders structured core errors as text.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field

from exprcalc.core.config import CalculatorConfig
from exprcalc.core.errors import (
    EvalError,
    EvalErrorKind,
    ExprCalcError,
    LexError,
    ParseError,
    ParseErrorKind,
)
from exprcalc.core.expression_lang.evaluator import evaluate

logger = logging.getLogger(__name__)


class CalculationError(Exception):
    """A failed calculation with its user-facing message."""

    def __init__(self, message: str, error: ExprCalcError) -> None:
        super().__init__(message)
        self.message = message
        self.error = error


class CalculationResult(BaseModel):
    """Outcome of one calculation, for JSON output."""

    expression: str = Field(description="Input expression")
    ok: bool = Field(description="True when a value was computed")
    value: float | None = Field(default=None, description="Result, if ok")
    error: str | None = Field(default=None, description="Message, if not ok")
    error_kind: str | None = Field(default=None, description="Error class and kind")
    detail: dict | None = Field(default=None, description="Structured error fields")

    # Results may be inf or NaN; serialize them as JSON constants instead of null
    model_config = ConfigDict(ser_json_inf_nan="constants")


_LIMIT_LABELS = {
    "max_length": "expression is too long",
    "max_nesting": "expression is nested too deeply",
    "max_depth": "expression tree is too deep",
}


def format_error(err: ExprCalcError) -> str:
    """Render a core error as a one-line message."""
    if isinstance(err, LexError):
        return f"unexpected character {err.character!r} at position {err.position}"

    if isinstance(err, ParseError):
        if err.kind == ParseErrorKind.EMPTY_INPUT:
            return "empty expression"
        if err.kind == ParseErrorKind.UNCLOSED_PAREN:
            return f"missing ')' at position {err.position}"
        if err.kind == ParseErrorKind.UNMATCHED_PAREN:
            return f"unmatched ')' at position {err.position}"
        if err.kind == ParseErrorKind.EMPTY_ARGUMENTS:
            return f"expected {err.expected} at position {err.position}"
        return f"expected {err.expected} at position {err.position}, found {err.found}"

    if isinstance(err, EvalError):
        if err.kind == EvalErrorKind.UNKNOWN_IDENTIFIER:
            return f"unknown identifier {err.name!r}"
        if err.kind == EvalErrorKind.ARITY_MISMATCH:
            plural = "" if err.expected == 1 else "s"
            return f"{err.name}() takes {err.expected} argument{plural}, got {err.got}"
        label = _LIMIT_LABELS.get(err.limit or "", "expression is too complex")
        if err.position is not None and err.limit != "max_length":
            return f"{label} (at position {err.position})"
        return label

    return str(err)


def error_kind(err: ExprCalcError) -> str:
    """Short machine-readable tag such as ``ParseError.unclosed_paren``."""
    kind = getattr(err, "kind", None)
    if kind is None:
        return type(err).__name__
    return f"{type(err).__name__}.{kind}"


def calculate(
    expression: str,
    *,
    variables: Mapping[str, float] | None = None,
    config: CalculatorConfig | None = None,
) -> float:
    """Evaluate an expression, turning core errors into CalculationError.

    Raises:
        CalculationError: With a formatted message and the original error.
    """
    config = config or CalculatorConfig()
    try:
        value = evaluate(expression, variables=variables, limits=config.limits)
    except ExprCalcError as e:
        logger.debug("Calculation of %r failed: %r", expression, e)
        raise CalculationError(format_error(e), e) from e
    logger.debug("Calculated %r = %r", expression, value)
    return value


def try_calculate(
    expression: str,
    *,
    variables: Mapping[str, float] | None = None,
    config: CalculatorConfig | None = None,
) -> CalculationResult:
    """Like :func:`calculate`, but report failure in the result."""
    try:
        value = calculate(expression, variables=variables, config=config)
    except CalculationError as e:
        return CalculationResult(
            expression=expression,
            ok=False,
            error=e.message,
            error_kind=error_kind(e.error),
            detail=e.error.as_dict(),
        )
    return CalculationResult(expression=expression, ok=True, value=value)


def format_value(value: float, precision: int | None = None) -> str:
    """Render a result for display.

    Without ``precision`` the shortest round-tripping form is used
    (``14.0``). With it, ``precision`` significant digits and no trailing
    zeros (``14``, ``0.333333``).
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if precision is None:
        return repr(value)
    return f"{value:.{precision}g}"
