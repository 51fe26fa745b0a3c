"""
exprcalc - a safe arithmetic expression calculator.

Tokenizes, parses and evaluates expressions such as ``2 * sin(pi / 4) ^ 2``
without using Python's eval().
"""

from __future__ import annotations

from ._version import __version__
from .calculator import CalculationError, calculate, try_calculate
from .core.errors import (
    ConfigError,
    EvalError,
    EvalErrorKind,
    ExprCalcError,
    LexError,
    ParseError,
    ParseErrorKind,
)
from .core.expression_lang import REGISTRY, evaluate, evaluate_tree, parse_expr, tokenize

__all__ = [
    "__version__",
    "REGISTRY",
    "CalculationError",
    "ConfigError",
    "EvalError",
    "EvalErrorKind",
    "ExprCalcError",
    "LexError",
    "ParseError",
    "ParseErrorKind",
    "calculate",
    "evaluate",
    "evaluate_tree",
    "parse_expr",
    "tokenize",
    "try_calculate",
]
