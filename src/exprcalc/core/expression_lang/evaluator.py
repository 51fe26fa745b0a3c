"""
Expression evaluator for exprcalc.

Evaluates expression trees against a registry of constants and functions,
plus optional per-call variables. Pure evaluation: no I/O, no side effects,
and no use of Python's eval().

Arithmetic follows IEEE-754 instead of raising: ``1/0`` is ``inf``,
``0/0`` and ``x % 0`` are NaN, and ``%`` is the truncated remainder
(``math.fmod``), so the result takes the sign of the dividend.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping

from exprcalc.core.config import DEFAULT_LIMITS, ExpressionLimits
from exprcalc.core.errors import arity_mismatch, too_complex, unknown_identifier
from exprcalc.core.expression_lang.parser import parse_expr
from exprcalc.core.expression_lang.registry import REGISTRY, Registry, ieee_pow
from exprcalc.core.ir.expressions import (
    BinaryExpr,
    BinaryOp,
    Expr,
    FuncCall,
    Literal,
    UnaryExpr,
    UnaryOp,
    Variable,
)

logger = logging.getLogger(__name__)


class _Scope:
    """Everything a single evaluation may consult."""

    __slots__ = ("registry", "variables", "max_depth")

    def __init__(
        self,
        registry: Registry,
        variables: Mapping[str, float],
        max_depth: int,
    ) -> None:
        self.registry = registry
        self.variables = variables
        self.max_depth = max_depth


def evaluate(
    source: str,
    *,
    registry: Registry = REGISTRY,
    variables: Mapping[str, float] | None = None,
    limits: ExpressionLimits = DEFAULT_LIMITS,
) -> float:
    """Tokenize, parse and evaluate an expression string.

    Args:
        source: Expression such as ``"2 + 3 * 4"``.
        registry: Constants and functions available to the expression.
        variables: Extra names for this call only; they shadow constants.
        limits: Length, nesting and depth bounds.

    Returns:
        The result as a float (possibly ``inf`` or NaN).

    Raises:
        LexError: On an unrecognized character.
        ParseError: On malformed input.
        EvalError: On an unknown name, a wrong argument count, or input that
            exceeds ``limits``.
    """
    expr = parse_expr(source, limits)
    logger.debug("Parsed %r", source)
    return evaluate_tree(expr, registry=registry, variables=variables, limits=limits)


def evaluate_tree(
    expr: Expr,
    *,
    registry: Registry = REGISTRY,
    variables: Mapping[str, float] | None = None,
    limits: ExpressionLimits = DEFAULT_LIMITS,
) -> float:
    """Evaluate a parsed expression tree.

    This is a safe tree-walking interpreter: only the closed set of AST node
    types is handled. Operands are evaluated left to right and the first
    failure aborts the walk.
    """
    scope = _Scope(registry, variables or {}, limits.max_depth)
    try:
        return _interpret(expr, scope, 1)
    except RecursionError:
        # Only reachable when max_depth is set above what the interpreter stack allows
        raise too_complex("max_depth") from None


def _interpret(expr: Expr, scope: _Scope, depth: int) -> float:
    """Dispatch evaluation to the appropriate handler."""
    if depth > scope.max_depth:
        raise too_complex("max_depth")

    if isinstance(expr, Literal):
        return expr.value

    if isinstance(expr, Variable):
        return _interpret_variable(expr, scope)

    if isinstance(expr, BinaryExpr):
        left = _interpret(expr.left, scope, depth + 1)
        right = _interpret(expr.right, scope, depth + 1)
        return apply_binary(expr.op, left, right)

    if isinstance(expr, UnaryExpr):
        val = _interpret(expr.operand, scope, depth + 1)
        return -val if expr.op == UnaryOp.NEG else val

    if isinstance(expr, FuncCall):
        return _interpret_func_call(expr, scope, depth)

    raise TypeError(f"Unknown expression type: {type(expr).__name__}")


def _interpret_variable(expr: Variable, scope: _Scope) -> float:
    """Resolve a bare name: per-call variables first, then constants."""
    if expr.name in scope.variables:
        return _as_float(scope.variables[expr.name])
    value = scope.registry.constant(expr.name)
    if value is None:
        raise unknown_identifier(expr.name)
    return value


def _as_float(value: float) -> float:
    """Convert a caller-supplied number, saturating ints too large for a float."""
    try:
        return float(value)
    except OverflowError:
        return math.inf if value > 0 else -math.inf


def _interpret_func_call(expr: FuncCall, scope: _Scope, depth: int) -> float:
    """Evaluate arguments left to right, then resolve and apply the function."""
    args = [_interpret(arg, scope, depth + 1) for arg in expr.args]
    entry = scope.registry.function(expr.name)
    if entry is None:
        raise unknown_identifier(expr.name)
    if len(args) != entry.arity:
        raise arity_mismatch(expr.name, entry.arity, len(args))
    return float(entry(*args))


def apply_binary(op: BinaryOp, left: float, right: float) -> float:
    """Apply a binary operator with IEEE-754 results."""
    if op == BinaryOp.ADD:
        return left + right
    if op == BinaryOp.SUB:
        return left - right
    if op == BinaryOp.MUL:
        return left * right
    if op == BinaryOp.DIV:
        return _divide(left, right)
    if op == BinaryOp.MOD:
        return _remainder(left, right)
    if op == BinaryOp.POW:
        return ieee_pow(left, right)
    raise ValueError(f"Unknown binary op: {op}")


def _divide(left: float, right: float) -> float:
    if right != 0:
        return left / right
    if left == 0 or math.isnan(left):
        return math.nan
    # Sign follows both operands, including a signed zero divisor
    return math.copysign(math.inf, left) * math.copysign(1.0, right)


def _remainder(left: float, right: float) -> float:
    if right == 0 or math.isinf(left) or math.isnan(left) or math.isnan(right):
        return math.nan
    return math.fmod(left, right)
