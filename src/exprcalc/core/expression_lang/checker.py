"""
Static name checking for exprcalc expressions.

Walks a parsed tree and reports every unknown identifier and arity mismatch
without computing a value, so all problems in an expression can be shown at
once. The evaluator stops at the first of these.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from exprcalc.core.errors import EvalError, arity_mismatch, unknown_identifier
from exprcalc.core.expression_lang.registry import REGISTRY, Registry
from exprcalc.core.ir.expressions import (
    BinaryExpr,
    Expr,
    FuncCall,
    UnaryExpr,
    Variable,
)


def _children(expr: Expr) -> tuple[Expr, ...]:
    if isinstance(expr, BinaryExpr):
        return (expr.left, expr.right)
    if isinstance(expr, UnaryExpr):
        return (expr.operand,)
    if isinstance(expr, FuncCall):
        return expr.args
    return ()


def walk(expr: Expr) -> Iterator[Expr]:
    """Yield every node of the tree in evaluation order (operands first).

    Uses an explicit stack, so hand-built trees of any depth can be walked.
    """
    stack: list[tuple[Expr, bool]] = [(expr, False)]
    while stack:
        node, expanded = stack.pop()
        if expanded:
            yield node
            continue
        stack.append((node, True))
        stack.extend((child, False) for child in reversed(_children(node)))


def referenced_names(expr: Expr) -> set[str]:
    """Names of all variables and functions used by the expression."""
    return {node.name for node in walk(expr) if isinstance(node, (Variable, FuncCall))}


def check_names(
    expr: Expr,
    registry: Registry = REGISTRY,
    variables: Iterable[str] = (),
) -> list[EvalError]:
    """Collect resolution errors in the order the evaluator would hit them.

    Args:
        expr: Expression AST node.
        registry: Constants and functions to resolve against.
        variables: Names that will be bound per call.

    Returns:
        One EvalError per offending node; empty if the tree is evaluable.
    """
    bound = set(variables)
    errors: list[EvalError] = []
    for node in walk(expr):
        if isinstance(node, Variable):
            if node.name not in bound and registry.constant(node.name) is None:
                errors.append(unknown_identifier(node.name))
        elif isinstance(node, FuncCall):
            entry = registry.function(node.name)
            if entry is None:
                errors.append(unknown_identifier(node.name))
            elif len(node.args) != entry.arity:
                errors.append(arity_mismatch(node.name, entry.arity, len(node.args)))
    return errors
