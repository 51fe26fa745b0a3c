"""Intermediate representation for exprcalc expressions."""

from .expressions import (
    BinaryExpr,
    BinaryOp,
    Expr,
    FuncCall,
    Literal,
    UnaryExpr,
    UnaryOp,
    Variable,
    tree_depth,
)

__all__ = [
    "BinaryExpr",
    "BinaryOp",
    "Expr",
    "FuncCall",
    "Literal",
    "UnaryExpr",
    "UnaryOp",
    "Variable",
    "tree_depth",
]
