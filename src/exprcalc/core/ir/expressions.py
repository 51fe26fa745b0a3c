"""
Expression tree types for exprcalc.

Supports:
- Arithmetic: +, -, *, /, %, ^
- Unary sign: -x, +x
- Named constants and per-call variables: pi, e, x
- Function calls: sqrt(2), atan2(y, x)

Nodes are frozen pydantic models. A tree is built once by the parser and
only read afterwards.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Operators
# ---------------------------------------------------------------------------


class BinaryOp(StrEnum):
    """Binary operators for expressions."""

    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    MOD = "%"
    POW = "^"


class UnaryOp(StrEnum):
    """Unary operators for expressions."""

    NEG = "-"
    POS = "+"


# ---------------------------------------------------------------------------
# AST node types
# ---------------------------------------------------------------------------


class Literal(BaseModel):
    """A numeric literal."""

    value: float = Field(description="The literal value")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return repr(self.value)


class Variable(BaseModel):
    """
    A bare name: a registry constant or a per-call variable.

    Examples:
        - Variable(name="pi") → pi
        - Variable(name="x") → x
    """

    name: str = Field(description="Identifier")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return self.name


class BinaryExpr(BaseModel):
    """Binary operation: left op right."""

    op: BinaryOp
    left: Expr
    right: Expr

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"({self.left} {self.op.value} {self.right})"


class UnaryExpr(BaseModel):
    """Unary operation: op operand."""

    op: UnaryOp
    operand: Expr

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"({self.op.value}{self.operand})"


class FuncCall(BaseModel):
    """
    Function call: name(arg1, arg2, ...).

    The parser never produces a call without arguments.
    """

    name: str = Field(description="Function name")
    args: tuple[Expr, ...] = Field(default=(), description="Arguments")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        args_str = ", ".join(str(a) for a in self.args)
        return f"{self.name}({args_str})"


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

Expr = Literal | Variable | BinaryExpr | UnaryExpr | FuncCall

# Rebuild models for recursive forward references
BinaryExpr.model_rebuild()
UnaryExpr.model_rebuild()
FuncCall.model_rebuild()


def tree_depth(expr: Expr) -> int:
    """Number of node levels in a tree (a lone literal has depth 1).

    Iterative, so it is safe on trees deeper than the recursion limit.
    """
    depth = 0
    stack: list[tuple[Expr, int]] = [(expr, 1)]
    while stack:
        node, level = stack.pop()
        depth = max(depth, level)
        if isinstance(node, BinaryExpr):
            stack.append((node.left, level + 1))
            stack.append((node.right, level + 1))
        elif isinstance(node, UnaryExpr):
            stack.append((node.operand, level + 1))
        elif isinstance(node, FuncCall):
            stack.extend((arg, level + 1) for arg in node.args)
    return depth
