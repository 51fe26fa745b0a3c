"""
Recursive descent parser for exprcalc expressions.

Grammar (precedence low to high):
    expr           → additive
    additive       → multiplicative (("+"|"-") multiplicative)*
    multiplicative → unary (("*"|"/"|"%") unary)*
    unary          → ("-"|"+") unary | power
    power          → primary ("^" unary)?
    primary        → NUMBER | func_call | IDENT | "(" expr ")"
    func_call      → IDENT "(" expr ("," expr)* ")"

``^`` is right-associative and binds tighter than a leading sign, so
``-2^2`` is ``-(2^2)`` while ``2^-1`` is still accepted.

The parser is purely syntactic; names are resolved by the evaluator.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from exprcalc.core.config import DEFAULT_LIMITS, ExpressionLimits
from exprcalc.core.errors import ParseError, ParseErrorKind, too_complex
from exprcalc.core.expression_lang.tokenizer import Token, TokenKind, tokenize
from exprcalc.core.ir.expressions import (
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

_ADDITIVE_OPS: dict[TokenKind, BinaryOp] = {
    TokenKind.PLUS: BinaryOp.ADD,
    TokenKind.MINUS: BinaryOp.SUB,
}

_MULTIPLICATIVE_OPS: dict[TokenKind, BinaryOp] = {
    TokenKind.STAR: BinaryOp.MUL,
    TokenKind.SLASH: BinaryOp.DIV,
    TokenKind.PERCENT: BinaryOp.MOD,
}

_UNARY_OPS: dict[TokenKind, UnaryOp] = {
    TokenKind.MINUS: UnaryOp.NEG,
    TokenKind.PLUS: UnaryOp.POS,
}


class _Parser:
    """Recursive descent parser over a lazy token stream."""

    def __init__(self, tokens: Iterable[Token], limits: ExpressionLimits) -> None:
        self._tokens: Iterator[Token] = iter(tokens)
        self.limits = limits
        self.depth = 0
        self.open_groups = 0
        self.current = next(self._tokens)

    def advance(self) -> Token:
        tok = self.current
        if tok.kind != TokenKind.EOF:
            self.current = next(self._tokens)
        return tok

    def match(self, *kinds: TokenKind) -> Token | None:
        if self.current.kind in kinds:
            return self.advance()
        return None

    def expect_close(self, expected: str) -> Token:
        """Consume a ')' or report what was wrong with the group."""
        tok = self.current
        if tok.kind == TokenKind.RPAREN:
            return self.advance()
        kind = (
            ParseErrorKind.UNCLOSED_PAREN
            if tok.kind == TokenKind.EOF
            else ParseErrorKind.UNEXPECTED_TOKEN
        )
        raise ParseError(tok.pos, expected, tok.describe(), kind)

    # -- Grammar rules --

    def parse_expr(self) -> Expr:
        """Top-level: additive."""
        return self.parse_additive()

    def parse_additive(self) -> Expr:
        """multiplicative (('+' | '-') multiplicative)*"""
        left = self.parse_multiplicative()
        while self.current.kind in _ADDITIVE_OPS:
            op = _ADDITIVE_OPS[self.advance().kind]
            right = self.parse_multiplicative()
            left = BinaryExpr(op=op, left=left, right=right)
        return left

    def parse_multiplicative(self) -> Expr:
        """unary (('*' | '/' | '%') unary)*"""
        left = self.parse_unary()
        while self.current.kind in _MULTIPLICATIVE_OPS:
            op = _MULTIPLICATIVE_OPS[self.advance().kind]
            right = self.parse_unary()
            left = BinaryExpr(op=op, left=left, right=right)
        return left

    def parse_unary(self) -> Expr:
        """('-' | '+') unary | power"""
        self.depth += 1
        if self.depth > self.limits.max_nesting:
            raise too_complex("max_nesting", self.current.pos)
        try:
            if self.current.kind in _UNARY_OPS:
                op = _UNARY_OPS[self.advance().kind]
                operand = self.parse_unary()
                return UnaryExpr(op=op, operand=operand)
            return self.parse_power()
        finally:
            self.depth -= 1

    def parse_power(self) -> Expr:
        """primary ('^' unary)?"""
        base = self.parse_primary()
        if self.match(TokenKind.CARET):
            exponent = self.parse_unary()
            return BinaryExpr(op=BinaryOp.POW, left=base, right=exponent)
        return base

    def parse_primary(self) -> Expr:
        """NUMBER | func_call | IDENT | '(' expr ')'"""
        tok = self.current

        # Parenthesized expression
        if tok.kind == TokenKind.LPAREN:
            self.advance()
            self.open_groups += 1
            expr = self.parse_expr()
            self.expect_close("')' or operator")
            self.open_groups -= 1
            return expr

        if tok.kind == TokenKind.NUMBER:
            self.advance()
            return Literal(value=float(tok.value))

        # Identifier: function call or bare name
        if tok.kind == TokenKind.IDENT:
            self.advance()
            if self.current.kind == TokenKind.LPAREN:
                return self._parse_call_args(tok)
            return Variable(name=tok.value)

        if tok.kind == TokenKind.RPAREN and not self.open_groups:
            raise ParseError(tok.pos, "expression", "')'", ParseErrorKind.UNMATCHED_PAREN)
        raise ParseError(tok.pos, "expression", tok.describe())

    def _parse_call_args(self, name_tok: Token) -> FuncCall:
        """'(' expr (',' expr)* ')'"""
        self.advance()  # (
        self.open_groups += 1
        if self.current.kind == TokenKind.RPAREN:
            raise ParseError(
                self.current.pos,
                f"argument for {name_tok.value}()",
                "')'",
                ParseErrorKind.EMPTY_ARGUMENTS,
            )

        args: list[Expr] = [self.parse_expr()]
        while self.match(TokenKind.COMMA):
            args.append(self.parse_expr())

        self.expect_close("',' or ')'")
        self.open_groups -= 1
        return FuncCall(name=name_tok.value, args=tuple(args))


def parse(tokens: Iterable[Token], limits: ExpressionLimits = DEFAULT_LIMITS) -> Expr:
    """Parse a token stream into an expression tree.

    Args:
        tokens: Tokens ending with EOF, typically from :func:`tokenize`.
        limits: Nesting bound for the recursive descent.

    Returns:
        Parsed expression tree.

    Raises:
        ParseError: If the tokens do not form exactly one expression.
        LexError: If a lazy tokenizer fails while being consumed.
        EvalError: TOO_COMPLEX when nesting exceeds ``limits.max_nesting`` or
            the tree is deeper than ``limits.max_depth``.
    """
    parser = _Parser(tokens, limits)

    if parser.current.kind == TokenKind.EOF:
        raise ParseError(
            parser.current.pos, "expression", "end of input", ParseErrorKind.EMPTY_INPUT
        )

    try:
        expr = parser.parse_expr()
    except RecursionError:
        # Only reachable when max_nesting is set above what the interpreter stack allows
        raise too_complex("max_nesting", parser.current.pos) from None

    # Ensure all tokens consumed
    tok = parser.current
    if tok.kind == TokenKind.RPAREN:
        raise ParseError(tok.pos, "operator", "')'", ParseErrorKind.UNMATCHED_PAREN)
    if tok.kind != TokenKind.EOF:
        raise ParseError(tok.pos, "operator", tok.describe(), ParseErrorKind.TRAILING_INPUT)

    # Long flat chains ("1+1+...") stay shallow while parsing but build deep trees
    if tree_depth(expr) > limits.max_depth:
        raise too_complex("max_depth")

    return expr


def parse_expr(source: str, limits: ExpressionLimits = DEFAULT_LIMITS) -> Expr:
    """Parse an expression string into an AST.

    Args:
        source: Expression string (e.g., "2 + 3 * sin(pi / 2)")
        limits: Length and nesting bounds.

    Returns:
        Parsed expression AST.

    Raises:
        LexError: If tokenization fails.
        ParseError: If the expression is invalid.
        EvalError: TOO_COMPLEX if the source exceeds the limits.
    """
    if len(source) > limits.max_length:
        raise too_complex("max_length", limits.max_length)
    return parse(tokenize(source), limits)
