"""
Tokenizer for exprcalc expressions.

Converts an expression string into a lazy sequence of typed tokens.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from enum import StrEnum, auto

from exprcalc.core.errors import LexError


class TokenKind(StrEnum):
    """Token types for the expression language."""

    # Literals and names
    NUMBER = auto()
    IDENT = auto()

    # Operators
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()
    PERCENT = auto()
    CARET = auto()

    # Punctuation
    LPAREN = auto()
    RPAREN = auto()
    COMMA = auto()

    # End of input
    EOF = auto()


class Token:
    """A single token from the expression tokenizer."""

    __slots__ = ("kind", "value", "pos")

    def __init__(self, kind: TokenKind, value: str, pos: int) -> None:
        self.kind = kind
        self.value = value
        self.pos = pos

    def __repr__(self) -> str:
        return f"Token({self.kind}, {self.value!r}, pos={self.pos})"

    def __setattr__(self, name: str, value: object) -> None:
        if hasattr(self, name):
            raise AttributeError(f"Token.{name} is read-only")
        object.__setattr__(self, name, value)

    def describe(self) -> str:
        """Short description used in parse errors."""
        if self.kind == TokenKind.EOF:
            return "end of input"
        if self.kind == TokenKind.NUMBER:
            return f"number {self.value!r}"
        if self.kind == TokenKind.IDENT:
            return f"identifier {self.value!r}"
        return repr(self.value)


# Digits with an optional fraction, or a bare fraction, then an optional exponent.
# The exponent is only consumed when digits follow it, so "2e" lexes as 2, e.
_NUMBER_RE = re.compile(r"(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)
_DIGITS = frozenset("0123456789")
# Identifier: a letter followed by letters, digits or underscores
_IDENT_RE = re.compile(r"[a-zA-Z][a-zA-Z0-9_]*")

_SINGLE_MAP: dict[str, TokenKind] = {
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.STAR,
    "/": TokenKind.SLASH,
    "%": TokenKind.PERCENT,
    "^": TokenKind.CARET,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    ",": TokenKind.COMMA,
}


def tokenize(source: str) -> Iterator[Token]:
    """Yield the tokens of ``source``, ending with a single EOF token.

    Raises:
        LexError: On an unrecognized character or a malformed number. Tokens
            before the offending character have already been yielded.
    """
    i = 0
    n = len(source)

    while i < n:
        c = source[i]

        # Skip whitespace
        if c.isspace():
            i += 1
            continue

        # Numbers
        if c in _DIGITS or (c == "." and i + 1 < n and source[i + 1] in _DIGITS):
            m = _NUMBER_RE.match(source, i)
            assert m is not None
            end = m.end()
            # A second decimal point, or one after the exponent
            if end < n and source[end] == ".":
                raise LexError(end, ".")
            yield Token(TokenKind.NUMBER, m.group(0), i)
            i = end
            continue

        # Identifiers
        if c.isascii() and c.isalpha():
            m = _IDENT_RE.match(source, i)
            assert m is not None
            yield Token(TokenKind.IDENT, m.group(0), i)
            i = m.end()
            continue

        kind = _SINGLE_MAP.get(c)
        if kind is not None:
            yield Token(kind, c, i)
            i += 1
            continue

        raise LexError(i, c)

    yield Token(TokenKind.EOF, "", n)
