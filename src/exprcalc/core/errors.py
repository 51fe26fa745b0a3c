"""
Error types for exprcalc tokenizing, parsing, and evaluation.

Errors carry structured fields only. Turning them into user-facing text is
the job of the boundary layer (see ``exprcalc.calculator.format_error``).
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class ParseErrorKind(StrEnum):
    """Distinct ways an expression can be syntactically malformed."""

    EMPTY_INPUT = "empty_input"
    UNEXPECTED_TOKEN = "unexpected_token"
    UNCLOSED_PAREN = "unclosed_paren"
    UNMATCHED_PAREN = "unmatched_paren"
    TRAILING_INPUT = "trailing_input"
    EMPTY_ARGUMENTS = "empty_arguments"


class EvalErrorKind(StrEnum):
    """Failure kinds raised while resolving or bounding an expression."""

    UNKNOWN_IDENTIFIER = "unknown_identifier"
    ARITY_MISMATCH = "arity_mismatch"
    TOO_COMPLEX = "too_complex"


class ExprCalcError(Exception):
    """Base exception for all exprcalc errors."""

    #: Names of the structured attributes, in display order.
    fields: tuple[str, ...] = ()

    def __init__(self) -> None:
        super().__init__(self._describe())

    def _describe(self) -> str:
        parts = ", ".join(f"{name}={getattr(self, name)!r}" for name in self.fields)
        return f"{type(self).__name__}({parts})"

    def as_dict(self) -> dict[str, Any]:
        """Structured view of the error, suitable for JSON output."""
        data: dict[str, Any] = {"error": type(self).__name__}
        for name in self.fields:
            value = getattr(self, name)
            data[name] = str(value) if isinstance(value, StrEnum) else value
        return data


class LexError(ExprCalcError):
    """
    Raised when the tokenizer meets a character it cannot use.

    Examples:
    - Unknown symbols (``$``, ``#``, ``=``)
    - Malformed numbers (``1.2.3``, ``1e5.2``)
    """

    fields = ("position", "character")

    def __init__(self, position: int, character: str) -> None:
        self.position = position
        self.character = character
        super().__init__()


class ParseError(ExprCalcError):
    """
    Raised when the token stream does not form a valid expression.

    ``expected`` and ``found`` are short descriptions of the grammar item the
    parser wanted and the token it actually saw (``"end of input"`` at EOF).
    """

    fields = ("kind", "position", "expected", "found")

    def __init__(
        self,
        position: int,
        expected: str,
        found: str,
        kind: ParseErrorKind = ParseErrorKind.UNEXPECTED_TOKEN,
    ) -> None:
        self.position = position
        self.expected = expected
        self.found = found
        self.kind = kind
        super().__init__()


class EvalError(ExprCalcError):
    """
    Raised when a well-formed expression cannot be evaluated.

    Only the attributes relevant to ``kind`` are set:

    - UNKNOWN_IDENTIFIER: ``name``
    - ARITY_MISMATCH: ``name``, ``expected``, ``got``
    - TOO_COMPLEX: ``limit`` (which bound was hit) and, when raised while
      parsing, ``position``
    """

    fields = ("kind", "name", "expected", "got", "limit", "position")

    def __init__(
        self,
        kind: EvalErrorKind,
        name: str | None = None,
        expected: int | None = None,
        got: int | None = None,
        limit: str | None = None,
        position: int | None = None,
    ) -> None:
        self.kind = kind
        self.name = name
        self.expected = expected
        self.got = got
        self.limit = limit
        self.position = position
        super().__init__()

    def _describe(self) -> str:
        parts = ", ".join(
            f"{name}={getattr(self, name)!r}"
            for name in self.fields
            if getattr(self, name) is not None
        )
        return f"{type(self).__name__}({parts})"


class ConfigError(ExprCalcError):
    """Raised when an exprcalc.toml file holds an invalid setting."""

    fields = ("key", "reason")

    def __init__(self, key: str, reason: str) -> None:
        self.key = key
        self.reason = reason
        super().__init__()


def unknown_identifier(name: str) -> EvalError:
    """Helper to create an UNKNOWN_IDENTIFIER error."""
    return EvalError(EvalErrorKind.UNKNOWN_IDENTIFIER, name=name)


def arity_mismatch(name: str, expected: int, got: int) -> EvalError:
    """Helper to create an ARITY_MISMATCH error."""
    return EvalError(EvalErrorKind.ARITY_MISMATCH, name=name, expected=expected, got=got)


def too_complex(limit: str, position: int | None = None) -> EvalError:
    """
    Helper to create a TOO_COMPLEX error.

    Args:
        limit: Name of the exceeded bound (``max_length``, ``max_nesting``,
            ``max_depth``)
        position: Source offset where the bound was crossed, if known

    Returns:
        EvalError of kind TOO_COMPLEX
    """
    return EvalError(EvalErrorKind.TOO_COMPLEX, limit=limit, position=position)
