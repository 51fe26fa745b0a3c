"""
exprcalc expression language.

Tokenizer, parser, evaluator, and name checker for arithmetic expressions.

Usage:
    from exprcalc.core.expression_lang import evaluate, parse_expr

    evaluate("2 + 3 * 4")
    # 14.0
    expr = parse_expr("sqrt(x) ^ 2")
    evaluate_tree(expr, variables={"x": 9})
    # 9.0
"""

from exprcalc.core.expression_lang.checker import check_names, referenced_names
from exprcalc.core.expression_lang.evaluator import evaluate, evaluate_tree
from exprcalc.core.expression_lang.parser import parse, parse_expr
from exprcalc.core.expression_lang.registry import REGISTRY, FunctionEntry, Registry
from exprcalc.core.expression_lang.tokenizer import Token, TokenKind, tokenize

__all__ = [
    "REGISTRY",
    "FunctionEntry",
    "Registry",
    "Token",
    "TokenKind",
    "check_names",
    "evaluate",
    "evaluate_tree",
    "parse",
    "parse_expr",
    "referenced_names",
    "tokenize",
]
