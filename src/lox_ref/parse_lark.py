"""Lark-driven reference parser for the Lox expression grammar.

Builds the same ``Expr`` nodes as ``parser_rd`` so the two front ends can be
compared tree for tree.
"""
from __future__ import annotations

import sys
from functools import lru_cache
from pathlib import Path
from typing import List, Optional, TextIO

from lark import Lark, Token, UnexpectedInput
from lark.exceptions import UnexpectedCharacters, UnexpectedEOF, UnexpectedToken
from lark.visitors import Transformer_NonRecursive

from .diagnostics import ParseError
from .token_types import Num, Str
from .tree import (
    Binary,
    Expr,
    Grouping,
    LitFalse,
    LitNil,
    LitNum,
    LitStr,
    LitTrue,
    Literal,
    MAX_HEIGHT,
    Ops,
    Sign,
    Unary,
)

GRAMMAR_PATH = Path(__file__).resolve().with_name("grammar.lark")


def read_grammar(grammar_path: Optional[str] = None) -> str:
    if grammar_path:
        p = Path(grammar_path)
        if p.exists():
            return p.read_text(encoding="utf-8")
        print(f"Warning: grammar {p} not found, using the bundled one", file=sys.stderr)

    # fallback: the grammar shipped next to this module
    if GRAMMAR_PATH.exists():
        return GRAMMAR_PATH.read_text(encoding="utf-8")

    raise FileNotFoundError("grammar.lark not found. pass an explicit path")


@lru_cache(maxsize=8)
def _build(grammar: str) -> Lark:
    return Lark(grammar, parser="lalr", start="start")


def make_parser(grammar_path: Optional[str] = None) -> Lark:
    return _build(read_grammar(grammar_path))


class LarkToExpr(Transformer_NonRecursive):
    """Turn the Lark parse tree into frozen ``Expr`` nodes."""

    def number(self, c: List[Token]) -> Expr:
        return Literal(LitNum(Num(float(c[0]))))

    def string(self, c: List[Token]) -> Expr:
        return Literal(LitStr(Str(str(c[0])[1:-1])))

    def true(self, _: list) -> Expr:
        return Literal(LitTrue())

    def false(self, _: list) -> Expr:
        return Literal(LitFalse())

    def nil(self, _: list) -> Expr:
        return Literal(LitNil())

    def grouping(self, c: List[Expr]) -> Expr:
        return Grouping(c[0])

    def unary(self, c: list) -> Expr:
        sign, operand = c
        return Unary(Sign(str(sign)), operand)

    def binary(self, c: list) -> Expr:
        left, op, right = c
        return Binary(left, Ops(str(op)), right)


def _describe(exc: UnexpectedInput) -> str:
    match exc:
        case UnexpectedCharacters():
            return f"unexpected character {exc.char!r}"
        case UnexpectedEOF():
            return "unexpected end of input"
        case UnexpectedToken() if exc.token.type == "$END":
            return "unexpected end of input"
        case UnexpectedToken():
            return f"unexpected token {str(exc.token)!r}"
    return "unexpected input"


def parse_lark(
    source: str, grammar_path: Optional[str] = None, stream: Optional[TextIO] = None
) -> Expr:
    """Parse with the Lark grammar; syntax errors are written to stderr and raised."""
    parser = make_parser(grammar_path)

    try:
        tree = parser.parse(source)
    except UnexpectedInput as exc:
        line = getattr(exc, "line", None)
        column = getattr(exc, "column", None)
        if not isinstance(line, int) or line < 1:
            line, column = None, None
        elif isinstance(column, int):
            column -= 1  # Lark columns are 1-based

        err = ParseError(_describe(exc), line, column)
        print(err, file=stream if stream is not None else sys.stderr)
        raise err from exc

    result = LarkToExpr().transform(tree)
    # A bare terminal can only come back if the grammar was overridden badly.
    if isinstance(result, Token):
        raise ParseError(f"grammar produced a bare token: {result!r}")
    if result.height > MAX_HEIGHT:
        err = ParseError("expression nested too deeply")
        print(err, file=stream if stream is not None else sys.stderr)
        raise err
    return result
