"""
Recursive Descent Parser for Lox expressions

This serves as:
1. The parser used by the runner and the REPL
2. The subject of differential tests against the Lark grammar (parse_lark)

Structure:
- Lexer: token table from source (lexer_rd)
- Parser: one function per precedence layer, lowest precedence first
- AST: frozen Expr nodes from tree.py
"""

from __future__ import annotations

import sys
from typing import Callable, Optional, Sequence, TextIO

from .diagnostics import InternalError, ParseError
from .lexer_rd import tokenize
from .token_types import TT, Num, Str, Tok
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

# Tokens that begin a new statement; synchronize() stops in front of them.
STATEMENT_STARTS = frozenset({
    TT.SEMICOLON,
    TT.CLASS,
    TT.FUN,
    TT.VAR,
    TT.FOR,
    TT.IF,
    TT.WHILE,
    TT.PRINT,
    TT.RETURN,
})

# Open groups plus pending unary signs allowed at any point.
MAX_NESTING = 48

# ============================================================================
# Parser
# ============================================================================

class Parser:
    """
    Recursive descent parser for Lox expressions.

    Expression precedence (lowest to highest):
    1. equality (==, !=)
    2. comparison (>, >=, <, <=)
    3. term (+, -)
    4. factor (*, /)
    5. unary (!, -), right associative
    6. primary (literals, parenthesized expressions)
    """

    def __init__(self, tokens: Sequence[Tok], stream: Optional[TextIO] = None):
        tags = [tok.type for tok in tokens]
        if not tags or tags[-1] != TT.EOF or TT.EOF in tags[:-1]:
            raise InternalError("token table must end with exactly one EOF")

        self.tokens = tokens
        self.pos = 0
        self.nesting = 0
        self.stream = stream

    # ========================================================================
    # Token Navigation
    # ========================================================================

    @property
    def current(self) -> Tok:
        return self.tokens[self.pos]

    def advance(self) -> Tok:
        """Consume current token and move to next"""
        if self.current.type == TT.EOF:
            raise InternalError("cursor advanced past the end of the token table")
        prev = self.current
        self.pos += 1
        return prev

    def check(self, *types: TT) -> bool:
        """Check if current token matches any of the given types"""
        return self.current.type in types

    def consume_next(self, token_type: TT, message: str) -> Tok:
        """Consume token of expected type or report and raise a syntax error"""
        if self.check(token_type):
            return self.advance()
        raise self.error(self.current, message)

    def error(self, token: Tok, message: str) -> ParseError:
        """Build a positioned syntax error and write it to stderr."""
        if token.type == TT.EOF:
            detail = f"{message} at end of input"
        else:
            detail = f"{message}, found {token.lexeme!r}"

        return self._report(ParseError(detail, token.line, token.column, token=token))

    def too_deep(self, token: Tok) -> ParseError:
        return self._report(
            ParseError(
                "expression nested too deeply", token.line, token.column, token=token
            )
        )

    def _report(self, err: ParseError) -> ParseError:
        print(err, file=self.stream if self.stream is not None else sys.stderr)
        return err

    def _enter(self, token: Tok) -> None:
        if self.nesting >= MAX_NESTING:
            raise self.too_deep(token)
        self.nesting += 1

    def _leave(self) -> None:
        self.nesting -= 1

    def _checked(self, node: Expr, token: Tok) -> Expr:
        """Reject a node whose subtree grew past ``MAX_HEIGHT``."""
        if node.height > MAX_HEIGHT:
            raise self.too_deep(token)
        return node

    def synchronize(self) -> None:
        """Skip past the failing token, then to the next statement boundary."""
        if not self.check(TT.EOF):
            self.advance()

        while not self.check(TT.EOF):
            if self.current.type in STATEMENT_STARTS:
                return
            self.advance()

    # ========================================================================
    # Top-Level Parsing
    # ========================================================================

    def parse(self) -> Expr:
        """Parse exactly one expression covering the whole table"""
        expr = self.expression()

        if not self.check(TT.EOF):
            raise self.error(self.current, "unexpected tokens after expression")

        return expr

    # ========================================================================
    # Expressions
    # ========================================================================

    def expression(self) -> Expr:
        return self.equality()

    def equality(self) -> Expr:
        """equality -> comparison ( ( "==" | "!=" ) comparison )*"""
        return self._left_fold(self.comparison, TT.is_equality)

    def comparison(self) -> Expr:
        """comparison -> term ( ( ">" | ">=" | "<" | "<=" ) term )*"""
        return self._left_fold(self.term, TT.is_comp)

    def term(self) -> Expr:
        """term -> factor ( ( "+" | "-" ) factor )*"""
        return self._left_fold(self.factor, TT.is_term)

    def factor(self) -> Expr:
        """factor -> unary ( ( "*" | "/" ) unary )*"""
        return self._left_fold(self.unary, TT.is_factor)

    def _left_fold(
        self, operand: Callable[[], Expr], is_op: Callable[[TT], bool]
    ) -> Expr:
        left = operand()

        while is_op(self.current.type):
            op = self.advance()
            right = operand()
            left = self._checked(Binary(left, Ops.from_tag(op.type), right), op)

        return left

    def unary(self) -> Expr:
        """unary -> ( "!" | "-" ) unary | primary"""
        if self.current.type.is_unary():
            sign = self.advance()
            self._enter(sign)
            operand = self.unary()  # Right associative
            self._leave()
            return self._checked(Unary(Sign.from_tag(sign.type), operand), sign)

        return self.primary()

    def primary(self) -> Expr:
        """primary -> NUMBER | STRING | "true" | "false" | "nil" | "(" expression ")" """
        tok = self.current

        if tok.type == TT.EOF:
            raise self.error(tok, "expected expression")

        self.advance()

        match tok.type:
            case TT.NIL:
                return Literal(LitNil())
            case TT.FALSE:
                return Literal(LitFalse())
            case TT.TRUE:
                return Literal(LitTrue())
            case TT.NUMBER:
                assert isinstance(tok.literal, Num)
                return Literal(LitNum(tok.literal))
            case TT.STRING:
                assert isinstance(tok.literal, Str)
                return Literal(LitStr(tok.literal))
            case TT.LEFT_PAREN:
                self._enter(tok)
                expr = self.expression()
                self.consume_next(TT.RIGHT_PAREN, 'expected ")" to close expression')
                self._leave()
                return self._checked(Grouping(expr), tok)
            case _:
                raise InternalError(
                    f"invalid primary sequence: {tok.type.name} at "
                    f"line {tok.line}, column {tok.column}"
                )


# ============================================================================
# Entry points
# ============================================================================

def parse_tokens(tokens: Sequence[Tok], stream: Optional[TextIO] = None) -> Expr:
    return Parser(tokens, stream=stream).parse()


def parse_source(source: str, stream: Optional[TextIO] = None) -> Expr:
    """
    Parse Lox source text to an expression tree.

    The first lexical error, if any, is raised as-is; all of them remain
    available on the token table returned by ``lexer_rd.tokenize``.
    """
    table = tokenize(source)
    if table.has_errors():
        raise table.errors[0]

    return Parser(table, stream=stream).parse()
