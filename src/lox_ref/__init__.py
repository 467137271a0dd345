"""Lox expression front end: scanner, recursive-descent parser, debug printer."""

__version__ = "0.1.0"

from .diagnostics import InternalError, LexError, LoxError, ParseError
from .lexer_rd import Lexer, TokenTable, tokenize
from .parser_rd import Parser, parse_source
from .printer import render

__all__ = [
    "InternalError",
    "LexError",
    "Lexer",
    "LoxError",
    "ParseError",
    "Parser",
    "TokenTable",
    "parse_source",
    "render",
    "tokenize",
    "__version__",
]
