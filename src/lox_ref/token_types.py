"""
Token Types for the Lox front end

Shared between lexer, parser and tree to avoid circular dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional, Union

from typing_extensions import TypeAlias


class TT(Enum):
    """Token Types - mirrors grammar terminals"""

    # Single-character tokens
    LEFT_PAREN = auto()
    RIGHT_PAREN = auto()
    LEFT_BRACE = auto()
    RIGHT_BRACE = auto()
    COMMA = auto()
    DOT = auto()
    MINUS = auto()
    PLUS = auto()
    SEMICOLON = auto()
    SLASH = auto()
    STAR = auto()

    # One or two character tokens
    BANG = auto()
    BANG_EQUAL = auto()
    EQUAL = auto()
    EQUAL_EQUAL = auto()
    GREATER = auto()
    GREATER_EQUAL = auto()
    LESS = auto()
    LESS_EQUAL = auto()

    # Literals
    IDENTIFIER = auto()
    STRING = auto()
    NUMBER = auto()

    # Keywords
    AND = auto()
    CLASS = auto()
    ELSE = auto()
    FALSE = auto()
    FUN = auto()
    FOR = auto()
    IF = auto()
    NIL = auto()
    OR = auto()
    PRINT = auto()
    RETURN = auto()
    SUPER = auto()
    THIS = auto()
    TRUE = auto()
    VAR = auto()
    WHILE = auto()

    # Special
    EOF = auto()

    @classmethod
    def from_str(cls, text: str) -> Optional[TT]:
        """Map a fixed lexeme (symbol or keyword) to its tag."""
        return SYMBOLS.get(text) or KEYWORDS.get(text)

    def is_keyword(self) -> bool:
        return self in _KEYWORD_TAGS

    def is_equality(self) -> bool:
        return self in (TT.EQUAL_EQUAL, TT.BANG_EQUAL)

    def is_comp(self) -> bool:
        return self in (TT.GREATER, TT.GREATER_EQUAL, TT.LESS, TT.LESS_EQUAL)

    def is_term(self) -> bool:
        return self in (TT.MINUS, TT.PLUS)

    def is_factor(self) -> bool:
        return self in (TT.SLASH, TT.STAR)

    def is_unary(self) -> bool:
        return self in (TT.BANG, TT.MINUS)

    def display(self) -> str:
        """CamelCase name, e.g. ``BangEqual``."""
        return "".join(part.capitalize() for part in self.name.split("_"))


KEYWORDS = {
    "and": TT.AND,
    "class": TT.CLASS,
    "else": TT.ELSE,
    "false": TT.FALSE,
    "fun": TT.FUN,
    "for": TT.FOR,
    "if": TT.IF,
    "nil": TT.NIL,
    "or": TT.OR,
    "print": TT.PRINT,
    "return": TT.RETURN,
    "super": TT.SUPER,
    "this": TT.THIS,
    "true": TT.TRUE,
    "var": TT.VAR,
    "while": TT.WHILE,
}

SYMBOLS = {
    "(": TT.LEFT_PAREN,
    ")": TT.RIGHT_PAREN,
    "{": TT.LEFT_BRACE,
    "}": TT.RIGHT_BRACE,
    ",": TT.COMMA,
    ".": TT.DOT,
    "-": TT.MINUS,
    "+": TT.PLUS,
    ";": TT.SEMICOLON,
    "/": TT.SLASH,
    "*": TT.STAR,
    "!": TT.BANG,
    "!=": TT.BANG_EQUAL,
    "=": TT.EQUAL,
    "==": TT.EQUAL_EQUAL,
    ">": TT.GREATER,
    ">=": TT.GREATER_EQUAL,
    "<": TT.LESS,
    "<=": TT.LESS_EQUAL,
}

_KEYWORD_TAGS = frozenset(KEYWORDS.values())


# ---------- Literal values ----------

def format_number(value: float) -> str:
    """Shortest numeric text: ``123`` for integral floats, ``45.67`` otherwise."""
    if value.is_integer():
        return str(int(value))
    return repr(value)


@dataclass(frozen=True)
class Num:
    value: float

    def __str__(self) -> str:
        return format_number(self.value)


@dataclass(frozen=True)
class Str:
    value: str

    def __str__(self) -> str:
        return f'"{self.value}"'


class _NoValue:
    """Literal slot of tokens without literal content."""

    __slots__ = ()
    _instance: Optional[_NoValue] = None

    def __new__(cls) -> _NoValue:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NONE"

    def __str__(self) -> str:
        return "nil"


NONE = _NoValue()

Value: TypeAlias = Union[Num, Str, _NoValue]


@dataclass(frozen=True)
class Tok:
    """Token with position info; position is excluded from equality."""

    type: TT
    lexeme: str
    literal: Value = NONE
    line: int = field(default=1, compare=False)
    column: int = field(default=0, compare=False)

    def __repr__(self) -> str:
        return f"Tok({self.type.name}, {self.lexeme!r}, {self.line}:{self.column})"

    def __str__(self) -> str:
        return f"Token: {self.lexeme} Type: {self.type.display()}"
