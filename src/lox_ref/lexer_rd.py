"""
Lexer for Lox - Recursive Descent front end

Tokenizes Lox source code into a complete token table.

Features:
- Single-pass tokenization, at most two characters of lookahead
- Maximal munch for two-character operators
- Position tracking (line 1-based, column 0-based)
- Error-resilient: lexical errors are collected and scanning continues
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Tuple

from .diagnostics import ErrorReporter, LexError
from .token_types import KEYWORDS, NONE, TT, Num, Str, Tok, Value

# ============================================================================
# Token Table
# ============================================================================

@dataclass(frozen=True)
class TokenTable:
    """Fully scanned token sequence with parallel position arrays."""

    tokens: Tuple[Tok, ...]
    errors: Tuple[LexError, ...] = ()
    tags: Tuple[TT, ...] = field(init=False)
    lines: Tuple[int, ...] = field(init=False)
    columns: Tuple[int, ...] = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "tags", tuple(tok.type for tok in self.tokens))
        object.__setattr__(self, "lines", tuple(tok.line for tok in self.tokens))
        object.__setattr__(self, "columns", tuple(tok.column for tok in self.tokens))

    def __len__(self) -> int:
        return len(self.tokens)

    def __getitem__(self, idx: int) -> Tok:
        return self.tokens[idx]

    def __iter__(self) -> Iterator[Tok]:
        return iter(self.tokens)

    def has_errors(self) -> bool:
        return bool(self.errors)

    def is_well_formed(self) -> bool:
        """Last tag is EOF and no earlier tag is."""
        if not self.tags or self.tags[-1] != TT.EOF:
            return False
        return TT.EOF not in self.tags[:-1]

# ============================================================================
# Lexer Implementation
# ============================================================================

# One-character operators that may be extended by a trailing '='
TWO_CHAR_OPERATORS = {
    '!': (TT.BANG, TT.BANG_EQUAL),
    '=': (TT.EQUAL, TT.EQUAL_EQUAL),
    '<': (TT.LESS, TT.LESS_EQUAL),
    '>': (TT.GREATER, TT.GREATER_EQUAL),
}

SINGLE_CHAR_TOKENS = {
    '(': TT.LEFT_PAREN,
    ')': TT.RIGHT_PAREN,
    '{': TT.LEFT_BRACE,
    '}': TT.RIGHT_BRACE,
    ',': TT.COMMA,
    '.': TT.DOT,
    '-': TT.MINUS,
    '+': TT.PLUS,
    ';': TT.SEMICOLON,
    '*': TT.STAR,
}


def is_digit(ch: str) -> bool:
    return '0' <= ch <= '9'


def is_alpha(ch: str) -> bool:
    return ch == '_' or ('a' <= ch <= 'z') or ('A' <= ch <= 'Z')


class Lexer:
    """
    Lox lexer producing a full token table.

    Scanning never stops on a lexical error: the error is recorded with the
    position it refers to and the lexer moves on.
    """

    KEYWORDS = KEYWORDS

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 0
        self.tokens: List[Tok] = []
        self.reporter = ErrorReporter()

        # Start of the token being scanned
        self.start = 0
        self.start_line = 1
        self.start_column = 0

    # ========================================================================
    # Main Tokenization
    # ========================================================================

    def tokenize(self) -> TokenTable:
        """Tokenize entire source, return the token table"""
        while not self.at_end():
            self.mark_start()
            self.scan_token()

        self.mark_start()
        self.emit(TT.EOF, '')
        return TokenTable(tuple(self.tokens), tuple(self.reporter.errors))

    def scan_token(self) -> None:
        """Scan next token"""
        ch = self.advance()

        if ch in (' ', '\r', '\t', '\n'):
            return

        if ch in SINGLE_CHAR_TOKENS:
            self.emit(SINGLE_CHAR_TOKENS[ch], ch)
            return

        if ch in TWO_CHAR_OPERATORS:
            self.scan_operator(ch)
            return

        if ch == '/':
            if self.peek() == '/':
                self.skip_comment()
            else:
                self.emit(TT.SLASH, ch)
            return

        if ch == '"':
            self.scan_string()
            return

        if is_digit(ch):
            self.scan_number()
            return

        if is_alpha(ch):
            self.scan_identifier()
            return

        self.reporter.error(
            f"unexpected character {ch!r}", self.start_line, self.start_column
        )

    # ========================================================================
    # Token Scanners
    # ========================================================================

    def scan_operator(self, ch: str) -> None:
        """Maximal munch: ``!=``, ``==``, ``<=``, ``>=`` over their prefixes"""
        single, double = TWO_CHAR_OPERATORS[ch]
        if self.peek() == '=':
            self.advance()
            self.emit(double, ch + '=')
        else:
            self.emit(single, ch)

    def scan_string(self) -> None:
        """Scan string literal: "..." (verbatim, may span lines)"""
        while not self.at_end() and self.peek() != '"':
            self.advance()

        if self.at_end():
            self.reporter.error(
                "unterminated string", self.start_line, self.start_column
            )
            return

        self.advance()  # Closing quote
        text = self.current_lexeme()
        self.emit(TT.STRING, text, Str(text[1:-1]))

    def scan_number(self) -> None:
        """Scan number literal; '.' only taken when a digit follows"""
        while is_digit(self.peek()):
            self.advance()

        if self.peek() == '.' and is_digit(self.peek(1)):
            self.advance()  # .
            while is_digit(self.peek()):
                self.advance()

        text = self.current_lexeme()
        self.emit(TT.NUMBER, text, Num(float(text)))

    def scan_identifier(self) -> None:
        """Scan identifier or keyword"""
        while is_alpha(self.peek()):
            self.advance()

        text = self.current_lexeme()
        self.emit(self.KEYWORDS.get(text, TT.IDENTIFIER), text)

    def skip_comment(self) -> None:
        """Skip comment up to, not including, the newline"""
        while not self.at_end() and self.peek() != '\n':
            self.advance()

    # ========================================================================
    # Utilities
    # ========================================================================

    def at_end(self) -> bool:
        return self.pos >= len(self.source)

    def peek(self, offset: int = 0) -> str:
        """Look ahead at character"""
        idx = self.pos + offset
        if idx < len(self.source):
            return self.source[idx]
        return '\0'

    def advance(self) -> str:
        """Consume one character, keeping line/column in step"""
        ch = self.source[self.pos]
        self.pos += 1
        if ch == '\n':
            self.line += 1
            self.column = 0
        else:
            self.column += 1
        return ch

    def mark_start(self) -> None:
        self.start = self.pos
        self.start_line = self.line
        self.start_column = self.column

    def current_lexeme(self) -> str:
        return self.source[self.start:self.pos]

    def emit(self, token_type: TT, lexeme: str, literal: Value = NONE) -> None:
        """Emit a token positioned at its first character"""
        self.tokens.append(
            Tok(
                type=token_type,
                lexeme=lexeme,
                literal=literal,
                line=self.start_line,
                column=self.start_column,
            )
        )


def tokenize(source: str) -> TokenTable:
    """Convenience function to tokenize source"""
    return Lexer(source).tokenize()


def scan(source: str) -> Tuple[TokenTable, Tuple[LexError, ...]]:
    """Tokenize and hand back the table together with its lexical errors."""
    table = tokenize(source)
    return table, table.errors
