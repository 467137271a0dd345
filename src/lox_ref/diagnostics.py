"""Positioned error construction and aggregation for scanner and parser."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Iterator, List, Optional, TextIO

if TYPE_CHECKING:
    from .token_types import Tok


def err_msg(line: int, message: str, column: Optional[int] = None) -> str:
    """Render ``[line: L column: C] Error: <message>``; column is optional."""
    if column is None:
        return f"[line: {line}] Error: {message}"
    return f"[line: {line} column: {column}] Error: {message}"


class LoxError(Exception):
    """Base for errors caused by user input."""

    def __init__(
        self, message: str, line: Optional[int] = None, column: Optional[int] = None
    ):
        self.message = message
        self.line = line
        self.column = column
        super().__init__(self.render())

    def render(self) -> str:
        if self.line is None:
            return self.message
        return err_msg(self.line, self.message, self.column)


class LexError(LoxError):
    """Lexical analysis error"""


class ParseError(LoxError):
    """Syntax error with position info"""

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
        token: Optional[Tok] = None,
    ):
        self.token = token
        super().__init__(message, line, column)


class InternalError(Exception):
    """Grammar or implementation defect; never reported as a diagnostic."""


class ErrorReporter:
    """Collects the lexical errors of one scan pass."""

    def __init__(self) -> None:
        self.errors: List[LexError] = []

    def error(self, message: str, line: int, column: Optional[int] = None) -> LexError:
        err = LexError(message, line, column)
        self.errors.append(err)
        return err

    def has_errors(self) -> bool:
        return bool(self.errors)

    def __iter__(self) -> Iterator[LexError]:
        return iter(self.errors)

    def __len__(self) -> int:
        return len(self.errors)

    def report(self, stream: Optional[TextIO] = None) -> None:
        """Write every collected error, one per line."""
        out = stream if stream is not None else sys.stderr
        for err in self.errors:
            print(err, file=out)
