from __future__ import annotations

import sys
import traceback
from pathlib import Path
from typing import List, Optional, TextIO

from .config import debug_py_trace_enabled, show_tokens_enabled
from .diagnostics import LexError, LoxError, ParseError
from .lexer_rd import Lexer, TokenTable
from .parse_lark import parse_lark
from .parser_rd import Parser
from .printer import render
from .tree import Expr

SOURCE_SUFFIX = ".lox"


def print_tokens(table: TokenTable, out: Optional[TextIO] = None) -> None:
    stream = out if out is not None else sys.stdout
    for tok, line, column in zip(table.tokens, table.lines, table.columns):
        print(f"{line}:{column}\t{tok}", file=stream)


def report_trace(exc: BaseException, err: Optional[TextIO] = None) -> None:
    """Print the Python traceback of a reported error when debugging is on."""
    if not debug_py_trace_enabled() or exc.__traceback__ is None:
        return

    stream = err if err is not None else sys.stderr
    print("\nPython traceback:", file=stream)
    print("".join(traceback.format_tb(exc.__traceback__)), file=stream, end="")


def run(
    src: str,
    use_lark: bool = False,
    grammar_path: Optional[str] = None,
    show_tokens: Optional[bool] = None,
    out: Optional[TextIO] = None,
    err: Optional[TextIO] = None,
) -> Expr:
    """
    Scan and parse one source text.

    Lexical errors are written as a batch and the first one is raised; a
    syntax error is written by the parser and raised.
    """
    lexer = Lexer(src)
    table = lexer.tokenize()

    if show_tokens is None:
        show_tokens = show_tokens_enabled()
    if show_tokens:
        print_tokens(table, out)

    if lexer.reporter.has_errors():
        lexer.reporter.report(err)
        raise table.errors[0]

    if use_lark:
        return parse_lark(src, grammar_path, stream=err)

    return Parser(table, stream=err).parse()


def run_file(path: str | Path, **kwargs) -> Expr:
    """Run a ``.lox`` file; any other extension is refused before reading."""
    p = Path(path)
    if p.suffix != SOURCE_SUFFIX:
        raise LoxError(f"only {SOURCE_SUFFIX} files may be run")

    try:
        src = p.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise LoxError(f"cannot decode {p}: {exc.reason} at byte {exc.start}") from exc

    return run(src, **kwargs)


def main(argv: Optional[List[str]] = None) -> int:
    use_lark = False
    show_tokens: Optional[bool] = None
    grammar_path = None
    arg = None
    it = iter(sys.argv[1:] if argv is None else argv)

    for token in it:
        if token == "--lark":
            use_lark = True
            continue

        if token == "--tokens":
            show_tokens = True
            continue

        if token.startswith("--grammar="):
            grammar_path = token.split("=", 1)[1]
            continue

        if token == "--grammar":
            try:
                grammar_path = next(it)
            except StopIteration:
                raise SystemExit("--grammar flag requires a path") from None
            continue

        if token.startswith("--"):
            raise SystemExit(f"Unknown option: {token}")

        if arg is None:
            arg = token
        else:
            raise SystemExit(f"Unexpected argument: {token}")

    if arg is None:
        from .repl import repl

        repl(use_lark=use_lark, grammar_path=grammar_path, show_tokens=show_tokens)
        return 0

    try:
        expr = run_file(
            arg, use_lark=use_lark, grammar_path=grammar_path, show_tokens=show_tokens
        )
    except (LexError, ParseError) as exc:
        # already written by the scanner/parser
        report_trace(exc)
        return 1
    except (LoxError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        report_trace(exc)
        return 1

    print(render(expr))
    return 0


if __name__ == "__main__":
    sys.exit(main())
