"""Interactive REPL for Lox, powered by prompt_toolkit."""

from __future__ import annotations

import re
import sys
from typing import Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.shortcuts import clear
from typing_extensions import Protocol

from .config import (
    DEBUG_PY_TRACE_ENV,
    SHOW_TOKENS_ENV,
    debug_py_trace_enabled,
    parse_switch,
    set_flag,
    show_tokens_enabled,
)
from .diagnostics import LoxError
from .printer import render
from .repl_highlight import LoxLexer
from .runner import report_trace, run

PROMPT = "lox >>> "
EXIT_WORDS = ("exit", "quit")

# Zero-width and invisible characters to strip from input.
_INVISIBLE_RE = re.compile("[\u200b\u200c\u200d\ufeff\r]")

# Slash commands: name => (description, argument_hint).
_SLASH_CMDS = {
    "/clear": ("Clear the terminal screen", ""),
    "/py-traceback": ("Toggle Python traceback on errors", "[on|off]"),
    "/tokens": ("Toggle printing of the token table", "[on|off]"),
}

# Slash commands that flip an environment switch.
_SWITCHES = {
    "/py-traceback": (DEBUG_PY_TRACE_ENV, debug_py_trace_enabled, "Python traceback"),
    "/tokens": (SHOW_TOKENS_ENV, show_tokens_enabled, "Token table"),
}


class _Prompter(Protocol):
    def prompt(self, message: str) -> str: ...


class _SlashCompleter(Completer):
    """Autocomplete slash commands on the prompt."""

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor
        if not text.startswith("/"):
            return

        for cmd, (desc, hint) in _SLASH_CMDS.items():
            if cmd.startswith(text):
                yield Completion(
                    cmd,
                    start_position=-len(text),
                    display_meta=desc,
                )


def _handle_slash(line: str) -> bool:
    """Handle slash commands. Returns True if the line was a command."""
    stripped = line.strip()
    if not stripped.startswith("/"):
        return False

    parts = stripped.split(None, 1)
    cmd = parts[0]
    arg = parts[1] if len(parts) > 1 else ""

    if cmd == "/clear":
        clear()
        return True

    if cmd in _SWITCHES:
        env_name, enabled, label = _SWITCHES[cmd]
        state = parse_switch(arg, enabled())
        if state is None:
            print(f"Usage: {cmd} {_SLASH_CMDS[cmd][1]}", file=sys.stderr)
            return True

        set_flag(env_name, state)
        print(f"{label}: {'on' if state else 'off'}")
        return True

    print(f"Unknown command: {cmd}", file=sys.stderr)
    return True


def _normalize(text: str) -> str:
    """Strip invisible characters; a no-break space still separates tokens."""
    return _INVISIBLE_RE.sub("", text).replace("\u00a0", " ")


def make_session() -> PromptSession[str]:
    return PromptSession(
        history=InMemoryHistory(),
        lexer=LoxLexer(),
        completer=_SlashCompleter(),
        complete_while_typing=True,
    )


def repl(
    use_lark: bool = False,
    grammar_path: Optional[str] = None,
    show_tokens: Optional[bool] = None,
    session: Optional[_Prompter] = None,
) -> None:
    """Interactive read-parse-print loop; ``exit``, ``quit`` or Ctrl-D leaves."""
    if session is None:
        session = make_session()
    if show_tokens is not None:
        set_flag(SHOW_TOKENS_ENV, show_tokens)

    print("lox repl - exit, quit or Ctrl-D to leave, / for commands")

    while True:
        try:
            text = session.prompt(PROMPT)
        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            print("KeyboardInterrupt")
            continue

        text = _normalize(text)
        if text.strip() in EXIT_WORDS:
            break
        if not text.strip():
            continue

        if _handle_slash(text):
            continue

        try:
            expr = run(text, use_lark=use_lark, grammar_path=grammar_path)
        except LoxError as exc:
            # the scanner/parser already wrote the diagnostic
            report_trace(exc)
            continue

        print(render(expr))
