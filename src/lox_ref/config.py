"""Environment-driven switches shared by the runner and the REPL."""

from __future__ import annotations

import os

DEBUG_PY_TRACE_ENV = "LOX_DEBUG_PY_TRACE"
SHOW_TOKENS_ENV = "LOX_SHOW_TOKENS"

_TRUTHY = ("1", "on", "true", "yes")
_FALSY = ("0", "off", "false", "no")


def _flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in _TRUTHY


def set_flag(name: str, enabled: bool) -> None:
    if enabled:
        os.environ[name] = "1"
    else:
        os.environ.pop(name, None)


def parse_switch(arg: str, current: bool) -> bool | None:
    """Resolve an ``on``/``off`` argument; empty toggles. ``None`` if invalid."""
    arg = arg.strip().lower()
    if arg == "":
        return not current
    if arg in _TRUTHY:
        return True
    if arg in _FALSY:
        return False
    return None


def debug_py_trace_enabled() -> bool:
    return _flag(DEBUG_PY_TRACE_ENV)


def show_tokens_enabled() -> bool:
    return _flag(SHOW_TOKENS_ENV)
