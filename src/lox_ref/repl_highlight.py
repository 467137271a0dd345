"""prompt_toolkit lexer for live Lox syntax highlighting in the REPL."""

from __future__ import annotations

from typing import Callable

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer

from .lexer_rd import tokenize
from .token_types import KEYWORDS, TT

# Map highlight groups to prompt_toolkit style strings.
GROUP_STYLE = {
    "keyword": "bold ansicyan",
    "boolean": "ansicyan",
    "constant": "ansicyan",
    "number": "ansimagenta",
    "string": "ansigreen",
    "identifier": "",
    "operator": "",
    "punctuation": "",
    "comment": "italic ansigray",
    "error": "bold ansired",
}

# Token type to highlight group.
_TT_GROUP = {tag: "keyword" for tag in KEYWORDS.values()}
_TT_GROUP.update({
    TT.TRUE: "boolean",
    TT.FALSE: "boolean",
    TT.NIL: "constant",
    TT.NUMBER: "number",
    TT.STRING: "string",
    TT.IDENTIFIER: "identifier",
    TT.PLUS: "operator",
    TT.MINUS: "operator",
    TT.STAR: "operator",
    TT.SLASH: "operator",
    TT.BANG: "operator",
    TT.BANG_EQUAL: "operator",
    TT.EQUAL: "operator",
    TT.EQUAL_EQUAL: "operator",
    TT.GREATER: "operator",
    TT.GREATER_EQUAL: "operator",
    TT.LESS: "operator",
    TT.LESS_EQUAL: "operator",
    TT.LEFT_PAREN: "punctuation",
    TT.RIGHT_PAREN: "punctuation",
    TT.LEFT_BRACE: "punctuation",
    TT.RIGHT_BRACE: "punctuation",
    TT.COMMA: "punctuation",
    TT.DOT: "punctuation",
    TT.SEMICOLON: "punctuation",
})


def _gap(text: str) -> StyleAndTextTuples:
    """Unstyled text between tokens; a trailing ``//`` comment gets its style."""
    idx = text.find("//")
    if idx < 0:
        return [("", text)]

    spans: StyleAndTextTuples = []
    if idx > 0:
        spans.append(("", text[:idx]))
    spans.append((GROUP_STYLE["comment"], text[idx:]))
    return spans


def highlight_line(text: str) -> StyleAndTextTuples:
    """Tokenize a single line and return styled fragments."""
    if not text:
        return [("", "")]

    table = tokenize(text)

    # (start, end, style) spans; the lexer reports exact columns
    spans = []
    for tok in table:
        if tok.type == TT.EOF or not tok.lexeme:
            continue
        style = GROUP_STYLE.get(_TT_GROUP.get(tok.type, ""), "")
        spans.append((tok.column, tok.column + len(tok.lexeme), style))

    for err in table.errors:
        column = err.column if err.column is not None else 0
        # An unterminated string runs to the end of the line.
        end = len(text) if "unterminated" in err.message else column + 1
        spans.append((column, end, GROUP_STYLE["error"]))

    spans.sort()

    result: StyleAndTextTuples = []
    pos = 0
    for start, end, style in spans:
        if start < pos:
            continue
        if start > pos:
            result.extend(_gap(text[pos:start]))
        result.append((style, text[start:end]))
        pos = end

    # Trailing unstyled text (whitespace or a comment).
    if pos < len(text):
        result.extend(_gap(text[pos:]))

    return result if result else [("", text)]


class LoxLexer(Lexer):
    """prompt_toolkit Lexer that highlights Lox source using the RD lexer."""

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        lines = document.lines

        cache: dict[int, StyleAndTextTuples] = {}

        def get_line(lineno: int) -> StyleAndTextTuples:
            if lineno not in cache:
                if lineno < len(lines):
                    cache[lineno] = highlight_line(lines[lineno])
                else:
                    cache[lineno] = [("", "")]

            return cache[lineno]

        return get_line
