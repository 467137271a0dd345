from __future__ import annotations

import dataclasses

import pytest

from lox_ref.token_types import NONE, TT, Num, Str, Tok, format_number
from lox_ref.tree import (
    Binary,
    Grouping,
    LitNum,
    Literal,
    Ops,
    Sign,
    Unary,
    children,
    depth,
    is_expr,
    walk,
)
from tests.support.harness import (
    InternalError,
    binary,
    false,
    group,
    nil,
    num,
    parse_quiet,
    render,
    string,
    true,
    unary,
)

RENDER_CASES = [
    (
        "book-example",
        binary(unary("-", num(123)), "*", group(num(45.67))),
        "( * ( - 123 ) ( group 45.67 ) )",
    ),
    ("int-like-float", num(3.0), "3"),
    ("fraction", num(0.5), "0.5"),
    ("string-raw", string("hi there"), "hi there"),
    ("true", true(), "true"),
    ("false", false(), "false"),
    ("nil", nil(), "nil"),
    ("bang", unary("!", true()), "( ! true )"),
    ("nested-group", group(group(nil())), "( group ( group nil ) )"),
    (
        "mixed",
        binary(binary(num(1), "<=", num(2)), "!=", unary("!", false())),
        "( != ( <= 1 2 ) ( ! false ) )",
    ),
]


@pytest.mark.parametrize(
    "expr,expected",
    [(expr, expected) for _, expr, expected in RENDER_CASES],
    ids=[name for name, _, _ in RENDER_CASES],
)
def test_render(expr, expected: str) -> None:
    assert render(expr) == expected


def test_render_rejects_non_expression() -> None:
    with pytest.raises(InternalError):
        render("1 + 2")  # type: ignore[arg-type]


@pytest.mark.parametrize(
    "value,expected",
    [(1.0, "1"), (123.0, "123"), (45.67, "45.67"), (0.1, "0.1"), (1e21, "1000000000000000000000")],
    ids=["one", "int", "fraction", "tenth", "large"],
)
def test_format_number(value: float, expected: str) -> None:
    assert format_number(value) == expected


def test_literal_values_print() -> None:
    assert str(Num(2.5)) == "2.5"
    assert str(Str("x")) == '"x"'
    assert str(NONE) == "nil"
    assert repr(NONE) == "NONE"


def test_token_text() -> None:
    tok = Tok(TT.BANG_EQUAL, "!=", line=3, column=4)
    assert str(tok) == "Token: != Type: BangEqual"
    assert repr(tok) == "Tok(BANG_EQUAL, '!=', 3:4)"


@pytest.mark.parametrize(
    "text,tag",
    [("(", TT.LEFT_PAREN), ("<=", TT.LESS_EQUAL), ("while", TT.WHILE), ("nope", None)],
    ids=["paren", "less-equal", "keyword", "unknown"],
)
def test_tag_from_text(text: str, tag) -> None:
    assert TT.from_str(text) is tag


def test_operator_text_matches_token() -> None:
    for op in Ops:
        assert TT.from_str(op.value) is not None
        assert Ops.from_tag(TT.from_str(op.value)) is op
    for sign in Sign:
        assert Sign.from_tag(TT.from_str(sign.value)) is sign


def test_nodes_are_frozen() -> None:
    expr = binary(num(1), "+", num(2))
    with pytest.raises(dataclasses.FrozenInstanceError):
        expr.op = Ops.MINUS  # type: ignore[misc]


def test_nodes_compare_structurally() -> None:
    assert binary(num(1), "+", num(2)) == Binary(Literal(LitNum(Num(1.0))), Ops.PLUS, Literal(LitNum(Num(2.0))))
    assert binary(num(1), "+", num(2)) != binary(num(2), "+", num(1))
    assert hash(group(nil())) == hash(Grouping(nil()))


def test_shared_subtrees() -> None:
    shared = binary(num(1), "*", num(2))
    expr = binary(shared, "+", shared)
    assert expr.left is expr.right
    assert render(expr) == "( + ( * 1 2 ) ( * 1 2 ) )"


def test_children_and_walk() -> None:
    expr, _ = parse_quiet("-(1 + 2)")
    assert isinstance(expr, Unary)
    assert list(children(expr)) == [expr.operand]

    kinds = [type(node).__name__ for node in walk(expr)]
    assert kinds == ["Unary", "Grouping", "Binary", "Literal", "Literal"]
    assert depth(expr) == 4
    assert depth(num(1)) == 1


def test_is_expr() -> None:
    assert is_expr(num(1))
    assert is_expr(group(true()))
    assert not is_expr(LitNum(Num(1.0)))
    assert not is_expr("1")
