"""Expression tree nodes produced by the parser.

Nodes are frozen dataclasses: once built they are never mutated, so any
subtree may be shared between consumers without copying.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Union

from typing_extensions import TypeAlias, TypeGuard

from .diagnostics import InternalError
from .token_types import TT, Num, Str


# ---------- Literal leaves ----------

@dataclass(frozen=True)
class LitTrue:
    def __str__(self) -> str:
        return "true"


@dataclass(frozen=True)
class LitFalse:
    def __str__(self) -> str:
        return "false"


@dataclass(frozen=True)
class LitNil:
    def __str__(self) -> str:
        return "nil"


@dataclass(frozen=True)
class LitNum:
    value: Num

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class LitStr:
    value: Str

    def __str__(self) -> str:
        # raw text, no surrounding quotes
        return self.value.value


Lit: TypeAlias = Union[LitTrue, LitFalse, LitNil, LitNum, LitStr]


# ---------- Operators ----------

class Sign(Enum):
    MINUS = "-"
    BANG = "!"

    @classmethod
    def from_tag(cls, tag: TT) -> Sign:
        match tag:
            case TT.MINUS:
                return cls.MINUS
            case TT.BANG:
                return cls.BANG
            case _:
                raise InternalError(f"invalid unary operator: {tag.name}")

    def __str__(self) -> str:
        return self.value


class Ops(Enum):
    MINUS = "-"
    PLUS = "+"
    BANG_EQUAL = "!="
    SLASH = "/"
    STAR = "*"
    EQUAL_EQUAL = "=="
    GREATER = ">"
    GREATER_EQUAL = ">="
    LESS = "<"
    LESS_EQUAL = "<="

    @classmethod
    def from_tag(cls, tag: TT) -> Ops:
        """Operator for a token tag; any non-operator tag is a defect."""
        op = _OPS_BY_TAG.get(tag)
        if op is None:
            raise InternalError(f"invalid operator: {tag.name}")
        return op

    def __str__(self) -> str:
        return self.value


_OPS_BY_TAG = {
    TT.MINUS: Ops.MINUS,
    TT.PLUS: Ops.PLUS,
    TT.BANG_EQUAL: Ops.BANG_EQUAL,
    TT.SLASH: Ops.SLASH,
    TT.STAR: Ops.STAR,
    TT.EQUAL_EQUAL: Ops.EQUAL_EQUAL,
    TT.GREATER: Ops.GREATER,
    TT.GREATER_EQUAL: Ops.GREATER_EQUAL,
    TT.LESS: Ops.LESS,
    TT.LESS_EQUAL: Ops.LESS_EQUAL,
}


# ---------- Expressions ----------

# Deepest tree either parser accepts.
MAX_HEIGHT = 256

# Every node records its height (a leaf is 1) when built, so depth checks
# never walk the tree.

@dataclass(frozen=True)
class Literal:
    lit: Lit
    height: int = field(init=False, compare=False, repr=False, default=1)


@dataclass(frozen=True)
class Unary:
    sign: Sign
    operand: Expr
    height: int = field(init=False, compare=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "height", self.operand.height + 1)


@dataclass(frozen=True)
class Binary:
    left: Expr
    op: Ops
    right: Expr
    height: int = field(init=False, compare=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "height", max(self.left.height, self.right.height) + 1
        )


@dataclass(frozen=True)
class Grouping:
    inner: Expr
    height: int = field(init=False, compare=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "height", self.inner.height + 1)


Expr: TypeAlias = Union[Literal, Unary, Binary, Grouping]


def is_expr(node: object) -> TypeGuard[Expr]:
    return isinstance(node, (Literal, Unary, Binary, Grouping))


def children(node: Expr) -> Iterator[Expr]:
    match node:
        case Literal():
            return iter(())
        case Unary(operand=operand):
            return iter((operand,))
        case Binary(left=left, right=right):
            return iter((left, right))
        case Grouping(inner=inner):
            return iter((inner,))
    raise InternalError(f"not an expression node: {node!r}")


def walk(node: Expr) -> Iterator[Expr]:
    """Pre-order traversal."""
    yield node
    for child in children(node):
        yield from walk(child)


def depth(node: Expr) -> int:
    return node.height
