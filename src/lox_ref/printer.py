from __future__ import annotations

from .diagnostics import InternalError
from .tree import Binary, Expr, Grouping, Literal, Unary


def render(expr: Expr) -> str:
    """Prefix debug form, e.g. ``( * ( - 123 ) ( group 45.67 ) )``."""
    match expr:
        case Binary(left=left, op=op, right=right):
            return f"( {op} {render(left)} {render(right)} )"
        case Unary(sign=sign, operand=operand):
            return f"( {sign} {render(operand)} )"
        case Grouping(inner=inner):
            return f"( group {render(inner)} )"
        case Literal(lit=lit):
            return str(lit)
    raise InternalError(f"not an expression node: {expr!r}")
