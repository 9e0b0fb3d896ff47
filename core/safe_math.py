# core/safe_math.py
from typing import Iterable

import sympy as sp

_ALLOWED_NAMES = {
    "sin": sp.sin, "cos": sp.cos, "tan": sp.tan, "atan": sp.atan,
    "exp": sp.exp, "log": sp.log, "log10": lambda x: sp.log(x, 10),
    "sqrt": sp.sqrt, "abs": sp.Abs,
    "pi": sp.pi,
}


def parse_expr(src: str, names: Iterable[str] = ()) -> sp.Expr:
    """
    Parse a plain arithmetic expression.

    *names* are forced to plain symbols so parameters called e.g. ``I`` or
    ``E`` do not turn into SymPy constants.
    """
    local = dict(_ALLOWED_NAMES)
    local.update({name: sp.Symbol(name) for name in names})
    try:
        return sp.sympify(src, locals=local, convert_xor=True)
    except (sp.SympifyError, SyntaxError, TypeError) as exc:
        raise ValueError(f"Bad expression '{src}': {exc}") from exc
