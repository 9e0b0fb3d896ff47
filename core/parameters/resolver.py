# core/parameters/resolver.py
"""
Parameter resolver for mnasim netlists.
Resolves named parameter expressions into floats, honouring SI suffixes,
Pint units and inter-parameter dependencies (via SymPy).
"""
import re
from typing import Dict, List, Mapping, Set, Union

import sympy as sp

from core.exceptions import ParameterError
from core.parameters.values import parse_value, si_literal
from core.safe_math import parse_expr

Expr = Union[str, int, float, sp.Expr]

_IDENTIFIER = re.compile(r"[A-Za-z_]\w*")


def _parse(key: str, expr: Expr, names) -> Union[float, sp.Expr]:
    """Literal value if possible, SymPy expression otherwise."""
    if isinstance(expr, (int, float)):
        return float(expr)
    if isinstance(expr, sp.Expr):
        return expr
    if not isinstance(expr, str):
        raise ParameterError(f"Unsupported type for parameter '{key}': {type(expr).__name__}")
    # An SI suffix is never a parameter reference
    literal = si_literal(expr)
    if literal is not None:
        return literal
    # Other literals (Pint units) unless the text mentions another parameter
    if not set(_IDENTIFIER.findall(expr)) & set(names):
        try:
            return parse_value(expr)
        except ParameterError:
            pass
    try:
        return parse_expr(expr, names)
    except ValueError as e:
        raise ParameterError(f"Failed to parse expression for '{key}': {e}")


def _build_dependency_graph(parsed: Dict[str, Union[float, sp.Expr]]) -> Dict[str, Set[str]]:
    """Map each parameter to the parameters it depends on."""
    graph: Dict[str, Set[str]] = {}
    for key, expr in parsed.items():
        deps: Set[str] = set()
        if isinstance(expr, sp.Expr):
            for sym in expr.free_symbols:
                name = str(sym)
                if name not in parsed:
                    raise ParameterError(f"Parameter '{key}' refers to undefined name '{name}'")
                deps.add(name)
        graph[key] = deps
    return graph


def _topological_sort(graph: Dict[str, Set[str]]) -> List[str]:
    """
    Kahn's algorithm over the dependency graph.
    Raises ParameterError on cycles.
    """
    in_degree: Dict[str, int] = {node: len(deps) for node, deps in graph.items()}
    dependents: Dict[str, Set[str]] = {node: set() for node in graph}
    for node, deps in graph.items():
        for dep in deps:
            dependents[dep].add(node)

    queue: List[str] = [n for n, deg in in_degree.items() if deg == 0]
    order: List[str] = []
    while queue:
        n = queue.pop(0)
        order.append(n)
        for dependent in sorted(dependents[n]):
            in_degree[dependent] -= 1
            if in_degree[dependent] == 0:
                queue.append(dependent)

    if len(order) != len(graph):
        cycle = [k for k, deg in in_degree.items() if deg > 0]
        raise ParameterError(f"Circular dependency among: {', '.join(cycle)}")
    return order


def resolve(param_dict: Mapping[str, Expr]) -> Dict[str, float]:
    """
    Resolve all parameters to numeric float values.

    Raises:
        ParameterError: If parsing or evaluation fails, a name is undefined
            or the parameters depend on each other circularly.
    """
    names = list(param_dict)
    parsed = {key: _parse(key, expr, names) for key, expr in param_dict.items()}
    order = _topological_sort(_build_dependency_graph(parsed))

    resolved: Dict[str, float] = {}
    for key in order:
        expr = parsed[key]
        if isinstance(expr, float):
            resolved[key] = expr
            continue
        try:
            resolved[key] = float(expr.evalf(subs={sp.Symbol(k): v for k, v in resolved.items()}))
        except (TypeError, ValueError) as e:
            raise ParameterError(f"Evaluation failed for '{key}': {e}")
    return resolved


def evaluate(expr: Expr, params: Mapping[str, float]) -> float:
    """Evaluate a single value expression against already resolved *params*."""
    return resolve({**params, "__value__": expr})["__value__"]
