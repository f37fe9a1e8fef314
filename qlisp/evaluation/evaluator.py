"""Core evaluator for the qlisp interpreter.

One rule per Value variant. Symbols are looked up, S-expressions are reduced,
everything else evaluates to itself.
"""

from __future__ import annotations

from typing import assert_never

from qlisp.evaluation.apply import apply
from qlisp.types.environment import Environment
from qlisp.types.value import Error, Function, Number, QExpr, SExpr, Symbol, Value


def evaluate(expr: Value, env: Environment) -> Value:
    match expr:
        case Symbol():
            return env.get(expr.name)
        case SExpr():
            return evaluate_sexpr(expr, env)
        case Number() | Error() | QExpr() | Function():
            return expr
        case _:
            assert_never(expr)


def evaluate_sexpr(expr: SExpr, env: Environment) -> Value:
    """Reduce an S-expression in place and return its result."""
    # Every child is reduced before any error is looked at.
    for i, child in enumerate(expr.cells):
        expr.cells[i] = evaluate(child, env)

    for i, child in enumerate(expr.cells):
        if isinstance(child, Error):
            return expr.take(i)

    if len(expr) == 0:
        return expr

    if len(expr) == 1:
        return expr.take(0)

    head = expr.pop(0)
    return apply(head, expr, env)
