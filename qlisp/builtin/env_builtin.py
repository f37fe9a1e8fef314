"""Built-in functions for the qlisp runtime environment.

This module defines arithmetic, Q-expression list processing, `eval` and `def`,
and the registry used to install them into an Environment.

Every builtin is called as fn(env, args) where `args` is an S-expression holding
the already evaluated arguments. The builtin owns that container: on success it
builds its result from it, on failure it empties it and returns a single Error.
"""
from __future__ import annotations

import logging
from typing import Callable

from qlisp import BuiltinFn
from qlisp.types.environment import Environment
from qlisp.types.errors import ErrorKind
from qlisp.types.value import Error, Function, Number, QExpr, SExpr, Symbol, Value
from qlisp.evaluation.evaluator import evaluate

logger = logging.getLogger(__name__)


def _fail(args: SExpr, kind: ErrorKind, message: str) -> Error:
    """Drop the whole argument list and return one Error in its place."""
    args.clear()
    logger.debug("builtin failed: %s", message)
    return Error(kind, message)


def _check_single_qexpr(name: str, args: SExpr) -> Error | None:
    if len(args) != 1:
        return _fail(
            args,
            ErrorKind.ARITY_MISMATCH,
            f"Function '{name}' passed {len(args)} arguments, expected 1",
        )
    if not isinstance(args[0], QExpr):
        return _fail(
            args,
            ErrorKind.TYPE_MISMATCH,
            f"Function '{name}' passed {args[0]}, expected a Q-expression",
        )
    return None


# -------------------------------
# Arithmetic
# -------------------------------
def _trunc_div(x: int, y: int) -> int:
    """Integer division rounding toward zero."""
    q = abs(x) // abs(y)
    return q if (x < 0) == (y < 0) else -q


_OPERATORS: dict[str, Callable[[int, int], int]] = {
    "+": lambda x, y: x + y,
    "-": lambda x, y: x - y,
    "*": lambda x, y: x * y,
    "/": _trunc_div,
}


def builtin_op(env: Environment, args: SExpr, op: str) -> Value:
    """Left fold of `op` over the Number arguments; unary `-` negates."""
    if len(args) == 0:
        return _fail(args, ErrorKind.ARITY_MISMATCH, f"Function '{op}' passed no arguments")
    for a in args:
        if not isinstance(a, Number):
            return _fail(args, ErrorKind.TYPE_MISMATCH, f"Function '{op}' can only operate on numbers, got {a}")

    fn = _OPERATORS[op]
    x = args.pop(0)
    if op == "-" and len(args) == 0:
        return Number(-x.value)

    acc = x.value
    while len(args) > 0:
        y = args.pop(0)
        if op == "/" and y.value == 0:
            return _fail(args, ErrorKind.DIVISION_BY_ZERO, "Division by zero")
        acc = fn(acc, y.value)
    return Number(acc)


def add(env: Environment, args: SExpr) -> Value:
    """Sum of all arguments."""
    return builtin_op(env, args, "+")


def sub(env: Environment, args: SExpr) -> Value:
    """Subtract all subsequent numbers from the first; unary negation for one arg."""
    return builtin_op(env, args, "-")


def mul(env: Environment, args: SExpr) -> Value:
    """Product of all arguments."""
    return builtin_op(env, args, "*")


def div(env: Environment, args: SExpr) -> Value:
    """Divide left to right, truncating; stops at the first zero divisor."""
    return builtin_op(env, args, "/")


# -------------------------------
# Q-expressions
# -------------------------------
def list_builtin(env: Environment, args: SExpr) -> Value:
    """Quote the evaluated arguments: (list 1 (+ 1 1)) => {1 2}."""
    return args.to_qexpr()


def first(env: Environment, args: SExpr) -> Value:
    """Keep only the first element of the Q-expression."""
    err = _check_single_qexpr("first", args)
    if err is not None:
        return err
    if len(args[0]) == 0:
        return _fail(args, ErrorKind.EMPTY_COLLECTION, "Function 'first' passed {}")
    q = args.take(0)
    del q.cells[1:]
    return q


def last(env: Environment, args: SExpr) -> Value:
    """Drop the first element of the Q-expression and keep the rest."""
    err = _check_single_qexpr("last", args)
    if err is not None:
        return err
    if len(args[0]) == 0:
        return _fail(args, ErrorKind.EMPTY_COLLECTION, "Function 'last' passed {}")
    q = args.take(0)
    q.pop(0)
    return q


def join(env: Environment, args: SExpr) -> Value:
    """Concatenate Q-expressions in argument order."""
    if len(args) == 0:
        return _fail(args, ErrorKind.ARITY_MISMATCH, "Function 'join' passed no arguments")
    for a in args:
        if not isinstance(a, QExpr):
            return _fail(args, ErrorKind.TYPE_MISMATCH, f"Function 'join' passed {a}, expected a Q-expression")
    x = args.pop(0)
    while len(args) > 0:
        x.join(args.pop(0))
    return x


def eval_builtin(env: Environment, args: SExpr) -> Value:
    """Unquote the Q-expression and evaluate it: (eval {+ 1 2}) => 3."""
    err = _check_single_qexpr("eval", args)
    if err is not None:
        return err
    x = args.take(0).to_sexpr()
    return evaluate(x, env)


# -------------------------------
# Definitions
# -------------------------------
def define(env: Environment, args: SExpr) -> Value:
    """(def {a b} 1 2) binds a and b in order; returns ()."""
    if len(args) == 0:
        return _fail(args, ErrorKind.ARITY_MISMATCH, "Function 'def' passed no arguments")
    symbols = args[0]
    if not isinstance(symbols, QExpr):
        return _fail(args, ErrorKind.TYPE_MISMATCH, f"Function 'def' passed {symbols}, expected a Q-expression")
    for s in symbols:
        if not isinstance(s, Symbol):
            return _fail(args, ErrorKind.TYPE_MISMATCH, f"Function 'def' cannot define non-symbol {s}")
    if len(symbols) != len(args) - 1:
        return _fail(
            args,
            ErrorKind.ARITY_MISMATCH,
            f"Function 'def' passed {len(symbols)} symbols for {len(args) - 1} values",
        )

    for s, v in zip(symbols, args.cells[1:]):
        env.put(s.name, v)
    args.clear()
    return SExpr()


BUILTINS: dict[str, BuiltinFn] = {
    # list functions
    "list": list_builtin,
    "first": first,
    "last": last,
    "eval": eval_builtin,
    "join": join,
    # math functions
    "+": add,
    "-": sub,
    "*": mul,
    "/": div,
    # variable definition
    "def": define,
}


def register(env: Environment) -> None:
    """Register all builtin functions into the given environment."""
    env.update({name: Function(name, fn) for name, fn in BUILTINS.items()})
