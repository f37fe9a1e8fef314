# Core type aliases for the qlisp data model.
#
# Runtime data is a closed family of Value classes (see qlisp.types.value). The
# aliases below are kept at the package root so that builtins, the evaluator and
# the front-ends can annotate against them without importing each other.
#
# Naming guidance:
# - LispValue: an evaluated (or evaluable) runtime Value.
# - BuiltinFn: a native function, called as fn(env, args) where args is an
#   S-expression of already evaluated arguments.

from typing import Any, Callable

LispValue = Any
BuiltinFn = Callable[..., LispValue]
