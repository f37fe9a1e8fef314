"""Application engine for qlisp.

Only native builtins are callable. The head has already been popped off the
reduced S-expression; what is left of that container is handed to the builtin
as its argument list.
"""

from __future__ import annotations

import logging

from qlisp.types.environment import Environment
from qlisp.types.errors import ErrorKind
from qlisp.types.value import Error, Function, SExpr, Value

logger = logging.getLogger(__name__)


def apply(head: Value, args: SExpr, env: Environment) -> Value:
    """Apply `head` to `args`.

    - Function: call it with the runtime env and the argument container.
    - Anything else: drop the arguments and return a not-a-function Error.
    """
    if isinstance(head, Function):
        logger.debug("apply %s to %s", head.name, args)
        return head(env, args)
    args.clear()
    return Error(ErrorKind.NOT_A_FUNCTION, f"First element is not a function, got {head}")
