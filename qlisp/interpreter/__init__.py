from __future__ import annotations

from qlisp import LispValue
from qlisp.reader.reader import read_source
from qlisp.types.environment import Environment
from qlisp.builtin.env_builtin import register
from qlisp.evaluation.evaluator import evaluate


class Interpreter:
    """
    Orchestrates reading and evaluating qlisp code.
    Maintains one Environment across calls, so definitions persist.
    """

    def __init__(self, prelude: str | None = None):
        self.env: Environment = Environment()
        register(self.env)

        if prelude:
            self.eval_prelude(prelude)

    def eval_prelude(self, code: str) -> None:
        """Evaluate each non-blank line of `code` as its own phrase."""
        for line in code.splitlines():
            if line.strip():
                self.eval(line)

    def eval(self, code: str) -> LispValue:
        """Evaluate one phrase. The whole input is read as a single S-expression,
        so `+ 1 2` and `(+ 1 2)` both give 3.

        Raises QLispSyntaxError if the text cannot be parsed.
        """
        return evaluate(read_source(code), self.env)

    def eval_to_string(self, code: str) -> str:
        return str(self.eval(code))
