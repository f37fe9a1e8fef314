import pytest

from qlisp.types.environment import Environment
from qlisp.builtin.env_builtin import register
from qlisp.interpreter import Interpreter
from qlisp.reader.reader import read_source
from qlisp.evaluation.evaluator import evaluate


@pytest.fixture
def env():
    """Fresh environment with builtins loaded."""
    e = Environment()
    register(e)
    return e


@pytest.fixture
def interp():
    return Interpreter()


@pytest.fixture
def run(env):
    """Read and evaluate a phrase against the shared `env` fixture."""
    def _run(source: str):
        return evaluate(read_source(source), env)
    return _run
