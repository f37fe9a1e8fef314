import pytest

from qlisp.types.environment import Environment
from qlisp.types.errors import ErrorKind, QLispInvalidSymbol
from qlisp.types.value import Error, Number, QExpr, Symbol


def test_get_unbound():
    env = Environment()
    result = env.get("missing")
    assert isinstance(result, Error)
    assert result.kind is ErrorKind.UNBOUND_SYMBOL
    assert "missing" in result.message
    assert len(env) == 0


def test_put_stores_a_copy():
    env = Environment()
    q = QExpr([Number(1), Number(2)])
    env.put("xs", q)
    q.clear()
    assert env.get("xs") == QExpr([Number(1), Number(2)])


def test_get_returns_a_copy():
    env = Environment()
    env.put("xs", QExpr([Number(1)]))
    got = env.get("xs")
    got.add(Number(2))
    assert env.get("xs") == QExpr([Number(1)])


def test_put_replaces_in_place():
    env = Environment()
    env.put("a", Number(1))
    env.put("b", Number(2))
    env.put("a", Symbol("z"))
    assert env.names() == ["a", "b"]
    assert env.get("a") == Symbol("z")


def test_update_and_iteration():
    env = Environment()
    env.update({"x": Number(1), "y": Number(2)})
    assert list(env) == ["x", "y"]
    assert "x" in env and "q" not in env


def test_put_rejects_non_string_name():
    with pytest.raises(QLispInvalidSymbol):
        Environment().put(Symbol("x"), Number(1))


def test_str_and_repr():
    env = Environment()
    env.put("x", QExpr([Number(1)]))
    assert str(env) == "{x: {1}}"
    assert repr(env) == "<Environment {x: {1}}>"


def test_independent_environments(run, env):
    run("def {x} 1")
    other = Environment()
    assert other.get("x").kind is ErrorKind.UNBOUND_SYMBOL
    assert env.get("x") == Number(1)
