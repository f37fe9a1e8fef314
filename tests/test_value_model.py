import pytest
from hypothesis import given, strategies as st

from qlisp.types.errors import ErrorKind
from qlisp.types.value import (
    Error, Function, Number, QExpr, SExpr, Symbol, copy_value, render,
)
from qlisp.builtin.env_builtin import add

# -------------------------------
# Strategies
# -------------------------------
symbol_strat = st.from_regex(r"[a-zA-Z_+\-*/\\=<>!&][a-zA-Z0-9_+\-*/\\=<>!&]{0,8}", fullmatch=True).map(Symbol)
number_strat = st.integers(min_value=-(2**63), max_value=2**63 - 1).map(Number)
error_strat = st.sampled_from(list(ErrorKind)).map(Error)
function_strat = st.just(Function("+", add))

atom_strat = st.one_of(symbol_strat, number_strat, error_strat, function_strat)

value_strat = st.recursive(
    atom_strat,
    lambda children: st.one_of(
        st.lists(children, max_size=4).map(SExpr),
        st.lists(children, max_size=4).map(QExpr),
    ),
    max_leaves=20,
)
container_strat = st.one_of(
    st.lists(value_strat, max_size=4).map(SExpr),
    st.lists(value_strat, max_size=4).map(QExpr),
)


def _destroy(value):
    """Empty every container in the tree, as consuming it would."""
    if isinstance(value, (SExpr, QExpr)):
        for child in value.cells:
            _destroy(child)
        value.clear()


# -------------------------------
# Rendering
# -------------------------------
@pytest.mark.parametrize(
    "value,expected",
    [
        (Number(-12), "-12"),
        (Symbol("join"), "join"),
        (Error(ErrorKind.DIVISION_BY_ZERO, "Division by zero"), "Error: Division by zero"),
        (Error(ErrorKind.UNBOUND_SYMBOL), "Error: unbound symbol"),
        (Function("+", add), "<function>"),
        (SExpr(), "()"),
        (QExpr(), "{}"),
        (SExpr([Symbol("+"), Number(1), QExpr([Number(2), Symbol("x")])]), "(+ 1 {2 x})"),
        (QExpr([SExpr([]), QExpr([])]), "{() {}}"),
    ]
)
def test_render(value, expected):
    assert render(value) == expected


# -------------------------------
# Copy
# -------------------------------
@given(container_strat)
def test_copy_survives_destroying_original(value):
    text = render(value)
    copied = copy_value(value)
    _destroy(value)
    assert render(copied) == text


@given(value_strat)
def test_copy_is_equal_but_not_shared(value):
    copied = copy_value(value)
    assert copied == value
    if isinstance(value, (SExpr, QExpr)):
        assert copied is not value
        assert copied.cells is not value.cells


def test_copy_keeps_function_reference():
    f = Function("+", add)
    g = copy_value(f)
    assert g.fn is add and g.name == "+"


# -------------------------------
# Container operations
# -------------------------------
def test_take_empties_container():
    s = SExpr([Number(1), Number(2), Number(3)])
    assert s.take(1) == Number(2)
    assert len(s) == 0


def test_pop_removes_one():
    q = QExpr([Number(1), Number(2)])
    assert q.pop(0) == Number(1)
    assert q == QExpr([Number(2)])


def test_join_moves_children():
    a = QExpr([Number(1)])
    b = QExpr([Number(2), Number(3)])
    a.join(b)
    assert a == QExpr([Number(1), Number(2), Number(3)])
    assert len(b) == 0


def test_relabel_moves_same_children():
    child = SExpr([Symbol("x")])
    s = SExpr([child])
    q = s.to_qexpr()
    assert isinstance(q, QExpr) and q[0] is child
    assert len(s) == 0
    back = q.to_sexpr()
    assert isinstance(back, SExpr) and back[0] is child


def test_sexpr_and_qexpr_are_not_equal():
    assert SExpr([Number(1)]) != QExpr([Number(1)])
