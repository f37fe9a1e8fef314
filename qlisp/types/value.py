"""Runtime values for qlisp.

Every piece of runtime data is one of six Value classes:

- Number:    a signed integer
- Error:     a first-class diagnostic (ErrorKind + message)
- Symbol:    a name resolved through the Environment
- SExpr:     an owned list that the evaluator reduces
- QExpr:     an owned list that is never reduced automatically (quoted)
- Function:  a native builtin, called as fn(env, args)

Containers own their children outright: nothing is shared between two live trees,
and binding a value into an Environment always goes through copy_value. Consuming
a container (take/join/relabel) empties it so a dropped container never keeps a
child alive in two places.
"""

from __future__ import annotations

import sys
from io import StringIO
from typing import Iterator, Union, assert_never

from qlisp import BuiltinFn
from qlisp.types.errors import ErrorKind


class Number:
    __slots__ = ("value",)

    def __init__(self, value: int):
        self.value = value

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Number) and self.value == other.value

    def __hash__(self) -> int:
        return hash(self.value)

    def __repr__(self):
        return f"Number({self.value})"

    def __str__(self):
        return str(self.value)


class Error:
    __slots__ = ("kind", "message")

    def __init__(self, kind: ErrorKind, message: str | None = None):
        self.kind = kind
        self.message = message if message is not None else kind.value

    def __eq__(self, other: object) -> bool:
        return (
            isinstance(other, Error)
            and self.kind is other.kind
            and self.message == other.message
        )

    def __hash__(self) -> int:
        return hash((self.kind, self.message))

    def __repr__(self):
        return f"Error({self.kind.name}, {self.message!r})"

    def __str__(self):
        return f"Error: {self.message}"


class Symbol:
    __slots__ = ("name",)

    def __init__(self, name: str):
        # Intern to ensure fast equality/hash for environment keys
        self.name = sys.intern(name)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Symbol) and self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)

    def __repr__(self):
        return f"Symbol({self.name!r})"

    def __str__(self):
        return self.name


class Function:
    """A native builtin. Copies share the callable; there is nothing else to own."""

    __slots__ = ("name", "fn")

    def __init__(self, name: str, fn: BuiltinFn):
        self.name = name
        self.fn = fn

    def __call__(self, env, args: SExpr) -> Value:
        return self.fn(env, args)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Function) and self.fn is other.fn

    def __hash__(self) -> int:
        return hash(self.fn)

    def __repr__(self):
        return f"Function({self.name!r})"

    def __str__(self):
        return "<function>"


class _Expr:
    """Shared behaviour of the two list variants."""

    __slots__ = ("cells",)

    OPEN = ""
    CLOSE = ""

    def __init__(self, cells: list[Value] | None = None):
        # The list is adopted, not copied: relabelling hands the same cells over.
        self.cells: list[Value] = cells if cells is not None else []

    def add(self, value: Value) -> _Expr:
        self.cells.append(value)
        return self

    def pop(self, index: int = 0) -> Value:
        return self.cells.pop(index)

    def take(self, index: int) -> Value:
        """Remove child `index`, drop every other child and return the removed one."""
        value = self.cells.pop(index)
        self.cells.clear()
        return value

    def join(self, other: _Expr) -> _Expr:
        """Move all of `other`'s children onto the end of this container."""
        self.cells.extend(other.cells)
        other.cells = []
        return self

    def clear(self) -> None:
        self.cells.clear()

    def __len__(self) -> int:
        return len(self.cells)

    def __iter__(self) -> Iterator[Value]:
        return iter(self.cells)

    def __getitem__(self, index: int) -> Value:
        return self.cells[index]

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and self.cells == other.cells

    __hash__ = None

    def __repr__(self):
        return f"{type(self).__name__}({self.cells!r})"

    def __str__(self):
        with StringIO() as buffer:
            buffer.write(self.OPEN)
            buffer.write(" ".join(str(c) for c in self.cells))
            buffer.write(self.CLOSE)
            return buffer.getvalue()


class SExpr(_Expr):
    __slots__ = ()

    OPEN = "("
    CLOSE = ")"

    def to_qexpr(self) -> QExpr:
        """Relabel as a Q-expression; the children move over untouched."""
        q = QExpr(self.cells)
        self.cells = []
        return q


class QExpr(_Expr):
    __slots__ = ()

    OPEN = "{"
    CLOSE = "}"

    def to_sexpr(self) -> SExpr:
        """Relabel as an S-expression; the children move over untouched."""
        s = SExpr(self.cells)
        self.cells = []
        return s


Value = Union[Number, Error, Symbol, SExpr, QExpr, Function]


def copy_value(value: Value) -> Value:
    """Deep copy. Containers are duplicated recursively; functions share the callable."""
    match value:
        case Number():
            return Number(value.value)
        case Error():
            return Error(value.kind, value.message)
        case Symbol():
            return Symbol(value.name)
        case Function():
            return Function(value.name, value.fn)
        case SExpr():
            return SExpr([copy_value(c) for c in value.cells])
        case QExpr():
            return QExpr([copy_value(c) for c in value.cells])
        case _:
            assert_never(value)


def render(value: Value) -> str:
    """Single-line text form used by the printer."""
    return str(value)
