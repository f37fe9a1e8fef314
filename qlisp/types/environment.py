"""Runtime environment for qlisp.

The Environment is a single flat table from symbol name to Value. It owns its
values: `put` stores a deep copy and `get` hands back a deep copy, so no binding
is ever shared with a tree that is still being evaluated.
"""

from __future__ import annotations

import logging
from io import StringIO
from typing import Iterator, Mapping

from qlisp.types.errors import ErrorKind, QLispInvalidSymbol
from qlisp.types.value import Error, Value, copy_value

logger = logging.getLogger(__name__)


class Environment:
    """Ordered mapping from symbol names to owned Values."""

    __slots__ = ("vars",)

    def __init__(self):
        self.vars: dict[str, Value] = {}

    def get(self, name: str) -> Value:
        """Return a copy of the value bound to `name`, or an unbound-symbol Error."""
        value = self.vars.get(name)
        if value is None:
            return Error(ErrorKind.UNBOUND_SYMBOL, f"Unbound symbol '{name}'")
        return copy_value(value)

    def put(self, name: str, value: Value) -> None:
        """Bind `name` to a copy of `value`, replacing any previous binding.

        Raises QLispInvalidSymbol if `name` is not a string.
        """
        if not isinstance(name, str):
            raise QLispInvalidSymbol(f"Cannot bind {name!r} as a symbol")
        logger.debug("bind %s = %s", name, value)
        self.vars[name] = copy_value(value)

    def update(self, mapping: Mapping[str, Value]) -> None:
        """Bulk-bind a mapping of name -> value."""
        for k, v in mapping.items():
            self.put(k, v)

    def names(self) -> list[str]:
        return list(self.vars)

    def __contains__(self, name: object) -> bool:
        return name in self.vars

    def __len__(self) -> int:
        return len(self.vars)

    def __iter__(self) -> Iterator[str]:
        return iter(self.vars)

    def _write_vars(self, buffer: StringIO) -> None:
        """Write the bindings into the buffer in a compact form."""
        buffer.write("{")
        first = True
        for k, v in self.vars.items():
            if not first:
                buffer.write(", ")
            buffer.write(f"{k}: {v}")
            first = False
        buffer.write("}")

    def __str__(self) -> str:
        with StringIO() as buffer:
            self._write_vars(buffer)
            return buffer.getvalue()

    def __repr__(self) -> str:
        with StringIO() as buffer:
            buffer.write("<Environment ")
            self._write_vars(buffer)
            buffer.write(">")
            return buffer.getvalue()
