"""Error kinds and host exceptions for qlisp.

Language errors are values: an ``Error`` Value carries one of the ``ErrorKind``
members below and becomes the result of a reduction step. The exception classes
are only raised for problems outside the language itself (text the parser cannot
read, misuse of the Environment API from Python).
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    UNBOUND_SYMBOL = "unbound symbol"
    INVALID_NUMBER = "invalid number"
    TYPE_MISMATCH = "type mismatch"
    ARITY_MISMATCH = "arity mismatch"
    EMPTY_COLLECTION = "empty collection"
    DIVISION_BY_ZERO = "division by zero"
    NOT_A_FUNCTION = "not a function"


class QLispError(Exception):
    """ Base class for all qlisp errors"""
    pass


class QLispInvalidSymbol(QLispError):
    """ Raised when a non-string name is bound in an Environment"""
    pass


class QLispSyntaxError(QLispError):
    """ Raised when source text or a parse tree cannot be read"""

    def __init__(self, message: str, line: int | None = None, col: int | None = None):
        super().__init__(message if line is None else f"{line}:{col}: {message}")
        self.message = message
        self.line = line
        self.col = col
