"""Reader: converts a parse tree into a Value tree."""

from __future__ import annotations

from qlisp.reader.parser import ParseNode, ROOT_TAG, parse
from qlisp.types.errors import ErrorKind, QLispSyntaxError
from qlisp.types.value import Error, Number, QExpr, SExpr, Symbol, Value

# strtol range on a 64-bit long
INT_MIN = -(2**63)
INT_MAX = 2**63 - 1

PUNCTUATION = frozenset("(){}")


def read_number(node: ParseNode) -> Value:
    try:
        x = int(node.contents, 10)
    except ValueError:
        return Error(ErrorKind.INVALID_NUMBER, f"Invalid number '{node.contents}'")
    if not INT_MIN <= x <= INT_MAX:
        return Error(ErrorKind.INVALID_NUMBER, f"Invalid number '{node.contents}'")
    return Number(x)


def read(node: ParseNode) -> Value:
    """Convert one parse-tree node (and its subtree) into a Value."""
    if "number" in node.tag:
        return read_number(node)
    if "symbol" in node.tag:
        return Symbol(node.contents)

    if node.tag == ROOT_TAG or "sexpression" in node.tag:
        x = SExpr()
    elif "qexpression" in node.tag:
        x = QExpr()
    else:
        raise QLispSyntaxError(f"Cannot read parse node tagged {node.tag!r}", node.line, node.col)

    for child in node.children:
        if child.contents in PUNCTUATION:
            continue
        if child.tag == "regex":
            continue
        x.add(read(child))
    return x


def read_source(source: str) -> Value:
    """Parse and read a whole phrase; the result is the root S-expression."""
    return read(parse(source))
