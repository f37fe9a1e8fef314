from __future__ import annotations

"""
Lightweight indexer for qlisp files without evaluating code.

We scan for `def` forms and build an index of the names they bind:

    (def {x y} 1 2)
    def {z} 3            ; top-level phrases are S-expressions too

The scanner is tolerant: it never raises on partial/incomplete buffers. We only
extract enough structure to power LSP features (document symbols, hover,
completion, unbalanced-delimiter warnings).
"""

from dataclasses import dataclass, field
from typing import Dict, List, Tuple
import re

# Simple token patterns for scanning
TOKEN_REGEX = re.compile(r";[^\n]*|[(){}]|[^\s(){};]+")
NUMBER_REGEX = re.compile(r"-?[0-9]+")


@dataclass
class SymbolDef:
    name: str
    line: int
    col: int


@dataclass
class DocumentIndex:
    symbols: Dict[str, SymbolDef] = field(default_factory=dict)
    paren_balance: int = 0
    brace_balance: int = 0

    @property
    def balanced(self) -> bool:
        return self.paren_balance == 0 and self.brace_balance == 0


def _iter_tokens(text: str):
    for m in TOKEN_REGEX.finditer(text):
        tok = m.group(0)
        if tok.startswith(";"):
            continue
        yield tok, m.start()


def position_from_offset(text: str, offset: int) -> Tuple[int, int]:
    # Return (line, col), 0-based
    line = text.count("\n", 0, offset)
    last_nl = text.rfind("\n", 0, offset)
    col = offset if last_nl == -1 else offset - last_nl - 1
    return line, col


def build_index(text: str) -> DocumentIndex:
    idx = DocumentIndex()
    tokens: List[Tuple[str, int]] = list(_iter_tokens(text))

    i = 0
    while i < len(tokens):
        tok, start = tokens[i]
        if tok == "(":
            idx.paren_balance += 1
        elif tok == ")":
            idx.paren_balance -= 1
        elif tok == "{":
            idx.brace_balance += 1
        elif tok == "}":
            idx.brace_balance -= 1
        elif tok == "def" and i + 1 < len(tokens) and tokens[i + 1][0] == "{":
            # (def {a b} ...): every symbol up to the closing brace is a definition
            idx.brace_balance += 1
            j = i + 2
            while j < len(tokens) and tokens[j][0] not in ("(", ")", "{", "}"):
                t, s = tokens[j]
                if NUMBER_REGEX.fullmatch(t):
                    j += 1
                    continue
                line, col = position_from_offset(text, s)
                idx.symbols[t] = SymbolDef(name=t, line=line, col=col)
                j += 1
            # the delimiter that ended the list is counted by the main loop
            i = j
            continue
        i += 1

    return idx


# Builtin signatures for quick hover/signature help without eval
BUILTIN_SIGNATURES: Dict[str, str] = {
    "+": "(+ n &rest ns)",
    "-": "(- n &rest ns)",
    "*": "(* n &rest ns)",
    "/": "(/ n &rest ns)",
    "list": "(list &rest xs)",
    "first": "(first q)",
    "last": "(last q)",
    "join": "(join q &rest qs)",
    "eval": "(eval q)",
    "def": "(def {syms} &rest values)",
}
