"""
  qlisp lexer and parser

Turns source text into a generic parse tree. The tree carries no Values; it only
records what was matched, which keeps the reader (qlisp.reader.reader) independent
of how the text was scanned.

Grammar:

    number      : /-?[0-9]+/
    symbol      : /[a-zA-Z0-9_+\\-*\\/\\\\=<>!&]+/
    sexpression : '(' <expression>* ')'
    qexpression : '{' <expression>* '}'
    expression  : <number> | <symbol> | <sexpression> | <qexpression>
    phrase      : /^/ <expression>* /$/

Tree shape for "(+ 1 {x})":

    >                                   root, tag is exactly ">"
      regex ""                          start anchor
      expression|sexpression|>
        char "("
        expression|symbol|regex "+"
        expression|number|regex "1"
        expression|qexpression|>
          char "{"
          expression|symbol|regex "x"
          char "}"
        char ")"
      regex ""                          end anchor
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterator, Optional

from qlisp.types.errors import QLispSyntaxError

ROOT_TAG = ">"

TOKEN_RE = re.compile(
    r"(?P<comment>;[^\n]*)"  # single-line comment
    r"|(?P<lparen>\()"  # (
    r"|(?P<rparen>\))"  # )
    r"|(?P<lbrace>\{)"  # {
    r"|(?P<rbrace>\})"  # }
    r"|(?P<number>-?[0-9]+)"  # tried before symbols, as in the grammar
    r"|(?P<symbol>[a-zA-Z0-9_+\-*/\\=<>!&]+)"
)

WHITESPACE_RE = re.compile(r"\s+")

CLOSERS = {"lparen": "rparen", "lbrace": "rbrace"}
GROUP_TAGS = {"lparen": "expression|sexpression|>", "lbrace": "expression|qexpression|>"}


@dataclass
class ParseNode:
    tag: str
    contents: str = ""
    children: list[ParseNode] = field(default_factory=list)
    line: int = 1
    col: int = 1


def _position(source: str, offset: int) -> tuple[int, int]:
    """1-based (line, col) of `offset`."""
    line = source.count("\n", 0, offset) + 1
    last_nl = source.rfind("\n", 0, offset)
    return line, offset - last_nl


def lex(source: str) -> Iterator[tuple[str, str, int]]:
    """Token generator: yields (token_type, token_value, offset) tuples."""
    pos = 0
    n = len(source)
    while pos < n:
        ws = WHITESPACE_RE.match(source, pos)
        if ws:
            pos = ws.end()
            continue
        m = TOKEN_RE.match(source, pos)
        if not m:
            line, col = _position(source, pos)
            raise QLispSyntaxError(f"Unexpected character {source[pos]!r}", line, col)
        kind = m.lastgroup
        if kind != "comment":
            yield kind, m.group(kind), pos
        pos = m.end()


class TokenStream:
    def __init__(self, source: str):
        self.source = source
        self.tokens = lex(source)
        self.buffer: list[tuple[str, str, int]] = []

    def peek(self) -> tuple[Optional[str], Optional[str], int]:
        if not self.buffer:
            try:
                self.buffer.append(next(self.tokens))
            except StopIteration:
                return None, None, len(self.source)
        return self.buffer[0]

    def advance(self) -> tuple[Optional[str], Optional[str], int]:
        if self.buffer:
            return self.buffer.pop(0)
        return next(self.tokens, (None, None, len(self.source)))

    def _error(self, message: str, offset: int) -> QLispSyntaxError:
        line, col = _position(self.source, offset)
        return QLispSyntaxError(message, line, col)

    def _leaf(self, tag: str, contents: str, offset: int) -> ParseNode:
        line, col = _position(self.source, offset)
        return ParseNode(tag, contents, [], line, col)

    def parse_expr(self) -> Optional[ParseNode]:
        tok_type, tok_val, offset = self.peek()
        if tok_type is None:
            return None

        if tok_type == "number":
            self.advance()
            return self._leaf("expression|number|regex", tok_val, offset)

        if tok_type == "symbol":
            self.advance()
            return self._leaf("expression|symbol|regex", tok_val, offset)

        if tok_type in CLOSERS:
            self.advance()
            node = self._leaf(GROUP_TAGS[tok_type], "", offset)
            node.children.append(self._leaf("char", tok_val, offset))
            closer = CLOSERS[tok_type]
            while True:
                nxt_type, nxt_val, nxt_offset = self.peek()
                if nxt_type is None:
                    raise self._error(f"Unmatched '{tok_val}'", offset)
                if nxt_type == closer:
                    self.advance()
                    node.children.append(self._leaf("char", nxt_val, nxt_offset))
                    return node
                if nxt_type in ("rparen", "rbrace"):
                    raise self._error(f"Unexpected '{nxt_val}' inside '{tok_val}'", nxt_offset)
                node.children.append(self.parse_expr())

        raise self._error(f"Unexpected '{tok_val}'", offset)

    def parse_all(self) -> Iterator[ParseNode]:
        while True:
            tok_type, _, _ = self.peek()
            if tok_type is None:
                break
            yield self.parse_expr()


def parse(source: str) -> ParseNode:
    """Parse a whole phrase and return the root node."""
    stream = TokenStream(source)
    root = ParseNode(ROOT_TAG, "", [ParseNode("regex", "", [], 1, 1)], 1, 1)
    root.children.extend(stream.parse_all())
    end_line, end_col = _position(source, len(source))
    root.children.append(ParseNode("regex", "", [], end_line, end_col))
    return root
