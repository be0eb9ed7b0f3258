"""
  Lisp Reader, Lexer and Parser

- Streaming, lazy tokenizing
- Builds heap cells directly (the evaluator consumes the same cells):

    - ()            -> Nil
    - (a b c)       -> Pair chain ending in Nil
    - (a b . c)     -> Pair chain ending in c
    - 'x            -> (quote x)
    - 42, -7        -> int (64-bit signed)
    - #t / #f       -> bool
    - anything else -> Symbol (case-insensitive)
"""

from __future__ import annotations

import re
from typing import Iterator, Optional

from cellisp import SExpression
from cellisp.memory.tags import INT64_MAX, INT64_MIN
from cellisp.types.errors import CellispSyntaxError
from cellisp.types.symbol import Symbol

TOKEN_RE = re.compile(
    r"\s*(?:"
    r"(?P<lparen>\()"  # (
    r"|(?P<rparen>\))"  # )
    r"|(?P<quote>')"  # '
    r"|(?P<atom>[^\s()'][^\s()]*)"  # everything up to whitespace or a paren
    r")"
)

INTEGER_RE = re.compile(r"-?[0-9]+\Z")
QUOTE = Symbol("quote")


def lex(source: str) -> Iterator[tuple[str, str]]:
    """Token generator: yields (token_type, token_value) tuples."""
    pos = 0
    while True:
        m = TOKEN_RE.match(source, pos)
        if m is None:
            # Every non-space character starts some token, so only
            # trailing whitespace can be left over here.
            return
        pos = m.end()
        kind = m.lastgroup
        value = m.group(kind)
        if kind == "atom" and value == ".":
            kind = "dot"
        yield kind, value


def parse_atom(token: str) -> SExpression:
    if INTEGER_RE.match(token):
        value = int(token)
        if not INT64_MIN <= value <= INT64_MAX:
            raise CellispSyntaxError(f"Integer literal out of 64-bit range: {token}")
        return value
    lowered = token.lower()
    if lowered == "#t":
        return True
    if lowered == "#f":
        return False
    # Anything numeric-looking that did not parse as an integer is ambiguous.
    if token[0].isdigit() or (token[0] == "-" and len(token) > 1 and token[1].isdigit()):
        raise CellispSyntaxError(f"Illegal atom: {token}")
    return Symbol(token)


class TokenStream:
    def __init__(self, token_iter: Iterator[tuple[str, str]], heap):
        self.tokens = iter(token_iter)
        self.heap = heap
        self.buffer: list[tuple[str, str]] = []
        self.depth = 0

    def peek(self) -> tuple[Optional[str], Optional[str]]:
        if not self.buffer:
            try:
                self.buffer.append(next(self.tokens))
            except StopIteration:
                return None, None
        return self.buffer[0]

    def advance(self) -> tuple[Optional[str], Optional[str]]:
        if self.buffer:
            return self.buffer.pop(0)
        return next(self.tokens, (None, None))

    def at_end(self) -> bool:
        return self.peek()[0] is None

    def parse_expr(self) -> Optional[SExpression]:
        """Parse the next expression; None when the input is exhausted."""
        tok_type, tok_val = self.peek()
        if tok_type is None:
            return None
        self.advance()

        if tok_type == "atom":
            return parse_atom(tok_val)

        if tok_type == "quote":
            expr = self._parse_operand("Expected an expression after '")
            return self.heap.make_list([QUOTE, expr])

        if tok_type == "lparen":
            self.depth += 1
            try:
                return self._parse_list()
            finally:
                self.depth -= 1

        if tok_type == "rparen":
            raise CellispSyntaxError("Unmatched ')'")

        raise CellispSyntaxError("Unexpected '.' outside of a list")

    def _parse_operand(self, eof_message: str) -> SExpression:
        if self.at_end():
            raise CellispSyntaxError(eof_message)
        return self.parse_expr()

    def _parse_list(self) -> SExpression:
        items: list[SExpression] = []
        while True:
            tok_type, _ = self.peek()
            if tok_type is None:
                raise CellispSyntaxError(f"Unexpected end of input: {self.depth} unclosed '('")
            if tok_type == "rparen":
                self.advance()
                return self.heap.make_list(items)
            if tok_type == "dot":
                self.advance()
                if not items:
                    raise CellispSyntaxError("Dotted pair needs an element before '.'")
                if self.peek()[0] in ("rparen", "dot"):
                    raise CellispSyntaxError("Dotted pair needs a value after '.'")
                tail = self._parse_operand("Unterminated dotted pair")
                if self.peek()[0] != "rparen":
                    raise CellispSyntaxError("Unterminated dotted pair: expected ')' after the tail")
                self.advance()
                return self.heap.make_list(items, tail)
            items.append(self.parse_expr())

    def parse_all(self) -> Iterator[SExpression]:
        while not self.at_end():
            yield self.parse_expr()


def parse(text: str, heap) -> SExpression:
    """Read exactly one expression from `text`.

    Raises CellispSyntaxError for empty input or for anything left over after
    the first complete expression.
    """
    stream = TokenStream(lex(text), heap)
    expr = stream.parse_expr()
    if expr is None:
        raise CellispSyntaxError("Unexpected end of input: no expression")
    if not stream.at_end():
        _, tok_val = stream.peek()
        raise CellispSyntaxError(f"Unexpected trailing input after expression: {tok_val!r}")
    return expr


def read_all(text: str, heap) -> Iterator[SExpression]:
    """Yield successive expressions from `text`, reading each one lazily."""
    return TokenStream(lex(text), heap).parse_all()
