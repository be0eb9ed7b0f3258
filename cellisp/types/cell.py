"""Handles onto heap cells.

A handle is (heap, index, stamp). The stamp is the allocation stamp the cell
had when the handle was made; the heap refuses to read or write through a
handle whose cell has since been reclaimed or reused (CellispHeapError).
Handles compare equal when they name the same live cell (identity, not
structure).
"""

from __future__ import annotations

from typing import Iterator

from cellisp import LispValue
from cellisp.memory.tags import TAG_PAIR, TAG_CLOSURE
from cellisp.types.errors import CellispSyntaxError
from cellisp.types.nil import Nil


class CellRef:
    __slots__ = ("heap", "index", "stamp")

    KIND: int = -1

    def __init__(self, heap, index: int, stamp: int):
        self.heap = heap
        self.index = index
        self.stamp = stamp

    @property
    def alive(self) -> bool:
        return self.heap.is_live(self)

    def __eq__(self, other) -> bool:
        return (
            type(other) is type(self)
            and other.heap is self.heap
            and other.index == self.index
            and other.stamp == self.stamp
        )

    def __hash__(self) -> int:
        return hash((self.KIND, self.index, self.stamp))

    def __str__(self) -> str:
        from cellisp.printer import to_string
        return to_string(self)

    def __repr__(self) -> str:
        if not self.alive:
            return f"<stale {type(self).__name__} #{self.index}>"
        return str(self)


class Pair(CellRef):
    """A cons cell: `first` and `rest`, each any value."""

    __slots__ = ()
    __match_args__ = ("first", "rest")

    KIND = TAG_PAIR

    @property
    def first(self) -> LispValue:
        return self.heap.get_first(self)

    @property
    def rest(self) -> LispValue:
        return self.heap.get_rest(self)

    def __iter__(self) -> Iterator[LispValue]:
        """Yield the elements along the spine; stops at the first non-Pair tail."""
        cur = self
        while isinstance(cur, Pair):
            yield cur.first
            cur = cur.rest


class Closure(CellRef):
    """A procedure value.

    Stored as (params . (body . env)): params is a proper list of symbols,
    body a proper list of forms, env the defining Environment.
    """

    __slots__ = ()

    KIND = TAG_CLOSURE

    @property
    def params(self) -> LispValue:
        return self.heap.get_first(self)

    @property
    def body(self) -> LispValue:
        return self.heap.get_rest(self).first

    @property
    def env(self):
        return self.heap.get_rest(self).rest


def list_items(value: LispValue, what: str) -> list[LispValue]:
    """Return the elements of a proper list, or raise CellispSyntaxError."""
    items: list[LispValue] = []
    cur = value
    while isinstance(cur, Pair):
        items.append(cur.first)
        cur = cur.rest
    if cur is not Nil:
        raise CellispSyntaxError(f"{what}: expected a proper list, got tail {cur}")
    return items
