"""Cell store for Cellisp.

The heap is an arena of fixed-shape cells kept as parallel numpy arrays
(structure-of-arrays): a kind byte, an allocation stamp, and two tagged words
per cell. A tagged word is an int8 tag plus an int64 payload:

    - nil       -> (TAG_NIL, 0)
    - integers  -> (TAG_INTEGER, value)      unboxed, 64-bit signed
    - booleans  -> (TAG_BOOLEAN, 0 | 1)
    - symbols   -> (TAG_SYMBOL, symbol id)   interned for the process lifetime
    - primitive -> (TAG_PRIMITIVE, primitive id)
    - pair / closure / frame -> (TAG_*, cell index)

Cells are addressed by index, so cyclic structure (a closure stored in the
frame it captured) is just indices pointing at each other. Reclamation is done
by cellisp.memory.collector, only between top-level evaluations.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

import numpy as np

from cellisp import LispValue
from cellisp.config import get_initial_cells, get_max_cells
from cellisp.memory.tags import (
    INT64_MAX,
    INT64_MIN,
    KIND_FREE,
    TAG_BOOLEAN,
    TAG_CLOSURE,
    TAG_FRAME,
    TAG_INTEGER,
    TAG_NIL,
    TAG_PAIR,
    TAG_PRIMITIVE,
    TAG_SYMBOL,
)
from cellisp.types.cell import CellRef, Closure, Pair
from cellisp.types.environment import Environment
from cellisp.types.errors import (
    CellispHeapError,
    CellispIntegerOverflow,
    CellispResourceExhausted,
    CellispTypeError,
)
from cellisp.types.nil import Nil, NilType
from cellisp.types.primitive import Primitive
from cellisp.types.symbol import Symbol

logger = logging.getLogger(__name__)

_HANDLES: dict[int, type[CellRef]] = {
    TAG_PAIR: Pair,
    TAG_CLOSURE: Closure,
    TAG_FRAME: Environment,
}


def _grown(arr: np.ndarray, new_size: int) -> np.ndarray:
    return np.concatenate((arr, np.zeros(new_size - len(arr), dtype=arr.dtype)))


class Heap:
    """Arena of cons, closure and frame cells with a free list."""

    def __init__(self, initial_cells: Optional[int] = None, max_cells: Optional[int] = None):
        n = initial_cells if initial_cells is not None else get_initial_cells()
        self.max_cells: int = max_cells if max_cells is not None else max(get_max_cells(), n)
        if n < 1:
            raise ValueError("initial_cells must be at least 1")
        if self.max_cells < n:
            raise ValueError("max_cells must not be smaller than initial_cells")

        self.kind = np.zeros(n, dtype=np.int8)
        self.stamp = np.zeros(n, dtype=np.int64)
        self.first_tag = np.zeros(n, dtype=np.int8)
        self.first_data = np.zeros(n, dtype=np.int64)
        self.rest_tag = np.zeros(n, dtype=np.int8)
        self.rest_data = np.zeros(n, dtype=np.int64)

        # Popped from the end, so low indices are handed out first.
        self.free: list[int] = list(range(n - 1, -1, -1))
        self._next_stamp = 1

        self.allocations = 0
        self.collections = 0
        self.reclaimed_total = 0
        self.reclaimed_last = 0

    # --- Introspection ---
    @property
    def capacity(self) -> int:
        return len(self.kind)

    @property
    def live_cells(self) -> int:
        return int(np.count_nonzero(self.kind))

    def stats(self) -> dict[str, int]:
        return {
            "capacity": self.capacity,
            "live": self.live_cells,
            "free": len(self.free),
            "allocations": self.allocations,
            "collections": self.collections,
            "reclaimed_total": self.reclaimed_total,
            "reclaimed_last": self.reclaimed_last,
        }

    def is_live(self, ref: CellRef) -> bool:
        i = ref.index
        return (
            ref.heap is self
            and 0 <= i < self.capacity
            and self.kind[i] == ref.KIND
            and self.stamp[i] == ref.stamp
        )

    # --- Word encoding ---
    def encode(self, value: LispValue) -> tuple[int, int]:
        match value:
            case bool():
                return TAG_BOOLEAN, int(value)
            case int():
                if not INT64_MIN <= value <= INT64_MAX:
                    raise CellispIntegerOverflow(f"Integer {value} does not fit in 64 bits")
                return TAG_INTEGER, value
            case NilType():
                return TAG_NIL, 0
            case Symbol():
                return TAG_SYMBOL, value.id
            case Primitive():
                return TAG_PRIMITIVE, value.id
            case CellRef():
                self._check(value)
                return value.KIND, value.index
        raise CellispTypeError(f"Cannot store {value!r} in a heap cell")

    def decode(self, tag: int, data: int) -> LispValue:
        if tag == TAG_INTEGER:
            return int(data)
        if tag == TAG_NIL:
            return Nil
        if tag == TAG_SYMBOL:
            return Symbol.from_id(int(data))
        if tag == TAG_BOOLEAN:
            return bool(data)
        if tag == TAG_PRIMITIVE:
            return Primitive.from_id(int(data))
        index = int(data)
        return _HANDLES[int(tag)](self, index, int(self.stamp[index]))

    def _check(self, ref: CellRef) -> None:
        if not self.is_live(ref):
            if ref.heap is not self:
                raise CellispHeapError(f"{type(ref).__name__} #{ref.index} belongs to another heap")
            raise CellispHeapError(
                f"Stale reference to reclaimed {type(ref).__name__} #{ref.index}"
            )

    # --- Allocation ---
    def _grow(self) -> None:
        old = self.capacity
        if old >= self.max_cells:
            raise CellispResourceExhausted(f"Heap exhausted: {old} cells in use (limit {self.max_cells})")
        new = min(old * 2, self.max_cells)
        try:
            self.kind = _grown(self.kind, new)
            self.stamp = _grown(self.stamp, new)
            self.first_tag = _grown(self.first_tag, new)
            self.first_data = _grown(self.first_data, new)
            self.rest_tag = _grown(self.rest_tag, new)
            self.rest_data = _grown(self.rest_data, new)
        except MemoryError as exc:
            raise CellispResourceExhausted(f"Heap could not grow beyond {old} cells") from exc
        self.free.extend(range(new - 1, old - 1, -1))
        logger.debug("heap grown from %d to %d cells", old, new)

    def allocate(self, kind: int, first: LispValue, rest: LispValue) -> int:
        """Claim a cell, fill both words, then mark it as `kind`.

        Both words are encoded before a slot is claimed, so a bad value never
        leaves a half-written cell behind.
        """
        first_tag, first_data = self.encode(first)
        rest_tag, rest_data = self.encode(rest)
        if not self.free:
            self._grow()
        i = self.free.pop()
        self.first_tag[i] = first_tag
        self.first_data[i] = first_data
        self.rest_tag[i] = rest_tag
        self.rest_data[i] = rest_data
        self.stamp[i] = self._next_stamp
        self._next_stamp += 1
        self.kind[i] = kind
        self.allocations += 1
        return i

    def _handle(self, cls: type[CellRef], index: int) -> CellRef:
        return cls(self, index, int(self.stamp[index]))

    def cons(self, first: LispValue, rest: LispValue) -> Pair:
        return self._handle(Pair, self.allocate(TAG_PAIR, first, rest))

    def make_list(self, items: Iterable[LispValue], tail: LispValue = Nil) -> LispValue:
        """Build a right-nested Pair chain ending in `tail` (Nil for a proper list)."""
        result = tail
        for item in reversed(list(items)):
            result = self.cons(item, result)
        return result

    def make_closure(self, params: LispValue, body: LispValue, env: Environment) -> Closure:
        helper = self.cons(body, env)
        return self._handle(Closure, self.allocate(TAG_CLOSURE, params, helper))

    def make_frame(self, outer: Optional[Environment] = None) -> Environment:
        parent = Nil if outer is None else outer
        return self._handle(Environment, self.allocate(TAG_FRAME, Nil, parent))

    # --- Slot access ---
    def get_first(self, ref: CellRef) -> LispValue:
        self._check(ref)
        i = ref.index
        return self.decode(self.first_tag[i], self.first_data[i])

    def get_rest(self, ref: CellRef) -> LispValue:
        self._check(ref)
        i = ref.index
        return self.decode(self.rest_tag[i], self.rest_data[i])

    def set_first(self, ref: CellRef, value: LispValue) -> None:
        tag, data = self.encode(value)
        self._check(ref)
        self.first_tag[ref.index] = tag
        self.first_data[ref.index] = data

    def set_rest(self, ref: CellRef, value: LispValue) -> None:
        tag, data = self.encode(value)
        self._check(ref)
        self.rest_tag[ref.index] = tag
        self.rest_data[ref.index] = data

    def find_binding(self, frame: Environment, symbol: Symbol) -> Optional[Pair]:
        """Return the (symbol . value) pair for `symbol` in this one frame, if any."""
        self._check(frame)
        sid = symbol.id
        tag = self.first_tag[frame.index]
        node = int(self.first_data[frame.index])
        while tag == TAG_PAIR:
            b = int(self.first_data[node])
            if self.first_tag[b] == TAG_SYMBOL and self.first_data[b] == sid:
                return self._handle(Pair, b)
            tag = self.rest_tag[node]
            node = int(self.rest_data[node])
        return None

    # --- Reclamation ---
    def release(self, indices: np.ndarray) -> None:
        """Return cells to the free list. Only the collector calls this."""
        self.kind[indices] = KIND_FREE
        self.first_tag[indices] = TAG_NIL
        self.first_data[indices] = 0
        self.rest_tag[indices] = TAG_NIL
        self.rest_data[indices] = 0
        # Rebuild from the kind array so no slot is ever lost or listed twice.
        self.free = np.flatnonzero(self.kind == KIND_FREE)[::-1].tolist()

    def collect(self, roots: Iterable[LispValue]) -> int:
        from cellisp.memory.collector import collect
        return collect(self, roots)

    def __repr__(self) -> str:
        return f"<Heap {self.live_cells}/{self.capacity} cells>"
