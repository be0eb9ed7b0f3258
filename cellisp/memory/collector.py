"""Mark and sweep collector.

Only safe at a quiescent point: between top-level evaluations, when every live
value is reachable from the roots the driver passes in (the global environment
and any result it still has to print). Values held in Python locals of an
in-progress evaluation are invisible here, which is why the interpreter never
collects mid-evaluation.
"""

from __future__ import annotations

import logging
from typing import Iterable

import numpy as np

from cellisp import LispValue
from cellisp.memory.tags import KIND_FREE, REFERENCE_TAGS
from cellisp.types.cell import CellRef

logger = logging.getLogger(__name__)


def mark(heap, roots: Iterable[LispValue]) -> np.ndarray:
    """Return a boolean array with True for every cell reachable from `roots`.

    Uses an explicit stack; a cell already marked is skipped, so cycles
    (closure -> frame -> binding -> closure) terminate.
    """
    marks = np.zeros(heap.capacity, dtype=bool)
    stack: list[int] = []
    for root in roots:
        if isinstance(root, CellRef):
            heap._check(root)
            stack.append(root.index)

    first_tag, first_data = heap.first_tag, heap.first_data
    rest_tag, rest_data = heap.rest_tag, heap.rest_data
    while stack:
        i = stack.pop()
        if marks[i]:
            continue
        marks[i] = True
        if first_tag[i] in REFERENCE_TAGS:
            j = int(first_data[i])
            if not marks[j]:
                stack.append(j)
        if rest_tag[i] in REFERENCE_TAGS:
            j = int(rest_data[i])
            if not marks[j]:
                stack.append(j)
    return marks


def sweep(heap, marks: np.ndarray) -> int:
    """Release every allocated cell that is not marked; return how many."""
    dead = np.flatnonzero((heap.kind != KIND_FREE) & ~marks)
    heap.release(dead)
    return len(dead)


def collect(heap, roots: Iterable[LispValue]) -> int:
    """Run one full, non-incremental collection and return the number of cells freed."""
    marks = mark(heap, roots)
    freed = sweep(heap, marks)
    heap.collections += 1
    heap.reclaimed_last = freed
    heap.reclaimed_total += freed
    logger.debug(
        "collection %d: reclaimed %d cells, %d live of %d",
        heap.collections, freed, heap.live_cells, heap.capacity,
    )
    return freed
