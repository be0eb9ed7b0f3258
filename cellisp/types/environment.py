"""Runtime environment for Cellisp.

An Environment is a handle onto a FRAME cell in the heap. The frame's `first`
slot holds its bindings as an association list of (symbol . value) pairs; its
`rest` slot holds the enclosing frame, or Nil for the global frame. Keeping
frames in the heap lets the collector trace closures, frames and bound values
through one uniform cell graph, cycles included.
"""

from __future__ import annotations

from io import StringIO
from typing import Iterable, Iterator, Optional

from cellisp import LispValue
from cellisp.memory.tags import TAG_FRAME
from cellisp.types.cell import CellRef
from cellisp.types.errors import CellispArityError, CellispInvalidSymbol, CellispUnboundSymbol
from cellisp.types.nil import Nil
from cellisp.types.symbol import Symbol


class Environment(CellRef):
    """Chain of frames mapping Symbols to values, innermost first."""

    __slots__ = ()

    KIND = TAG_FRAME

    @property
    def outer(self) -> Optional[Environment]:
        parent = self.heap.get_rest(self)
        return None if parent is Nil else parent

    def frames(self) -> Iterator[Environment]:
        env: Optional[Environment] = self
        while env is not None:
            yield env
            env = env.outer

    def lookup(self, name: Symbol) -> LispValue:
        """Look up the value bound to `name`, innermost frame first.

        Raises CellispUnboundSymbol if no frame in the chain binds it.
        """
        for env in self.frames():
            binding = self.heap.find_binding(env, name)
            if binding is not None:
                return binding.rest
        raise CellispUnboundSymbol(f"Cannot lookup unbound symbol {name}")

    def define(self, name: Symbol, value: LispValue) -> None:
        """Bind `name` to `value` in this frame, overwriting an existing binding.

        Outer frames are never touched. The new binding cell is fully built
        before it is linked into the frame.
        """
        if not isinstance(name, Symbol):
            raise CellispInvalidSymbol(f"Cannot define {name} as a symbol")
        heap = self.heap
        binding = heap.find_binding(self, name)
        if binding is not None:
            heap.set_rest(binding, value)
            return
        binding = heap.cons(name, value)
        heap.set_first(self, heap.cons(binding, heap.get_first(self)))

    def update(self, mapping: dict[Symbol, LispValue]) -> None:
        """Bulk-define a mapping of Symbol -> value in the current frame."""
        for k, v in mapping.items():
            self.define(k, v)

    def extend(self, params: Iterable[Symbol], args: Iterable[LispValue]) -> Environment:
        """Push one new frame binding each parameter to its argument, in order."""
        params = list(params)
        args = list(args)
        if len(params) != len(args):
            raise CellispArityError(
                f"Expected {len(params)} argument(s), got {len(args)}"
            )
        frame = self.heap.make_frame(self)
        for param, arg in zip(params, args):
            frame.define(param, arg)
        return frame

    def bindings(self) -> dict[Symbol, LispValue]:
        """This frame's bindings (outer frames excluded)."""
        result: dict[Symbol, LispValue] = {}
        for binding in self.heap.get_first(self):
            result.setdefault(binding.first, binding.rest)
        return result

    def __str__(self) -> str:
        """Human-readable single-frame view with an indicator for parent."""
        with StringIO() as buffer:
            buffer.write("{")
            buffer.write(", ".join(f"{k}: {v!r}" for k, v in self.bindings().items()))
            buffer.write("}")
            if self.outer is not None:
                buffer.write(" -> ...")
            return buffer.getvalue()
