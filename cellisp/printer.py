"""Render Cellisp values as text.

The output re-reads to a structurally equal value for everything except
procedures, which print as opaque labels.
"""

from __future__ import annotations

from io import StringIO

from cellisp import LispValue
from cellisp.types.cell import Closure, Pair
from cellisp.types.environment import Environment
from cellisp.types.nil import NilType
from cellisp.types.primitive import Primitive
from cellisp.types.symbol import Symbol


def _write(value: LispValue, buffer: StringIO) -> None:
    match value:
        case bool():
            buffer.write("#t" if value else "#f")
        case int():
            buffer.write(str(value))
        case NilType():
            buffer.write("()")
        case Symbol():
            buffer.write(value.name)
        case Pair():
            buffer.write("(")
            _write(value.first, buffer)
            tail = value.rest
            # Walk the spine iteratively; only nesting recurses.
            while isinstance(tail, Pair):
                buffer.write(" ")
                _write(tail.first, buffer)
                tail = tail.rest
            if not isinstance(tail, NilType):
                buffer.write(" . ")
                _write(tail, buffer)
            buffer.write(")")
        case Closure():
            buffer.write("#<procedure>")
        case Primitive():
            buffer.write(f"#<procedure {value.name}>")
        case Environment():
            buffer.write("#<environment>")
        case _:
            buffer.write(repr(value))


def to_string(value: LispValue) -> str:
    with StringIO() as buffer:
        _write(value, buffer)
        return buffer.getvalue()
