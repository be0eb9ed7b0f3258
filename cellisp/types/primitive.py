"""Built-in procedure values.

A Primitive wraps a Python callable taking (env, args). Every Primitive gets a
stable numeric id at construction so a heap cell can refer to it by id alone.
Primitives, like symbols, are never collected.
"""

from __future__ import annotations

from typing import Callable

from cellisp import LispValue


class Primitive:
    __slots__ = ("name", "fn", "id")

    _by_id: list[Primitive] = []

    def __init__(self, name: str, fn: Callable[..., LispValue]):
        self.name = name
        self.fn = fn
        self.id = len(Primitive._by_id)
        Primitive._by_id.append(self)

    @classmethod
    def from_id(cls, primitive_id: int) -> Primitive:
        return cls._by_id[primitive_id]

    def __call__(self, env, args: list[LispValue]) -> LispValue:
        return self.fn(env, args)

    def __repr__(self) -> str:
        return f"#<procedure {self.name}>"
