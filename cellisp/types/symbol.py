from __future__ import annotations
import sys


class Symbol:
    """An interned, case-insensitive name.

    Symbol("FACT") and Symbol("fact") are the same object. Symbols live for the
    whole process and are never placed in (or reclaimed from) a Heap; cells
    refer to them by their numeric id.
    """

    __slots__ = ("id", "name")

    _table: dict[str, Symbol] = {}
    _by_id: list[Symbol] = []

    def __new__(cls, name: str) -> Symbol:
        canonical = name.lower()
        sym = cls._table.get(canonical)
        if sym is None:
            sym = object.__new__(cls)
            sym.name = sys.intern(canonical)
            sym.id = len(cls._by_id)
            cls._by_id.append(sym)
            cls._table[canonical] = sym
        return sym

    @classmethod
    def from_id(cls, symbol_id: int) -> Symbol:
        return cls._by_id[symbol_id]

    def __repr__(self):
        return f"Symbol({self.name!r})"

    def __str__(self):
        return self.name
