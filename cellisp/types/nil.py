from __future__ import annotations


class NilType:
    """The empty list. There is exactly one instance, `Nil`."""

    _instance: NilType | None = None

    def __new__(cls) -> NilType:
        if cls._instance is None:
            cls._instance = object.__new__(cls)
        return cls._instance

    def __repr__(self): return "()"
    def __str__(self): return "()"

    def __iter__(self):
        return iter(())

    def __len__(self):
        return 0


Nil = NilType()
