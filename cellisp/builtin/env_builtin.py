"""Built-in procedures for the Cellisp runtime environment.

This module defines integer arithmetic, comparison, list construction and
access, and the predicates exposed to Lisp code. Each builtin takes
(env, args): the caller's Environment (whose heap is used for allocation) and
the already-evaluated argument list.
"""
from __future__ import annotations

from cellisp import LispValue
from cellisp.memory.tags import INT64_MAX, INT64_MIN
from cellisp.types.cell import Pair
from cellisp.types.environment import Environment
from cellisp.types.errors import (
    CellispArityError,
    CellispDivisionByZero,
    CellispIntegerOverflow,
    CellispTypeError,
)
from cellisp.types.nil import Nil
from cellisp.types.primitive import Primitive
from cellisp.types.symbol import Symbol


def _check_arity(name: str, args: list[LispValue], expected: int) -> None:
    if len(args) != expected:
        raise CellispArityError(f"{name} requires exactly {expected} argument(s), got {len(args)}")


def _integers(name: str, args: list[LispValue]) -> list[int]:
    for x in args:
        # bool is an int subclass in Python; #t/#f are not numbers here.
        if isinstance(x, bool) or not isinstance(x, int):
            raise CellispTypeError(f"All arguments to {name} must be integers, got {x!r}")
    return args


def _int64(name: str, value: int) -> int:
    if not INT64_MIN <= value <= INT64_MAX:
        raise CellispIntegerOverflow(f"Result of {name} does not fit in 64 bits")
    return value


def is_equal(a: LispValue, b: LispValue) -> bool:
    """Structural equality: atoms by value and type, pairs element-wise."""
    while isinstance(a, Pair) and isinstance(b, Pair):
        if not is_equal(a.first, b.first):
            return False
        a, b = a.rest, b.rest
    if isinstance(a, Pair) or isinstance(b, Pair):
        return False
    return type(a) is type(b) and a == b


# -------------------------------
# Arithmetic
# -------------------------------
def _fold(name: str, args: list[LispValue], step) -> int:
    """Left-to-right fold over at least one integer operand."""
    if not args:
        raise CellispArityError(f"{name} requires at least 1 argument")
    numbers = _integers(name, args)
    result = numbers[0]
    for x in numbers[1:]:
        result = _int64(name, step(result, x))
    return result


def add(env: Environment, args: list[LispValue]) -> int:
    """Sum of all arguments."""
    return _fold("+", args, lambda a, b: a + b)


def sub(env: Environment, args: list[LispValue]) -> int:
    """Subtract all subsequent arguments from the first."""
    return _fold("-", args, lambda a, b: a - b)


def mul(env: Environment, args: list[LispValue]) -> int:
    """Product of all arguments."""
    return _fold("*", args, lambda a, b: a * b)


def _truncating_div(a: int, b: int) -> int:
    if b == 0:
        raise CellispDivisionByZero("Division by zero")
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


def div(env: Environment, args: list[LispValue]) -> int:
    """Integer division left-to-right, truncating toward zero."""
    return _fold("/", args, _truncating_div)


# -------------------------------
# Comparison (binary only)
# -------------------------------
def _comparison(name: str, op):
    def compare(env: Environment, args: list[LispValue]) -> bool:
        _check_arity(name, args, 2)
        a, b = _integers(name, args)
        return op(a, b)
    compare.__name__ = f"compare_{name}"
    compare.__doc__ = f"({name} a b) on two integers."
    return compare


num_eq = _comparison("=", lambda a, b: a == b)
lt = _comparison("<", lambda a, b: a < b)
lte = _comparison("<=", lambda a, b: a <= b)
gt = _comparison(">", lambda a, b: a > b)
gte = _comparison(">=", lambda a, b: a >= b)


# -------------------------------
# Lists
# -------------------------------
def cons(env: Environment, args: list[LispValue]) -> Pair:
    _check_arity("cons", args, 2)
    return env.heap.cons(args[0], args[1])


def first(env: Environment, args: list[LispValue]) -> LispValue:
    _check_arity("first", args, 1)
    if not isinstance(args[0], Pair):
        raise CellispTypeError(f"first expects a pair, got {args[0]!r}")
    return args[0].first


def rest(env: Environment, args: list[LispValue]) -> LispValue:
    _check_arity("rest", args, 1)
    if not isinstance(args[0], Pair):
        raise CellispTypeError(f"rest expects a pair, got {args[0]!r}")
    return args[0].rest


def list_builtin(env: Environment, args: list[LispValue]) -> LispValue:
    """Return a fresh proper list of the arguments."""
    return env.heap.make_list(args)


def null(env: Environment, args: list[LispValue]) -> bool:
    _check_arity("null?", args, 1)
    return args[0] is Nil


def is_pair(env: Environment, args: list[LispValue]) -> bool:
    _check_arity("pair?", args, 1)
    return isinstance(args[0], Pair)


def eq(env: Environment, args: list[LispValue]) -> bool:
    """Identity for pairs and procedures, value equality for atoms."""
    _check_arity("eq?", args, 2)
    a, b = args
    return type(a) is type(b) and a == b


def equal(env: Environment, args: list[LispValue]) -> bool:
    """Structural comparison: lists with equal elements are equal."""
    _check_arity("equal?", args, 2)
    return is_equal(args[0], args[1])


PRIMITIVES: dict[str, Primitive] = {
    name: Primitive(name, fn)
    for name, fn in (
        ("+", add),
        ("-", sub),
        ("*", mul),
        ("/", div),
        ("=", num_eq),
        ("<", lt),
        ("<=", lte),
        (">", gt),
        (">=", gte),
        ("cons", cons),
        ("first", first),
        ("rest", rest),
        ("list", list_builtin),
        ("null?", null),
        ("pair?", is_pair),
        ("eq?", eq),
        ("equal?", equal),
    )
}

ALIASES = {
    "car": "first",  # alias for first
    "cdr": "rest",  # alias for rest
}


def register(env: Environment) -> None:
    """Bind all builtin procedures into the given environment's current frame."""
    env.update({Symbol(name): prim for name, prim in PRIMITIVES.items()})
    env.update({Symbol(alias): PRIMITIVES[name] for alias, name in ALIASES.items()})
