"""Core evaluator for the Cellisp interpreter.

Dispatches on the shape of the expression: self-evaluating atoms, symbol
lookup, special forms, and application. There is no tail-call elimination:
every application nests ordinary Python calls, so very deep recursion ends in
RecursionError, which the interpreter reports as CellispResourceExhausted.
"""

from __future__ import annotations

from cellisp import SExpression, LispValue
from cellisp.types.cell import Closure, Pair, list_items
from cellisp.types.environment import Environment
from cellisp.types.errors import CellispTypeError
from cellisp.types.nil import NilType
from cellisp.types.primitive import Primitive
from cellisp.types.symbol import Symbol
from cellisp.evaluation.apply import apply
from cellisp.evaluation.special_forms import SPECIAL_FORMS


def evaluate(expr: SExpression, env: Environment) -> LispValue:
    match expr:
        case bool() | int() | NilType():
            return expr

        case Symbol():
            return env.lookup(expr)

        case Pair(head, operands):
            if isinstance(head, Symbol):
                special_form = SPECIAL_FORMS.get(head)
                if special_form is not None:
                    return special_form(operands, env, evaluate)
            fn = evaluate(head, env)
            args = [evaluate(arg, env) for arg in list_items(operands, "application")]
            return apply(fn, args, env, evaluate)

        # Procedure values only appear in code built from Python, never in read code.
        case Closure() | Primitive():
            return expr

    raise CellispTypeError(f"Cannot evaluate {expr!r}")
