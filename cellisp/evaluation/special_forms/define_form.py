from cellisp import EvaluatorFn
from cellisp import SExpression, LispValue
from cellisp.types.cell import Pair, list_items
from cellisp.types.errors import CellispInvalidSymbol, CellispSyntaxError
from cellisp.types.environment import Environment
from cellisp.types.symbol import Symbol
from cellisp.evaluation.special_forms.lambda_form import make_closure


def define_form(operands: SExpression, env: Environment, evaluate_fn: EvaluatorFn) -> LispValue:
    """
    (define name value)
    (define (name params...) body...)   ; sugar for binding name to a lambda

    Binds in the innermost frame of `env` and returns the bound symbol.
    """
    if not isinstance(operands, Pair):
        raise CellispSyntaxError("define requires a name and a value")

    target = operands.first
    if isinstance(target, Pair):
        name = target.first
        if not isinstance(name, Symbol):
            raise CellispInvalidSymbol(f"Cannot define {name} as a symbol")
        value = make_closure(target.rest, operands.rest, env, f"define {name}")
        env.define(name, value)
        return name

    tail = list_items(operands, "define")
    if len(tail) != 2:
        raise CellispSyntaxError("define requires exactly 2 arguments")
    name, val_expr = tail
    if not isinstance(name, Symbol):
        raise CellispInvalidSymbol(f"Cannot define {name} as a symbol")
    value = evaluate_fn(val_expr, env)
    env.define(name, value)
    return name
