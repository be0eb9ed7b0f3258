from cellisp import SExpression, LispValue, EvaluatorFn
from cellisp.types.cell import list_items
from cellisp.types.errors import CellispSyntaxError


def quote_form(operands: SExpression, env, evaluate_fn: EvaluatorFn) -> LispValue:
    tail = list_items(operands, "quote")
    if len(tail) != 1:
        raise CellispSyntaxError("Quote expects exactly 1 argument")
    return tail[0]
