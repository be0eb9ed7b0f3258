from cellisp import EvaluatorFn
from cellisp import SExpression, LispValue
from cellisp.types.cell import list_items
from cellisp.types.errors import CellispSyntaxError
from cellisp.types.environment import Environment


def if_form(operands: SExpression, env: Environment, evaluate_fn: EvaluatorFn) -> LispValue:
    """(if test then else)

    Only #f is false. Exactly one branch is evaluated. The else branch is
    mandatory: a two-armed if has no value to return when the test fails.
    """
    tail = list_items(operands, "if")
    if len(tail) != 3:
        raise CellispSyntaxError("if requires a condition, a then-expression and an else-expression")

    test, consequent, alternative = tail
    if evaluate_fn(test, env) is False:
        return evaluate_fn(alternative, env)
    return evaluate_fn(consequent, env)
