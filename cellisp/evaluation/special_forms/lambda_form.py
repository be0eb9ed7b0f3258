from cellisp import EvaluatorFn
from cellisp import SExpression, LispValue
from cellisp.types.cell import Closure, Pair, list_items
from cellisp.types.environment import Environment
from cellisp.types.errors import CellispSyntaxError
from cellisp.types.nil import Nil
from cellisp.types.symbol import Symbol


def check_params(params: SExpression, what: str) -> None:
    """Parameters must be a proper list of distinct symbols (no variadic tail)."""
    names = []
    cur = params
    while isinstance(cur, Pair):
        names.append(cur.first)
        cur = cur.rest
    if cur is not Nil:
        raise CellispSyntaxError(
            f"{what}: parameter list must be a proper list (variadic {cur} is not supported)"
        )
    seen: set[Symbol] = set()
    for name in names:
        if not isinstance(name, Symbol):
            raise CellispSyntaxError(f"{what}: parameter {name} is not a symbol")
        if name in seen:
            raise CellispSyntaxError(f"{what}: duplicate parameter {name}")
        seen.add(name)


def make_closure(params: SExpression, body: SExpression, env: Environment, what: str) -> Closure:
    check_params(params, what)
    if not list_items(body, f"{what} body"):
        raise CellispSyntaxError(f"{what} requires at least one body expression")
    return env.heap.make_closure(params, body, env)


def lambda_form(operands: SExpression, env: Environment, evaluate_fn: EvaluatorFn) -> LispValue:
    """(lambda (params...) body...)

    The closure shares the parameter list and body cells of the source form and
    captures `env`, the environment the lambda is evaluated in.
    """
    if not isinstance(operands, Pair):
        raise CellispSyntaxError("lambda requires a parameter list and a body")
    return make_closure(operands.first, operands.rest, env, "lambda")
