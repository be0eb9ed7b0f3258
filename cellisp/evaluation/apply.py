"""Application engine for Cellisp.

Primitives receive the caller's environment and the evaluated argument list.
Closures get one new frame on top of the environment they captured (never the
caller's), and their body forms are evaluated in order in that frame.
"""

from cellisp import LispValue, EvaluatorFn
from cellisp.types.cell import Closure
from cellisp.types.environment import Environment
from cellisp.types.errors import CellispNotApplicable
from cellisp.types.primitive import Primitive


def evaluate_body(body: LispValue, env: Environment, evaluate_fn: EvaluatorFn) -> LispValue:
    """Evaluate each form of a non-empty body list; return the last value."""
    result = None
    for form in body:
        result = evaluate_fn(form, env)
    return result


def apply_closure(fn: Closure, args: list[LispValue], evaluate_fn: EvaluatorFn) -> LispValue:
    new_env = fn.env.extend(fn.params, args)
    return evaluate_body(fn.body, new_env, evaluate_fn)


def apply(
    fn: LispValue,
    args: list[LispValue],
    env: Environment,
    evaluate_fn: EvaluatorFn,
) -> LispValue:
    """Apply either a Closure or a Primitive; anything else is not applicable."""
    match fn:
        case Primitive():
            return fn(env, args)
        case Closure():
            return apply_closure(fn, args, evaluate_fn)
    raise CellispNotApplicable(f"Cannot apply non-procedure {fn!r}")
