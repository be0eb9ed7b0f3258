# Core type aliases for Cellisp's data model.
# Code and data share one representation: values read from text are cells in
# a Heap (see cellisp.memory.heap), plus unboxed atoms (int, bool, Symbol, Nil).
#
# Naming guidance:
# - SExpression: Use in reader/special-form code to denote syntactic forms (code-as-data).
# - LispValue:  Use in evaluator/runtime code to denote evaluated values.
# Both aliases resolve to `Any` and are interchangeable.

from typing import Any, Callable

# Runtime value alias
LispValue = Any
# Forms alias (used interchangeably with LispValue)
SExpression = LispValue

# Evaluator function type: passed into special forms and apply
EvaluatorFn = Callable[..., LispValue]
