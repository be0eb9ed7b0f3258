from __future__ import annotations

import logging
from typing import Optional

from cellisp import SExpression, LispValue
from cellisp.builtin.env_builtin import register
from cellisp.evaluation.evaluator import evaluate
from cellisp.memory.heap import Heap
from cellisp.printer import to_string
from cellisp.reader.parser import parse, lex, TokenStream
from cellisp.types.environment import Environment
from cellisp.types.errors import CellispResourceExhausted

logger = logging.getLogger(__name__)


class Interpreter:
    """
    Runs read / eval / collect cycles against one Heap and one global
    Environment, both of which persist across cycles.

    A cycle never collects while evaluating. Once the result is in hand, the
    heap is collected with the global environment and that result as roots.
    The result therefore stays valid until the next cycle begins; whatever
    the caller still needs from it must be printed or copied out by then.
    """

    def __init__(
        self,
        prelude: str | None = None,
        *,
        initial_cells: Optional[int] = None,
        max_cells: Optional[int] = None,
    ):
        self.heap = Heap(initial_cells=initial_cells, max_cells=max_cells)
        self.env: Environment = self.heap.make_frame()
        register(self.env)
        self.collect()

        if prelude:
            self.eval_prelude(prelude)

    def read(self, code: str) -> SExpression:
        try:
            return parse(code, self.heap)
        except RecursionError as exc:
            raise CellispResourceExhausted("Expression nested too deeply to read") from exc

    def collect(self, *extra_roots: LispValue) -> int:
        """Collect everything unreachable from the global environment and `extra_roots`."""
        return self.heap.collect((self.env, *extra_roots))

    def eval_expr(self, expr: SExpression) -> LispValue:
        """One cycle for an already-read expression: evaluate, then collect."""
        try:
            result = evaluate(expr, self.env)
        except RecursionError as exc:
            self._abort(exc)
            raise CellispResourceExhausted("Maximum recursion depth exceeded") from exc
        except Exception as exc:
            self._abort(exc)
            raise
        self.collect(result)
        return result

    def _abort(self, exc: Exception) -> None:
        # The aborted evaluation's cells are garbage now; only the globals survive.
        logger.debug("evaluation aborted: %s: %s", type(exc).__name__, exc)
        self.collect()

    def eval(self, code: str) -> LispValue:
        """Read exactly one expression from `code` and run one cycle on it."""
        return self.eval_expr(self.read(code))

    def eval_prelude(self, code: str) -> None:
        """Evaluate every expression in `code`, one cycle each, discarding results."""
        stream = TokenStream(lex(code), self.heap)
        while (expr := stream.parse_expr()) is not None:
            self.eval_expr(expr)

    def rep(self, code: str) -> str:
        """Read, evaluate and print one expression."""
        return to_string(self.eval(code))
