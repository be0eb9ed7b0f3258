"""Line-oriented REPL for Cellisp.

One line is one cycle: read one expression, evaluate it against the session's
global environment, print the result, collect. Blank lines are skipped. A
failed cycle prints `error: <ErrorClass>: <message>` and the session carries on.
"""

from __future__ import annotations

import sys
from typing import Iterable, Optional, TextIO

from cellisp.config import get_log_level, get_recursion_limit
from cellisp.interpreter import Interpreter
from cellisp.observability import setup_logging
from cellisp.types.errors import CellispError

PROMPT = "> "


def format_error(exc: CellispError) -> str:
    return f"error: {type(exc).__name__}: {exc}"


def run(
    lines: Iterable[str],
    out: TextIO,
    interp: Optional[Interpreter] = None,
) -> Interpreter:
    """Feed each line through one cycle and write results or errors to `out`."""
    interp = interp if interp is not None else Interpreter()
    for line in lines:
        if not line.strip():
            continue
        try:
            out.write(interp.rep(line) + "\n")
        except CellispError as exc:
            out.write(format_error(exc) + "\n")
        out.flush()
    return interp


def _stdin_lines(prompt: str) -> Iterable[str]:
    while True:
        try:
            yield input(prompt)
        except EOFError:
            return


def main() -> int:
    setup_logging(get_log_level())
    limit = get_recursion_limit()
    if limit is not None:
        sys.setrecursionlimit(limit)
    interactive = sys.stdin.isatty()
    lines = _stdin_lines(PROMPT) if interactive else sys.stdin
    try:
        run(lines, sys.stdout)
    except KeyboardInterrupt:
        pass
    if interactive:
        sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
