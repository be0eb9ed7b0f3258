from __future__ import annotations
import os
from typing import Optional


# Defaults
_DEFAULT_INITIAL_CELLS = 1024
_DEFAULT_MAX_CELLS = 1 << 22
_DEFAULT_LOG_LEVEL = "WARNING"


def int_from_env(var: str, default: Optional[int]) -> Optional[int]:
    raw = os.environ.get(var)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError:
        raise ValueError(f"{var} must be an integer, got {raw!r}") from None


def get_initial_cells() -> int:
    return int_from_env('CELLISP_INITIAL_CELLS', _DEFAULT_INITIAL_CELLS)


def get_max_cells() -> int:
    # Never below the initial size, so a small override of one alone is usable.
    return max(int_from_env('CELLISP_MAX_CELLS', _DEFAULT_MAX_CELLS), get_initial_cells())


def get_recursion_limit() -> Optional[int]:
    return int_from_env('CELLISP_RECURSION_LIMIT', None)


def get_log_level() -> str:
    return os.environ.get('CELLISP_LOG_LEVEL', _DEFAULT_LOG_LEVEL).strip().upper() or _DEFAULT_LOG_LEVEL
