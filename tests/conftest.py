import pytest

from cellisp.interpreter import Interpreter
from cellisp.memory.heap import Heap

# This test configuration runs every test twice:
# 1) with the default arena size ["roomy"]
# 2) with an 8-cell arena that has to grow, and to reuse reclaimed cells,
#    to get anything done ["cramped"]
# Tests construct Heap() / Interpreter() without sizes, so an autouse fixture
# switches the default through CELLISP_INITIAL_CELLS.


@pytest.fixture(params=["roomy", "cramped"])
def heap_profile(request):
    return request.param


@pytest.fixture(autouse=True)
def _heap_sizing(heap_profile, monkeypatch):
    monkeypatch.delenv("CELLISP_MAX_CELLS", raising=False)
    if heap_profile == "cramped":
        monkeypatch.setenv("CELLISP_INITIAL_CELLS", "8")
    else:
        monkeypatch.delenv("CELLISP_INITIAL_CELLS", raising=False)


@pytest.fixture
def interp():
    """Fresh interpreter (heap + global environment with builtins)."""
    return Interpreter()


@pytest.fixture
def heap():
    return Heap()


@pytest.fixture
def env(interp):
    return interp.env
