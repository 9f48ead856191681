"""Test fixtures for the Fibonacci calculator."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

_ROOT_PATH = Path(__file__).resolve().parents[1]
if str(_ROOT_PATH) not in sys.path:
    sys.path.insert(0, str(_ROOT_PATH))

from fibcalc import IterativeFibonacciCalculator, MemoizedFibonacciCalculator  # noqa: E402


@pytest.fixture
def memoized() -> MemoizedFibonacciCalculator:
    return MemoizedFibonacciCalculator()


@pytest.fixture
def iterative() -> IterativeFibonacciCalculator:
    return IterativeFibonacciCalculator()


@pytest.fixture(params=["memoized", "iterative"])
def calculator(request, memoized, iterative):
    """Each contract test runs once per strategy."""
    return {"memoized": memoized, "iterative": iterative}[request.param]
