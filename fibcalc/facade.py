from enum import Enum
from typing import Any, Dict, Union

from fibcalc.calculators import (
    FibonacciCalculator,
    IterativeFibonacciCalculator,
    MemoizedFibonacciCalculator,
)


class Strategy(Enum):
    MEMOIZED = "memoized"
    ITERATIVE = "iterative"


_CALCULATORS = {
    Strategy.MEMOIZED: MemoizedFibonacciCalculator,
    Strategy.ITERATIVE: IterativeFibonacciCalculator,
}


def create_calculator(strategy: Union[Strategy, str] = Strategy.MEMOIZED) -> FibonacciCalculator:
    """
    Build a fresh calculator for ``strategy``.

    Args:
        strategy: A :class:`Strategy` member or its value, in any case.

    Raises:
        ValueError: If the name does not match a known strategy.
    """
    if not isinstance(strategy, Strategy):
        try:
            strategy = Strategy(str(strategy).strip().lower())
        except ValueError:
            choices = ", ".join(s.value for s in Strategy)
            raise ValueError(f"Unknown strategy {strategy!r}, expected one of: {choices}") from None
    return _CALCULATORS[strategy]()


def summarize(calculator: FibonacciCalculator, limit: int) -> Dict[str, Any]:
    """Drain the sequence up to ``limit`` and report it with the engine's counters."""
    sequence = list(calculator.calculate_up_to(limit))
    return {
        "limit": limit,
        "sequence": sequence,
        "length": len(sequence),
        **calculator.metrics.snapshot(),
    }
