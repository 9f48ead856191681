from fibcalc.calculators import (
    FibonacciCalculator,
    InvalidArgumentError,
    IterativeFibonacciCalculator,
    MemoizedFibonacciCalculator,
    to_int64,
)
from fibcalc.facade import Strategy, create_calculator, summarize
from fibcalc.metrics import MetricsView, PerformanceMetrics, PerformanceTracker

__all__ = [
    "FibonacciCalculator",
    "InvalidArgumentError",
    "IterativeFibonacciCalculator",
    "MemoizedFibonacciCalculator",
    "MetricsView",
    "PerformanceMetrics",
    "PerformanceTracker",
    "Strategy",
    "create_calculator",
    "summarize",
    "to_int64",
]
