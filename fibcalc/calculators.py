"""
Fibonacci calculation engines.

Two interchangeable strategies share the :class:`FibonacciCalculator`
contract: a memoized one that keeps every computed term, and an iterative one
that keeps nothing but two rolling accumulators. Values are signed 64-bit
integers; F(92) is the last term that fits and F(93) wraps around silently.
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Dict, Iterator

from fibcalc.metrics import MetricsView, PerformanceMetrics, PerformanceTracker

logger = logging.getLogger(__name__)

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1
_INT64_SPAN = 2 ** 64


class InvalidArgumentError(ValueError):
    """Raised when an index or limit is out of range."""


def to_int64(value: int) -> int:
    """Reduce ``value`` into the signed 64-bit range, two's-complement style."""
    return (value - INT64_MIN) % _INT64_SPAN + INT64_MIN


def _check_non_negative(value: int, name: str) -> None:
    if value < 0:
        raise InvalidArgumentError(f"{name} cannot be negative, got {value}")


class FibonacciCalculator(ABC):
    def __init__(self) -> None:
        self._metrics = PerformanceMetrics()
        self._metrics_view = MetricsView(self._metrics)

    @property
    def metrics(self) -> PerformanceTracker:
        return self._metrics_view

    def calculate_up_to(self, limit: int) -> Iterator[int]:
        """
        Lazily yield F(0), F(1), ... while each term is <= ``limit``.

        The limit is validated here rather than inside the generator so a
        negative value fails at call time. The iterator stops before the first
        term that would wrap past the 64-bit range.

        Raises:
            InvalidArgumentError: If ``limit`` is negative.
        """
        _check_non_negative(limit, "Limit")
        return self._generate(limit)

    def _generate(self, limit: int) -> Iterator[int]:
        start = time.perf_counter()

        current, following = 0, 1
        while True:
            yield current
            if following > limit or following < current:
                break
            current, following = following, to_int64(current + following)

        # Only reached when the consumer drains the iterator.
        elapsed_ms = (time.perf_counter() - start) * 1000
        self._metrics.record_execution_time(elapsed_ms)
        logger.debug(f"Generated sequence up to {limit} in {elapsed_ms:.3f}ms")

    @abstractmethod
    def get_fibonacci(self, n: int) -> int:
        """Return F(n). Raises InvalidArgumentError if ``n`` is negative."""

    @abstractmethod
    def clear_cache(self) -> None: ...


class MemoizedFibonacciCalculator(FibonacciCalculator):
    """
    Cache-backed calculator.

    Hits and misses are counted as the textbook recursive memoized algorithm
    would count them, but the cache is filled bottom-up so large indices do
    not hit the interpreter's recursion limit.
    """

    def __init__(self) -> None:
        super().__init__()
        self._cache: Dict[int, int] = {}
        self._seed()

    def _seed(self) -> None:
        self._cache[0] = 0
        self._cache[1] = 1
        # The cache always holds every index from 0 up to here.
        self._highest = 1

    def get_fibonacci(self, n: int) -> int:
        _check_non_negative(n, "Fibonacci index")

        cached = self._cache.get(n)
        if cached is not None:
            self._metrics.record_cache_hit()
            return cached

        top = self._highest
        # One miss per frame from n down to top + 1. The deepest frame finds
        # both of its operands cached; every frame above it finds n - 2 cached.
        self._metrics.record_cache_miss(n - top)
        self._metrics.record_cache_hit(n - top + 1)

        cache = self._cache
        for i in range(top + 1, n + 1):
            cache[i] = to_int64(cache[i - 1] + cache[i - 2])
        self._highest = n
        return cache[n]

    def clear_cache(self) -> None:
        self._cache.clear()
        self._seed()
        self._metrics.reset()
        logger.debug("Memoized cache cleared and reseeded")

    @property
    def cache_size(self) -> int:
        return len(self._cache)


class IterativeFibonacciCalculator(FibonacciCalculator):
    """Constant-space calculator with no cache."""

    def get_fibonacci(self, n: int) -> int:
        _check_non_negative(n, "Fibonacci index")
        if n < 2:
            return n

        prev, current = 0, 1
        for _ in range(2, n + 1):
            prev, current = current, to_int64(prev + current)
        return current

    def clear_cache(self) -> None:
        self._metrics.reset()
