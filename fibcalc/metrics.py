import threading
from abc import ABC, abstractmethod
from typing import Dict, Union


class PerformanceTracker(ABC):
    """Read-only view of an engine's performance counters."""

    @property
    @abstractmethod
    def execution_time_ms(self) -> float: ...

    @property
    @abstractmethod
    def cache_hits(self) -> int: ...

    @property
    @abstractmethod
    def cache_misses(self) -> int: ...

    @abstractmethod
    def reset(self) -> None: ...

    def snapshot(self) -> Dict[str, Union[int, float]]:
        return {
            "execution_time_ms": self.execution_time_ms,
            "cache_hits": self.cache_hits,
            "cache_misses": self.cache_misses,
        }


class PerformanceMetrics(PerformanceTracker):
    """Counters owned by a single calculator.

    Only the owning calculator holds this object; everyone else sees it
    through a :class:`MetricsView`, which has no ``record_*`` methods.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._execution_time_ms = 0.0
        self._cache_hits = 0
        self._cache_misses = 0

    @property
    def execution_time_ms(self) -> float:
        return self._execution_time_ms

    @property
    def cache_hits(self) -> int:
        return self._cache_hits

    @property
    def cache_misses(self) -> int:
        return self._cache_misses

    def record_cache_hit(self, count: int = 1) -> None:
        with self._lock:
            self._cache_hits += count

    def record_cache_miss(self, count: int = 1) -> None:
        with self._lock:
            self._cache_misses += count

    def record_execution_time(self, ms: float) -> None:
        with self._lock:
            self._execution_time_ms = ms

    def reset(self) -> None:
        with self._lock:
            self._execution_time_ms = 0.0
            self._cache_hits = 0
            self._cache_misses = 0

    def __repr__(self) -> str:
        return (
            f"PerformanceMetrics(execution_time_ms={self._execution_time_ms}, "
            f"cache_hits={self._cache_hits}, cache_misses={self._cache_misses})"
        )


class MetricsView(PerformanceTracker):
    """Observe-and-reset wrapper handed out instead of the recording object."""

    def __init__(self, metrics: PerformanceMetrics) -> None:
        self._metrics = metrics

    @property
    def execution_time_ms(self) -> float:
        return self._metrics.execution_time_ms

    @property
    def cache_hits(self) -> int:
        return self._metrics.cache_hits

    @property
    def cache_misses(self) -> int:
        return self._metrics.cache_misses

    def reset(self) -> None:
        self._metrics.reset()

    def __repr__(self) -> str:
        return f"MetricsView({self._metrics!r})"
