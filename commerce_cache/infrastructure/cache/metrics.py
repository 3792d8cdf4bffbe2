"""
Cache Metrics

Process-lifetime counters for the cache client. Only CacheClient mutates
them; everyone else reads immutable CacheMetrics snapshots.
"""

import threading
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class CacheMetrics:
    """
    Snapshot of cache counters.

    hit_rate is a percentage rounded to 2 decimals (0 when no requests).
    average_response_time is the mean latency of get() calls in milliseconds.
    """

    hits: int = 0
    misses: int = 0
    sets: int = 0
    deletes: int = 0
    errors: int = 0
    total_requests: int = 0
    total_response_time_ms: float = 0.0
    last_reset_time: datetime = field(default_factory=_utcnow)

    @property
    def hit_rate(self) -> float:
        if self.total_requests == 0:
            return 0.0
        return round(self.hits / self.total_requests * 100, 2)

    @property
    def average_response_time(self) -> float:
        if self.total_requests == 0:
            return 0.0
        return self.total_response_time_ms / self.total_requests

    def to_dict(self) -> dict[str, Any]:
        return {
            "hits": self.hits,
            "misses": self.misses,
            "sets": self.sets,
            "deletes": self.deletes,
            "errors": self.errors,
            "total_requests": self.total_requests,
            "hit_rate": self.hit_rate,
            "average_response_time": round(self.average_response_time, 3),
            "last_reset_time": self.last_reset_time.isoformat(),
        }


class MetricsRecorder:
    """
    Lock-guarded mutable counterpart of CacheMetrics.

    A threading.Lock keeps increments atomic even when one client is shared
    between the event loop and worker threads.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._metrics = CacheMetrics()

    def _bump(self, **deltas: float) -> None:
        with self._lock:
            current = self._metrics
            self._metrics = replace(
                current, **{name: getattr(current, name) + delta for name, delta in deltas.items()}
            )

    def record_hit(self, elapsed_ms: float) -> None:
        self._bump(hits=1, total_requests=1, total_response_time_ms=elapsed_ms)

    def record_miss(self, elapsed_ms: float) -> None:
        self._bump(misses=1, total_requests=1, total_response_time_ms=elapsed_ms)

    def record_failed_read(self, elapsed_ms: float) -> None:
        """A get() that errored counts as a miss and as an error."""
        self._bump(misses=1, errors=1, total_requests=1, total_response_time_ms=elapsed_ms)

    def record_set(self) -> None:
        self._bump(sets=1)

    def record_delete(self, count: int = 1) -> None:
        self._bump(deletes=count)

    def record_error(self) -> None:
        self._bump(errors=1)

    def snapshot(self) -> CacheMetrics:
        with self._lock:
            return self._metrics

    def reset(self) -> None:
        with self._lock:
            self._metrics = CacheMetrics()
