"""
Cache Analytics

In-memory counters updated by every facade operation.

Metrics Tracked:
- reads: successful lookups (a read_multi batch counts once)
- writes: successful stores
- deletes: successful deletes
- misses: lookups that found nothing, bypassed lookups included
- duration: seconds spent in backend round trips while benchmarking

Counters only ever grow. Python ints do not overflow, so they never wrap.
"""

import threading
from typing import Any

from nscache.core.config.constants import ANALYTICS_COUNTERS


class AnalyticsRecorder:
    """
    Thread-safe, increment-only operation counters.

    Usage:
        recorder = AnalyticsRecorder()
        recorder.record_read()
        recorder.get_stats()  # {"reads": 1, "writes": 0, "deletes": 0, "misses": 0}
    """

    def __init__(self):
        self._counters: dict[str, int] = dict.fromkeys(ANALYTICS_COUNTERS, 0)
        self._duration = 0.0
        self._lock = threading.Lock()

    def _increment(self, counter: str) -> None:
        with self._lock:
            self._counters[counter] += 1

    def record_read(self) -> None:
        self._increment("reads")

    def record_write(self) -> None:
        self._increment("writes")

    def record_delete(self) -> None:
        self._increment("deletes")

    def record_miss(self) -> None:
        self._increment("misses")

    def add_duration(self, seconds: float) -> None:
        """
        Accumulate backend round-trip time.

        Raises:
            ValueError: If seconds is negative
        """
        if seconds < 0:
            raise ValueError(f"Duration cannot be negative: {seconds}")
        with self._lock:
            self._duration += seconds

    def get_reads(self) -> int:
        return self._counters["reads"]

    def get_writes(self) -> int:
        return self._counters["writes"]

    def get_deletes(self) -> int:
        return self._counters["deletes"]

    def get_misses(self) -> int:
        return self._counters["misses"]

    def get_duration(self) -> float:
        return self._duration

    def get_stats(self) -> dict[str, int]:
        """Snapshot of all counters; mutating it does not affect the recorder."""
        with self._lock:
            return dict(self._counters)

    def hit_rate(self) -> float:
        """Share of lookups that were hits, rounded like the other cache stats."""
        stats = self.get_stats()
        total = stats["reads"] + stats["misses"]
        return round(stats["reads"] / total, 3) if total > 0 else 0.0

    def summary(self) -> dict[str, Any]:
        """Counters plus derived figures, for health checks and logs."""
        return {
            **self.get_stats(),
            "hit_rate": self.hit_rate(),
            "duration_seconds": round(self.get_duration(), 6),
        }
