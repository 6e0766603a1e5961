"""Process-local dashboard cache counters."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from finboard.application.dtos.cache import CacheMetricsSnapshot
from finboard.shared.utils.datetime import utc_now


@dataclass
class CacheMetrics:
    """Monotonic hit/miss/error counters; reset only by reset()."""

    clock: Callable[[], datetime] = utc_now
    cache_hit: int = 0
    cache_miss: int = 0
    cache_error: int = 0
    last_reset: datetime = field(init=False)

    def __post_init__(self) -> None:
        self.last_reset = self.clock()

    def record_hit(self) -> None:
        self.cache_hit += 1

    def record_miss(self) -> None:
        self.cache_miss += 1

    def record_error(self) -> None:
        self.cache_error += 1

    def reset(self) -> None:
        """Zero all counters and stamp last_reset."""
        self.cache_hit = 0
        self.cache_miss = 0
        self.cache_error = 0
        self.last_reset = self.clock()

    def snapshot(self) -> CacheMetricsSnapshot:
        """Return counters plus total and hit_rate (percent, 2 decimals)."""
        total = self.cache_hit + self.cache_miss
        hit_rate = round(self.cache_hit / total * 100, 2) if total > 0 else 0.0
        return CacheMetricsSnapshot(
            cache_hit=self.cache_hit,
            cache_miss=self.cache_miss,
            cache_error=self.cache_error,
            last_reset=self.last_reset,
            total=total,
            hit_rate=hit_rate,
        )
