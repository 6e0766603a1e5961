"""DTOs for the persisted dashboard cache and its metrics."""

from dataclasses import dataclass
from datetime import datetime

from finboard.domain.enums import Currency


@dataclass(frozen=True)
class CacheEntryMetadata:
    """Columns stored next to a payload; used by scoped invalidation."""

    month_key: str
    account_id: str | None = None
    preferred_currency: Currency | None = None


@dataclass(frozen=True)
class CacheEntryResult:
    """Persisted cache row as read back from the store."""

    cache_key: str
    data: str
    month_key: str
    account_id: str | None
    preferred_currency: str | None
    fetched_at: datetime


@dataclass(frozen=True)
class CacheEntryWrite:
    """Upsert payload for one cache key."""

    cache_key: str
    data: str
    metadata: CacheEntryMetadata
    fetched_at: datetime


@dataclass(frozen=True)
class CacheMetricsSnapshot:
    """Point-in-time copy of the cache counters.

    hit_rate is a percentage rounded to 2 decimals; 0 when nothing was observed.
    """

    cache_hit: int
    cache_miss: int
    cache_error: int
    last_reset: datetime
    total: int
    hit_rate: float
