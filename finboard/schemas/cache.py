"""Dashboard cache operator API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from finboard.core.constants import MONTH_KEY_PATTERN


class CacheMetricsResponse(BaseModel):
    """Process-local counters since last_reset."""

    model_config = ConfigDict(from_attributes=True)

    cache_hit: int
    cache_miss: int
    cache_error: int
    last_reset: datetime
    total: int
    hit_rate: float = Field(..., description="Percentage of hits among hits + misses")


class CacheInvalidateRequest(BaseModel):
    """Scope of POST /dashboard/cache/invalidate; empty body clears everything."""

    month_key: str | None = Field(default=None, pattern=MONTH_KEY_PATTERN)
    account_id: str | None = Field(default=None, min_length=1)


class CacheInvalidateResponse(BaseModel):
    deleted: int
