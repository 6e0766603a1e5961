"""Cache: dashboard snapshot cache (single-flight + persisted TTL store) and key utilities.

DashboardCacheService is built once per process in core.lifespan; key format
lives in keys.py.
"""

from finboard.infrastructure.cache.dashboard_cache import (
    DashboardCacheService,
    DashboardComputeFn,
)
from finboard.infrastructure.cache.keys import DashboardCacheKey, build_dashboard_cache_key
from finboard.infrastructure.cache.metrics import CacheMetrics

__all__ = [
    "CacheMetrics",
    "DashboardCacheKey",
    "DashboardCacheService",
    "DashboardComputeFn",
    "build_dashboard_cache_key",
]
