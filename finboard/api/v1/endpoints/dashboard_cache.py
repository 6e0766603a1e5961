"""Dashboard cache operator API: metrics and manual invalidation."""

from typing import Annotated

from fastapi import APIRouter, Depends

from finboard.api.v1.dependencies import get_dashboard_cache
from finboard.infrastructure.cache import DashboardCacheService
from finboard.schemas.cache import (
    CacheInvalidateRequest,
    CacheInvalidateResponse,
    CacheMetricsResponse,
)

router = APIRouter()


@router.get("/metrics", response_model=CacheMetricsResponse)
async def get_cache_metrics(
    cache: Annotated[DashboardCacheService, Depends(get_dashboard_cache)],
):
    return CacheMetricsResponse.model_validate(cache.get_cache_metrics())


@router.post("/metrics/reset", response_model=CacheMetricsResponse)
async def reset_cache_metrics(
    cache: Annotated[DashboardCacheService, Depends(get_dashboard_cache)],
):
    """Zero the counters; returns the fresh snapshot."""
    cache.reset_cache_metrics()
    return CacheMetricsResponse.model_validate(cache.get_cache_metrics())


@router.post("/invalidate", response_model=CacheInvalidateResponse)
async def invalidate_cache(
    cache: Annotated[DashboardCacheService, Depends(get_dashboard_cache)],
    body: CacheInvalidateRequest | None = None,
):
    """Invalidate by month and/or account; no scope means everything."""
    scope = body or CacheInvalidateRequest()
    deleted = await cache.invalidate_dashboard_cache(scope.month_key, scope.account_id)
    return CacheInvalidateResponse(deleted=deleted)


@router.post("/invalidate-all", response_model=CacheInvalidateResponse)
async def invalidate_all_cache(
    cache: Annotated[DashboardCacheService, Depends(get_dashboard_cache)],
):
    deleted = await cache.invalidate_all_dashboard_cache()
    return CacheInvalidateResponse(deleted=deleted)
