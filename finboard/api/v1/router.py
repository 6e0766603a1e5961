"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from finboard.api.v1.dependencies.
"""

from fastapi import APIRouter

from finboard.api.v1.endpoints import budgets, dashboard, dashboard_cache, health, transactions

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
api_router.include_router(
    dashboard_cache.router, prefix="/dashboard/cache", tags=["dashboard-cache"]
)
api_router.include_router(transactions.router, prefix="/transactions", tags=["transactions"])
api_router.include_router(budgets.router, prefix="/budgets", tags=["budgets"])
