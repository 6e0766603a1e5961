"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for the caller identity, DB sessions, the
process-wide dashboard cache and the application services. Routes depend
only on these, not on infrastructure directly.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from finboard.application.services import BudgetService, TransactionService
from finboard.core.config import get_settings
from finboard.domain.exceptions import SqlNotConfiguredException
from finboard.infrastructure.cache import DashboardCacheService
from finboard.infrastructure.persistence.database import get_db
from finboard.infrastructure.persistence.repositories import (
    AccountRepository,
    BudgetRepository,
    CategoryRepository,
    TransactionRepository,
)
from finboard.shared.context import set_current_user_id


async def get_user_id(request: Request) -> str | None:
    """Caller's user id from the identity header (set by the upstream gateway).

    Also stored in the request context so log lines carry it; async so the
    value is set in the request task rather than a threadpool copy.
    """
    raw = request.headers.get(get_settings().user_id_header)
    user_id = raw.strip() if raw and raw.strip() else None
    set_current_user_id(user_id)
    return user_id


def get_dashboard_cache(request: Request) -> DashboardCacheService:
    """The DashboardCacheService built at startup.

    Raises:
        SqlNotConfiguredException: Started without DATABASE_URL (no cache store).
    """
    cache = getattr(request.app.state, "dashboard_cache", None)
    if cache is None:
        raise SqlNotConfiguredException()
    return cache


async def get_account_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AccountRepository:
    return AccountRepository(db)


async def get_transaction_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    cache: Annotated[DashboardCacheService, Depends(get_dashboard_cache)],
) -> TransactionService:
    """TransactionService on the request session; invalidates through the shared cache."""
    return TransactionService(
        db,
        AccountRepository(db),
        CategoryRepository(db),
        TransactionRepository(db),
        cache,
    )


async def get_budget_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    cache: Annotated[DashboardCacheService, Depends(get_dashboard_cache)],
) -> BudgetService:
    return BudgetService(
        db,
        AccountRepository(db),
        CategoryRepository(db),
        BudgetRepository(db),
        cache,
    )
