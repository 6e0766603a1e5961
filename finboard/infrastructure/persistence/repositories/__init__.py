"""Repositories: request-scoped CRUD and the process-wide dashboard cache store."""

from finboard.infrastructure.persistence.repositories.account_repo import (
    AccountRepository,
    CategoryRepository,
)
from finboard.infrastructure.persistence.repositories.base import BaseRepository
from finboard.infrastructure.persistence.repositories.dashboard_cache_repo import (
    DashboardCacheRepository,
)
from finboard.infrastructure.persistence.repositories.transaction_repo import (
    BudgetRepository,
    TransactionRepository,
)

__all__ = [
    "AccountRepository",
    "BaseRepository",
    "BudgetRepository",
    "CategoryRepository",
    "DashboardCacheRepository",
    "TransactionRepository",
]
