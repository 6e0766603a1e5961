"""Application ports (Protocols implemented by infrastructure)."""

from finboard.application.interfaces.repositories import (
    IAccountRepository,
    IBudgetRepository,
    ICategoryRepository,
    IDashboardCacheInvalidator,
    IDashboardCacheStore,
    ITransactionRepository,
)

__all__ = [
    "IAccountRepository",
    "IBudgetRepository",
    "ICategoryRepository",
    "IDashboardCacheInvalidator",
    "IDashboardCacheStore",
    "ITransactionRepository",
]
