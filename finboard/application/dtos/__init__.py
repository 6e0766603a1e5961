"""Application DTOs (dataclasses passed between layers)."""

from finboard.application.dtos.cache import (
    CacheEntryMetadata,
    CacheEntryResult,
    CacheEntryWrite,
    CacheMetricsSnapshot,
)
from finboard.application.dtos.dashboard import (
    CategoryBudgetSummary,
    DashboardData,
    DashboardQuery,
    MonthComparison,
    MonthlyHistoryPoint,
    MonthSummary,
    TransactionDisplay,
)
from finboard.application.dtos.finance import (
    AccountResult,
    BudgetResult,
    CategoryResult,
    TransactionCreate,
    TransactionResult,
    TransactionUpdate,
)

__all__ = [
    "AccountResult",
    "BudgetResult",
    "CacheEntryMetadata",
    "CacheEntryResult",
    "CacheEntryWrite",
    "CacheMetricsSnapshot",
    "CategoryBudgetSummary",
    "CategoryResult",
    "DashboardData",
    "DashboardQuery",
    "MonthComparison",
    "MonthSummary",
    "MonthlyHistoryPoint",
    "TransactionCreate",
    "TransactionDisplay",
    "TransactionResult",
    "TransactionUpdate",
]
