"""Persistence models: ORM entities and mixins."""

from finboard.infrastructure.persistence.models.account import Account, Category
from finboard.infrastructure.persistence.models.dashboard_cache import DashboardCacheEntry
from finboard.infrastructure.persistence.models.mixins import (
    CuidMixin,
    SoftDeleteMixin,
    TimestampMixin,
)
from finboard.infrastructure.persistence.models.transaction import Budget, Transaction

__all__ = [
    "Account",
    "Budget",
    "Category",
    "CuidMixin",
    "DashboardCacheEntry",
    "SoftDeleteMixin",
    "TimestampMixin",
    "Transaction",
]
