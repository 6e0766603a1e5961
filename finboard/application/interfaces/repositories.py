"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill.
All types reference application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Protocol

from finboard.domain.enums import Currency

if TYPE_CHECKING:
    from finboard.application.dtos.cache import CacheEntryResult, CacheEntryWrite
    from finboard.application.dtos.finance import (
        AccountResult,
        BudgetResult,
        CategoryResult,
        TransactionCreate,
        TransactionResult,
        TransactionUpdate,
    )


class IDashboardCacheStore(Protocol):
    """Persisted dashboard snapshots keyed by cache_key (unique)."""

    async def find_by_key(self, cache_key: str) -> CacheEntryResult | None:
        """Return the row for cache_key, or None."""

    async def upsert(self, entry: CacheEntryWrite) -> None:
        """Insert or overwrite the row for entry.cache_key."""

    async def delete_many(
        self,
        *,
        month_key: str | None = None,
        account_id: str | None = None,
        include_aggregate: bool = False,
    ) -> int:
        """Delete rows matching every given filter; return count.

        include_aggregate widens the account filter to also match rows with
        account_id NULL (the all-accounts view). At least one of month_key
        or account_id must be given; use delete_all for everything.
        """

    async def delete_all(self) -> int:
        """Delete every row; return count."""


class IAccountRepository(Protocol):
    async def get_by_id(self, account_id: str) -> AccountResult | None:
        """Return account by id."""

    async def list_for_user(self, user_id: str | None) -> list[AccountResult]:
        """Return the user's accounts (every account when user_id is None)."""


class ICategoryRepository(Protocol):
    async def get_by_id(self, category_id: str) -> CategoryResult | None:
        """Return category by id."""


class ITransactionRepository(Protocol):
    async def get_by_id(self, transaction_id: str) -> TransactionResult | None:
        """Return a live (not deleted) transaction by id."""

    async def create_transaction(self, data: TransactionCreate) -> TransactionResult:
        """Insert a transaction; month is derived from date."""

    async def update_transaction(
        self, transaction_id: str, changes: TransactionUpdate
    ) -> TransactionResult:
        """Apply non-None fields of changes; raise if not found."""

    async def soft_delete(self, transaction_id: str) -> TransactionResult:
        """Mark deleted; return the row as it was before deletion."""

    async def list_for_month(
        self, account_ids: list[str], month: date
    ) -> list[TransactionResult]:
        """Return live transactions of the month for the accounts, newest first."""

    async def monthly_totals(
        self, account_ids: list[str], first_month: date, last_month: date
    ) -> list[tuple[date, str, Currency, Decimal]]:
        """Return (month, type, currency, sum) rows for the inclusive month range."""


class IBudgetRepository(Protocol):
    async def get_by_id(self, budget_id: str) -> BudgetResult | None:
        """Return budget by id."""

    async def upsert_budget(
        self,
        account_id: str,
        category_id: str,
        month: date,
        planned: Decimal,
        currency: Currency,
    ) -> BudgetResult:
        """Create or replace the budget for (account, category, month)."""

    async def delete_budget(self, budget_id: str) -> None:
        """Delete budget by id."""

    async def list_for_month(
        self, account_ids: list[str], month: date
    ) -> list[tuple[BudgetResult, str]]:
        """Return (budget, category_name) pairs for the accounts and month."""


class IDashboardCacheInvalidator(Protocol):
    """What mutation services need from the dashboard cache."""

    async def invalidate_dashboard_cache(
        self, month_key: str | None = None, account_id: str | None = None
    ) -> int:
        """Drop cached snapshots that may embed the mutated data."""

