"""Budget application service."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import TYPE_CHECKING

from finboard.application.dtos.finance import BudgetResult
from finboard.application.services.transaction_service import require_owned_account
from finboard.domain.enums import Currency, TransactionType
from finboard.domain.exceptions import ResourceNotFoundException, ValidationException
from finboard.shared.utils.months import month_key_for, parse_month_key

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from finboard.application.interfaces.repositories import (
        IAccountRepository,
        IBudgetRepository,
        ICategoryRepository,
        IDashboardCacheInvalidator,
    )

logger = logging.getLogger(__name__)


class BudgetService:
    """Set and remove monthly category budgets; commit, then invalidate (month, account)."""

    def __init__(
        self,
        db: AsyncSession,
        account_repo: IAccountRepository,
        category_repo: ICategoryRepository,
        budget_repo: IBudgetRepository,
        cache: IDashboardCacheInvalidator,
    ) -> None:
        self._db = db
        self._accounts = account_repo
        self._categories = category_repo
        self._budgets = budget_repo
        self._cache = cache

    async def set_budget(
        self,
        account_id: str,
        category_id: str,
        month_key: str,
        planned: Decimal,
        currency: Currency,
        user_id: str | None = None,
    ) -> BudgetResult:
        """Create or replace the budget for (account, category, month).

        Raises:
            ValidationException: Bad month key, negative amount or non-expense category.
        """
        try:
            month = parse_month_key(month_key)
        except ValueError as e:
            raise ValidationException(str(e), field="month") from e
        if planned < 0:
            raise ValidationException("planned must not be negative", field="planned")
        await require_owned_account(self._accounts, account_id, user_id)
        category = await self._categories.get_by_id(category_id)
        if category is None:
            raise ResourceNotFoundException("category", category_id)
        if category.type != TransactionType.EXPENSE:
            raise ValidationException("budgets apply to expense categories only", field="category_id")

        budget = await self._budgets.upsert_budget(account_id, category_id, month, planned, currency)
        await self._db.commit()
        await self._cache.invalidate_dashboard_cache(month_key, account_id)
        return budget

    async def delete_budget(self, budget_id: str, user_id: str | None = None) -> None:
        budget = await self._budgets.get_by_id(budget_id)
        if budget is None:
            raise ResourceNotFoundException("budget", budget_id)
        await require_owned_account(self._accounts, budget.account_id, user_id)
        await self._budgets.delete_budget(budget_id)
        await self._db.commit()
        await self._cache.invalidate_dashboard_cache(month_key_for(budget.month), budget.account_id)
        logger.info("Budget deleted: id=%s", budget_id)
