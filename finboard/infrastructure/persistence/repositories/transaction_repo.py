"""Transaction and budget repositories. Soft-deleted transactions are never returned."""

from datetime import date
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from finboard.application.dtos.finance import (
    BudgetResult,
    TransactionCreate,
    TransactionResult,
    TransactionUpdate,
)
from finboard.domain.enums import Currency
from finboard.domain.exceptions import ResourceNotFoundException
from finboard.infrastructure.persistence.models.account import Category
from finboard.infrastructure.persistence.models.transaction import Budget, Transaction
from finboard.infrastructure.persistence.repositories.base import BaseRepository
from finboard.shared.utils.datetime import utc_now
from finboard.shared.utils.months import month_start


def _transaction_to_result(t: Transaction, category: Category) -> TransactionResult:
    return TransactionResult(
        id=t.id,
        account_id=t.account_id,
        category_id=t.category_id,
        category_name=category.name,
        category_color=category.color,
        type=t.type,
        amount=t.amount,
        currency=t.currency,
        date=t.date,
        description=t.description,
    )


def _budget_to_result(b: Budget) -> BudgetResult:
    return BudgetResult(
        id=b.id,
        account_id=b.account_id,
        category_id=b.category_id,
        month=b.month,
        planned=b.planned,
        currency=b.currency,
    )


class TransactionRepository(BaseRepository[Transaction]):
    """Transaction CRUD plus the month scans used by the dashboard aggregation."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Transaction)

    async def _get_live(self, transaction_id: str) -> tuple[Transaction, Category] | None:
        result = await self.db.execute(
            select(Transaction, Category)
            .join(Category, Category.id == Transaction.category_id)
            .where(Transaction.id == transaction_id, Transaction.deleted_at.is_(None))
        )
        row = result.one_or_none()
        return (row[0], row[1]) if row else None

    async def get_by_id(self, transaction_id: str) -> TransactionResult | None:
        found = await self._get_live(transaction_id)
        return _transaction_to_result(*found) if found else None

    async def create_transaction(self, data: TransactionCreate) -> TransactionResult:
        created = await self.create(
            Transaction(
                account_id=data.account_id,
                category_id=data.category_id,
                type=data.type,
                amount=data.amount,
                currency=data.currency,
                date=data.date,
                month=month_start(data.date),
                description=data.description,
            )
        )
        found = await self._get_live(created.id)
        if found is None:
            raise ResourceNotFoundException("transaction", created.id)
        return _transaction_to_result(*found)

    async def update_transaction(
        self, transaction_id: str, changes: TransactionUpdate
    ) -> TransactionResult:
        """Apply non-None fields; keeps month in step with date."""
        found = await self._get_live(transaction_id)
        if found is None:
            raise ResourceNotFoundException("transaction", transaction_id)
        row = found[0]
        for field in ("account_id", "category_id", "type", "amount", "currency", "description"):
            value = getattr(changes, field)
            if value is not None:
                setattr(row, field, value)
        if changes.date is not None:
            row.date = changes.date
            row.month = month_start(changes.date)
        await self.db.flush()
        refreshed = await self._get_live(transaction_id)
        if refreshed is None:
            raise ResourceNotFoundException("transaction", transaction_id)
        return _transaction_to_result(*refreshed)

    async def soft_delete(self, transaction_id: str) -> TransactionResult:
        found = await self._get_live(transaction_id)
        if found is None:
            raise ResourceNotFoundException("transaction", transaction_id)
        before = _transaction_to_result(*found)
        found[0].deleted_at = utc_now()
        await self.db.flush()
        return before

    async def list_for_month(
        self, account_ids: list[str], month: date
    ) -> list[TransactionResult]:
        if not account_ids:
            return []
        result = await self.db.execute(
            select(Transaction, Category)
            .join(Category, Category.id == Transaction.category_id)
            .where(
                Transaction.account_id.in_(account_ids),
                Transaction.month == month,
                Transaction.deleted_at.is_(None),
            )
            .order_by(Transaction.date.desc(), Transaction.created_at.desc())
        )
        return [_transaction_to_result(t, c) for t, c in result.all()]

    async def monthly_totals(
        self, account_ids: list[str], first_month: date, last_month: date
    ) -> list[tuple[date, str, Currency, Decimal]]:
        if not account_ids:
            return []
        result = await self.db.execute(
            select(
                Transaction.month,
                Transaction.type,
                Transaction.currency,
                func.sum(Transaction.amount),
            )
            .where(
                Transaction.account_id.in_(account_ids),
                Transaction.month >= first_month,
                Transaction.month <= last_month,
                Transaction.deleted_at.is_(None),
            )
            .group_by(Transaction.month, Transaction.type, Transaction.currency)
        )
        return [(m, t.value, c, total or Decimal("0")) for m, t, c, total in result.all()]


class BudgetRepository(BaseRepository[Budget]):
    """One budget per (account, category, month)."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Budget)

    async def get_by_id(self, budget_id: str) -> BudgetResult | None:
        row = await self.get_model(budget_id)
        return _budget_to_result(row) if row else None

    async def upsert_budget(
        self,
        account_id: str,
        category_id: str,
        month: date,
        planned: Decimal,
        currency: Currency,
    ) -> BudgetResult:
        result = await self.db.execute(
            select(Budget).where(
                Budget.account_id == account_id,
                Budget.category_id == category_id,
                Budget.month == month,
            )
        )
        row = result.scalar_one_or_none()
        if row:
            row.planned = planned
            row.currency = currency
            await self.db.flush()
            await self.db.refresh(row)
            return _budget_to_result(row)
        created = await self.create(
            Budget(
                account_id=account_id,
                category_id=category_id,
                month=month,
                planned=planned,
                currency=currency,
            )
        )
        return _budget_to_result(created)

    async def delete_budget(self, budget_id: str) -> None:
        row = await self.get_model(budget_id)
        if row is None:
            raise ResourceNotFoundException("budget", budget_id)
        await self.delete(row)

    async def list_for_month(
        self, account_ids: list[str], month: date
    ) -> list[tuple[BudgetResult, str]]:
        if not account_ids:
            return []
        result = await self.db.execute(
            select(Budget, Category.name)
            .join(Category, Category.id == Budget.category_id)
            .where(Budget.account_id.in_(account_ids), Budget.month == month)
            .order_by(Category.name)
        )
        return [(_budget_to_result(b), name) for b, name in result.all()]
