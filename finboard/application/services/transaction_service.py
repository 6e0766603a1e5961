"""Transaction application service: ledger writes followed by dashboard invalidation."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from finboard.application.dtos.finance import (
    AccountResult,
    TransactionCreate,
    TransactionResult,
    TransactionUpdate,
)
from finboard.domain.exceptions import (
    AuthorizationException,
    ResourceNotFoundException,
    ValidationException,
)
from finboard.shared.utils.months import month_key_for

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from finboard.application.interfaces.repositories import (
        IAccountRepository,
        ICategoryRepository,
        IDashboardCacheInvalidator,
        ITransactionRepository,
    )

logger = logging.getLogger(__name__)


async def require_owned_account(
    account_repo: IAccountRepository, account_id: str, user_id: str | None
) -> AccountResult:
    """Return the account, or raise if it is missing or belongs to another user.

    Raises:
        ResourceNotFoundException: Unknown account_id.
        AuthorizationException: Account owned by a different user.
    """
    account = await account_repo.get_by_id(account_id)
    if account is None:
        raise ResourceNotFoundException("account", account_id)
    if user_id is not None and account.user_id != user_id:
        raise AuthorizationException("account", account_id)
    return account


class TransactionService:
    """Create, update and delete transactions.

    Every mutation commits first and then invalidates the dashboard cache for
    the (month, account) it touched, so a reader that recomputes after the
    invalidation sees the committed rows.
    """

    def __init__(
        self,
        db: AsyncSession,
        account_repo: IAccountRepository,
        category_repo: ICategoryRepository,
        transaction_repo: ITransactionRepository,
        cache: IDashboardCacheInvalidator,
    ) -> None:
        self._db = db
        self._accounts = account_repo
        self._categories = category_repo
        self._transactions = transaction_repo
        self._cache = cache

    async def _validate(self, data: TransactionCreate, user_id: str | None) -> None:
        if data.amount <= 0:
            raise ValidationException("amount must be positive", field="amount")
        await require_owned_account(self._accounts, data.account_id, user_id)
        category = await self._categories.get_by_id(data.category_id)
        if category is None:
            raise ResourceNotFoundException("category", data.category_id)
        if category.type != data.type:
            raise ValidationException(
                f"category {category.name!r} is {category.type.value}, not {data.type.value}",
                field="category_id",
            )

    async def _owned(self, transaction_id: str, user_id: str | None) -> TransactionResult:
        existing = await self._transactions.get_by_id(transaction_id)
        if existing is None:
            raise ResourceNotFoundException("transaction", transaction_id)
        await require_owned_account(self._accounts, existing.account_id, user_id)
        return existing

    async def create(self, data: TransactionCreate, user_id: str | None = None) -> TransactionResult:
        await self._validate(data, user_id)
        created = await self._transactions.create_transaction(data)
        await self._db.commit()
        await self._cache.invalidate_dashboard_cache(month_key_for(created.date), created.account_id)
        logger.info("Transaction created: id=%s account_id=%s", created.id, created.account_id)
        return created

    async def update(
        self, transaction_id: str, changes: TransactionUpdate, user_id: str | None = None
    ) -> TransactionResult:
        """Apply changes; invalidates the old scope and, if it moved, the new one."""
        existing = await self._owned(transaction_id, user_id)
        merged = TransactionCreate(
            account_id=changes.account_id or existing.account_id,
            category_id=changes.category_id or existing.category_id,
            type=changes.type or existing.type,
            amount=changes.amount if changes.amount is not None else existing.amount,
            currency=changes.currency or existing.currency,
            date=changes.date or existing.date,
            description=existing.description,
        )
        await self._validate(merged, user_id)

        updated = await self._transactions.update_transaction(transaction_id, changes)
        await self._db.commit()

        old_scope = (month_key_for(existing.date), existing.account_id)
        new_scope = (month_key_for(updated.date), updated.account_id)
        await self._cache.invalidate_dashboard_cache(*old_scope)
        if new_scope != old_scope:
            await self._cache.invalidate_dashboard_cache(*new_scope)
        logger.info("Transaction updated: id=%s", transaction_id)
        return updated

    async def delete(self, transaction_id: str, user_id: str | None = None) -> TransactionResult:
        """Soft-delete; returns the transaction as it was."""
        await self._owned(transaction_id, user_id)
        deleted = await self._transactions.soft_delete(transaction_id)
        await self._db.commit()
        await self._cache.invalidate_dashboard_cache(month_key_for(deleted.date), deleted.account_id)
        logger.info("Transaction deleted: id=%s", transaction_id)
        return deleted
