"""Account and category repositories."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from finboard.application.dtos.finance import AccountResult, CategoryResult
from finboard.infrastructure.persistence.models.account import Account, Category
from finboard.infrastructure.persistence.repositories.base import BaseRepository


def _account_to_result(a: Account) -> AccountResult:
    return AccountResult(id=a.id, user_id=a.user_id, name=a.name, currency=a.currency)


def _category_to_result(c: Category) -> CategoryResult:
    return CategoryResult(id=c.id, name=c.name, type=c.type, color=c.color)


class AccountRepository(BaseRepository[Account]):
    """Account lookups (ownership checks and dashboard scope)."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Account)

    async def get_by_id(self, account_id: str) -> AccountResult | None:
        row = await self.get_model(account_id)
        return _account_to_result(row) if row else None

    async def list_for_user(self, user_id: str | None) -> list[AccountResult]:
        """Return the user's accounts ordered by name; every account when user_id is None."""
        stmt = select(Account).order_by(Account.name)
        if user_id is not None:
            stmt = stmt.where(Account.user_id == user_id)
        result = await self.db.execute(stmt)
        return [_account_to_result(a) for a in result.scalars().all()]


class CategoryRepository(BaseRepository[Category]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Category)

    async def get_by_id(self, category_id: str) -> CategoryResult | None:
        row = await self.get_model(category_id)
        return _category_to_result(row) if row else None
