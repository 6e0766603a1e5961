"""Ledger repositories against Postgres. Session is rolled back after each test."""

from datetime import date
from decimal import Decimal

import pytest

from finboard.application.dtos.finance import TransactionCreate, TransactionUpdate
from finboard.domain.enums import Currency, TransactionType
from finboard.infrastructure.persistence.models import Account, Category
from finboard.infrastructure.persistence.repositories import (
    AccountRepository,
    BudgetRepository,
    TransactionRepository,
)


async def _seed(db_session):
    account = Account(user_id="it-user", name="Main", currency=Currency.USD)
    food = Category(user_id="it-user", name="Food", type=TransactionType.EXPENSE, color="#f00")
    salary = Category(user_id="it-user", name="Salary", type=TransactionType.INCOME)
    db_session.add_all([account, food, salary])
    await db_session.flush()
    return account, food, salary


@pytest.mark.requires_db
async def test_list_accounts_for_user(db_session) -> None:
    account, _, _ = await _seed(db_session)
    accounts = await AccountRepository(db_session).list_for_user("it-user")
    assert [a.id for a in accounts] == [account.id]


@pytest.mark.requires_db
async def test_transaction_lifecycle_and_month_scan(db_session) -> None:
    account, food, salary = await _seed(db_session)
    repo = TransactionRepository(db_session)

    lunch = await repo.create_transaction(
        TransactionCreate(
            account_id=account.id,
            category_id=food.id,
            type=TransactionType.EXPENSE,
            amount=Decimal("12.50"),
            currency=Currency.USD,
            date=date(2024, 3, 10),
        )
    )
    pay = await repo.create_transaction(
        TransactionCreate(
            account_id=account.id,
            category_id=salary.id,
            type=TransactionType.INCOME,
            amount=Decimal("1000"),
            currency=Currency.USD,
            date=date(2024, 3, 25),
        )
    )
    assert lunch.category_name == "Food"

    march = await repo.list_for_month([account.id], date(2024, 3, 1))
    assert [t.id for t in march] == [pay.id, lunch.id]

    moved = await repo.update_transaction(lunch.id, TransactionUpdate(date=date(2024, 4, 2)))
    assert moved.date == date(2024, 4, 2)
    assert [t.id for t in await repo.list_for_month([account.id], date(2024, 4, 1))] == [lunch.id]

    deleted = await repo.soft_delete(pay.id)
    assert deleted.id == pay.id
    assert await repo.get_by_id(pay.id) is None

    totals = await repo.monthly_totals([account.id], date(2024, 1, 1), date(2024, 4, 1))
    assert totals == [(date(2024, 4, 1), "EXPENSE", Currency.USD, Decimal("12.50"))]


@pytest.mark.requires_db
async def test_budget_upsert_replaces_plan(db_session) -> None:
    account, food, _ = await _seed(db_session)
    repo = BudgetRepository(db_session)

    first = await repo.upsert_budget(account.id, food.id, date(2024, 3, 1), Decimal("100"), Currency.USD)
    second = await repo.upsert_budget(account.id, food.id, date(2024, 3, 1), Decimal("250"), Currency.USD)

    assert second.id == first.id
    assert second.planned == Decimal("250.00")
    [(budget, name)] = await repo.list_for_month([account.id], date(2024, 3, 1))
    assert (budget.id, name) == (first.id, "Food")
