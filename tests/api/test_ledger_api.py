"""Transactions and budgets endpoints with the application services overridden."""

from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient

from finboard.api.v1.dependencies import get_budget_service, get_transaction_service
from finboard.application.dtos.finance import BudgetResult, TransactionResult
from finboard.domain.enums import Currency, TransactionType
from finboard.domain.exceptions import AuthorizationException
from finboard.main import app

TX = TransactionResult(
    id="t1",
    account_id="acc-1",
    category_id="cat-food",
    category_name="Food",
    category_color=None,
    type=TransactionType.EXPENSE,
    amount=Decimal("12.50"),
    currency=Currency.USD,
    date=date(2024, 3, 10),
    description="lunch",
)


@pytest.fixture
def tx_service():
    service = AsyncMock()
    service.create = AsyncMock(return_value=TX)
    service.update = AsyncMock(return_value=TX)
    service.delete = AsyncMock(return_value=TX)
    app.dependency_overrides[get_transaction_service] = lambda: service
    return service


@pytest.fixture
def budget_service():
    service = AsyncMock()
    service.set_budget = AsyncMock(
        return_value=BudgetResult(
            id="b1",
            account_id="acc-1",
            category_id="cat-food",
            month=date(2024, 3, 1),
            planned=Decimal("300.00"),
            currency=Currency.USD,
        )
    )
    app.dependency_overrides[get_budget_service] = lambda: service
    return service


async def test_create_transaction(client: AsyncClient, tx_service) -> None:
    response = await client.post(
        "/api/v1/transactions",
        json={
            "account_id": "acc-1",
            "category_id": "cat-food",
            "type": "EXPENSE",
            "amount": "12.50",
            "currency": "USD",
            "date": "2024-03-10",
            "description": "lunch",
        },
        headers={"X-User-ID": "user-1"},
    )

    assert response.status_code == 201
    assert response.json()["id"] == "t1"
    data, = tx_service.create.await_args.args
    assert data.amount == Decimal("12.50")
    assert data.type is TransactionType.EXPENSE
    assert tx_service.create.await_args.kwargs == {"user_id": "user-1"}


async def test_create_transaction_rejects_negative_amount(client: AsyncClient, tx_service) -> None:
    response = await client.post(
        "/api/v1/transactions",
        json={
            "account_id": "acc-1",
            "category_id": "cat-food",
            "type": "EXPENSE",
            "amount": "-1",
            "currency": "USD",
            "date": "2024-03-10",
        },
    )
    assert response.status_code == 422
    tx_service.create.assert_not_awaited()


async def test_patch_sends_only_given_fields(client: AsyncClient, tx_service) -> None:
    response = await client.patch("/api/v1/transactions/t1", json={"date": "2024-04-01"})

    assert response.status_code == 200
    transaction_id, changes = tx_service.update.await_args.args
    assert transaction_id == "t1"
    assert changes.date == date(2024, 4, 1)
    assert changes.amount is None


async def test_delete_transaction(client: AsyncClient, tx_service) -> None:
    response = await client.delete("/api/v1/transactions/t1")
    assert response.status_code == 204
    tx_service.delete.assert_awaited_once()


async def test_domain_errors_map_to_status(client: AsyncClient, tx_service) -> None:
    tx_service.delete.side_effect = AuthorizationException("transaction", "t1")

    response = await client.delete("/api/v1/transactions/t1")

    assert response.status_code == 403
    assert response.json()["error"] == "AUTHORIZATION_ERROR"


async def test_put_budget(client: AsyncClient, budget_service) -> None:
    response = await client.put(
        "/api/v1/budgets",
        json={
            "account_id": "acc-1",
            "category_id": "cat-food",
            "month": "2024-03",
            "planned": "300.00",
            "currency": "USD",
        },
    )

    assert response.status_code == 200
    assert response.json()["month"] == "2024-03-01"
    assert budget_service.set_budget.await_args.kwargs["month_key"] == "2024-03"


async def test_delete_budget(client: AsyncClient, budget_service) -> None:
    response = await client.delete("/api/v1/budgets/b1")
    assert response.status_code == 204
    budget_service.delete_budget.assert_awaited_once_with("b1", user_id=None)
