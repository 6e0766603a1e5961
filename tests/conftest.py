"""Pytest configuration and fixtures for finboard.

Unit tests run against an in-memory dashboard cache store and a fake clock;
HTTP tests use finboard.main:app through httpx ASGITransport (lifespan is
not run, so fixtures install app.state.dashboard_cache themselves).
DB-backed tests are marked requires_db and skip without DATABASE_URL.
"""

from collections.abc import AsyncIterator, Callable
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from finboard.application.dtos.cache import CacheEntryResult, CacheEntryWrite
from finboard.application.dtos.dashboard import (
    CategoryBudgetSummary,
    DashboardData,
    MonthSummary,
    TransactionDisplay,
)
from finboard.application.dtos.finance import AccountResult
from finboard.domain.enums import Currency, TransactionType
from finboard.infrastructure.persistence import database
from finboard.main import app


class FakeClock:
    """Settable UTC clock; call it like utc_now()."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 3, 15, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class InMemoryCacheStore:
    """IDashboardCacheStore over a dict, with the same delete semantics as the SQL store.

    Set fail_reads / fail_writes / fail_deletes to make the matching calls raise.
    """

    def __init__(self) -> None:
        self.rows: dict[str, CacheEntryResult] = {}
        self.reads = 0
        self.writes = 0
        self.fail_reads = False
        self.fail_writes = False
        self.fail_deletes = False

    async def find_by_key(self, cache_key: str) -> CacheEntryResult | None:
        self.reads += 1
        if self.fail_reads:
            raise ConnectionError("store unavailable")
        return self.rows.get(cache_key)

    async def upsert(self, entry: CacheEntryWrite) -> None:
        if self.fail_writes:
            raise ConnectionError("store unavailable")
        self.writes += 1
        currency = entry.metadata.preferred_currency
        self.rows[entry.cache_key] = CacheEntryResult(
            cache_key=entry.cache_key,
            data=entry.data,
            month_key=entry.metadata.month_key,
            account_id=entry.metadata.account_id,
            preferred_currency=currency.value if currency else None,
            fetched_at=entry.fetched_at,
        )

    def put(
        self,
        cache_key: str,
        month_key: str,
        account_id: str | None,
        fetched_at: datetime,
        data: str = "{}",
    ) -> None:
        """Seed a row directly (bypasses the write counter)."""
        self.rows[cache_key] = CacheEntryResult(
            cache_key=cache_key,
            data=data,
            month_key=month_key,
            account_id=account_id,
            preferred_currency=None,
            fetched_at=fetched_at,
        )

    async def delete_many(
        self,
        *,
        month_key: str | None = None,
        account_id: str | None = None,
        include_aggregate: bool = False,
    ) -> int:
        if self.fail_deletes:
            raise ConnectionError("store unavailable")
        if not month_key and not account_id:
            raise ValueError("Scoped delete needs month_key or account_id")

        def matches(row: CacheEntryResult) -> bool:
            if month_key and row.month_key != month_key:
                return False
            if account_id:
                if row.account_id == account_id:
                    return True
                return include_aggregate and row.account_id is None
            return True

        doomed = [k for k, row in self.rows.items() if matches(row)]
        for k in doomed:
            del self.rows[k]
        return len(doomed)

    async def delete_all(self) -> int:
        if self.fail_deletes:
            raise ConnectionError("store unavailable")
        count = len(self.rows)
        self.rows.clear()
        return count


def make_dashboard(
    month: str = "2024-03",
    currency: Currency = Currency.USD,
    transactions: list[TransactionDisplay] | None = None,
    budgets: list[CategoryBudgetSummary] | None = None,
    summary: MonthSummary | None = None,
) -> DashboardData:
    """Small but complete DashboardData for cache and API tests."""
    return DashboardData(
        month=month,
        currency=currency,
        summary=summary
        or MonthSummary(income=Decimal("1000.00"), expense=Decimal("250.50"), net=Decimal("749.50")),
        budgets=budgets or [],
        transactions=transactions or [],
        history=[],
        accounts=[AccountResult(id="acc-1", user_id="user-1", name="Main", currency=Currency.USD)],
    )


def make_transaction(
    id: str = "t1",
    type: TransactionType = TransactionType.EXPENSE,
    amount: str = "10.00",
    day: date = date(2024, 3, 10),
    category_id: str = "cat-food",
    category_name: str = "Food",
) -> TransactionDisplay:
    return TransactionDisplay(
        id=id,
        account_id="acc-1",
        category_id=category_id,
        category_name=category_name,
        category_color="#ff0000",
        type=type,
        amount=Decimal(amount),
        currency=Currency.USD,
        converted_amount=Decimal(amount),
        date=day,
        description=f"tx {id}",
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> InMemoryCacheStore:
    return InMemoryCacheStore()


@pytest.fixture
def dashboard_factory() -> Callable[..., DashboardData]:
    return make_dashboard


@pytest.fixture
def transaction_factory() -> Callable[..., TransactionDisplay]:
    return make_transaction


@pytest.fixture
async def client() -> AsyncIterator[AsyncClient]:
    """Async HTTP client against the FastAPI app (ASGI). Clears overrides afterwards."""
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
    app.state.dashboard_cache = None


@pytest.fixture
async def db_session() -> AsyncIterator[AsyncSession]:
    """Database session for repository/integration tests. Rolls back after test.

    Skips when DATABASE_URL is not configured. Use @pytest.mark.requires_db
    on tests that need it; run without DB via: pytest -m 'not requires_db'.
    """
    database._ensure_engine()
    if database.AsyncSessionLocal is None:
        pytest.skip("Postgres not configured: set DATABASE_URL, then run: alembic upgrade head")
    async with database.AsyncSessionLocal() as session:
        yield session
        await session.rollback()
