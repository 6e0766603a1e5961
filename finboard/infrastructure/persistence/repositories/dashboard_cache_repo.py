"""Dashboard cache repository: the persisted store behind DashboardCacheService.

Unlike the request-scoped repositories, this one is process-wide: every
call opens its own short session and commits, so cache reads and writes
never join (or wait for) a request transaction.
"""

from sqlalchemy import ColumnElement, and_, delete, or_, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from finboard.application.dtos.cache import CacheEntryResult, CacheEntryWrite
from finboard.infrastructure.persistence.models.dashboard_cache import DashboardCacheEntry
from finboard.shared.utils.generators import generate_cuid


def _to_result(row: DashboardCacheEntry) -> CacheEntryResult:
    return CacheEntryResult(
        cache_key=row.cache_key,
        data=row.data,
        month_key=row.month_key,
        account_id=row.account_id,
        preferred_currency=row.preferred_currency,
        fetched_at=row.fetched_at,
    )


def scope_filter(
    month_key: str | None = None,
    account_id: str | None = None,
    include_aggregate: bool = False,
) -> ColumnElement[bool]:
    """Build the WHERE clause for a scoped delete.

    Raises:
        ValueError: If neither month_key nor account_id is given (use delete_all).
    """
    clauses: list[ColumnElement[bool]] = []
    if month_key:
        clauses.append(DashboardCacheEntry.month_key == month_key)
    if account_id:
        account_clause = DashboardCacheEntry.account_id == account_id
        if include_aggregate:
            account_clause = or_(account_clause, DashboardCacheEntry.account_id.is_(None))
        clauses.append(account_clause)
    if not clauses:
        raise ValueError("Scoped delete needs month_key or account_id; use delete_all()")
    return and_(*clauses)


class DashboardCacheRepository:
    """IDashboardCacheStore over the dashboard_cache table (PostgreSQL)."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory

    async def find_by_key(self, cache_key: str) -> CacheEntryResult | None:
        async with self.session_factory() as session:
            result = await session.execute(
                select(DashboardCacheEntry).where(DashboardCacheEntry.cache_key == cache_key)
            )
            row = result.scalar_one_or_none()
            return _to_result(row) if row else None

    async def upsert(self, entry: CacheEntryWrite) -> None:
        """INSERT ... ON CONFLICT (cache_key) DO UPDATE; last write wins."""
        metadata = entry.metadata
        currency = metadata.preferred_currency.value if metadata.preferred_currency else None
        stmt = pg_insert(DashboardCacheEntry).values(
            id=generate_cuid(),
            cache_key=entry.cache_key,
            data=entry.data,
            month_key=metadata.month_key,
            account_id=metadata.account_id,
            preferred_currency=currency,
            fetched_at=entry.fetched_at,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[DashboardCacheEntry.cache_key],
            set_={
                "data": stmt.excluded.data,
                "fetched_at": stmt.excluded.fetched_at,
                "updated_at": stmt.excluded.fetched_at,
            },
        )
        async with self.session_factory() as session, session.begin():
            await session.execute(stmt)

    async def delete_many(
        self,
        *,
        month_key: str | None = None,
        account_id: str | None = None,
        include_aggregate: bool = False,
    ) -> int:
        stmt = delete(DashboardCacheEntry).where(
            scope_filter(month_key, account_id, include_aggregate)
        )
        async with self.session_factory() as session, session.begin():
            result = await session.execute(stmt)
            return result.rowcount or 0

    async def delete_all(self) -> int:
        async with self.session_factory() as session, session.begin():
            result = await session.execute(delete(DashboardCacheEntry))
            return result.rowcount or 0
