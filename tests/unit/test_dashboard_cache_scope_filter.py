"""SQL emitted for scoped dashboard cache deletes (compiled, no database needed)."""

import pytest
from sqlalchemy import delete
from sqlalchemy.dialects import postgresql

from finboard.infrastructure.persistence.models import DashboardCacheEntry
from finboard.infrastructure.persistence.repositories.dashboard_cache_repo import scope_filter


def _sql(**scope) -> str:
    stmt = delete(DashboardCacheEntry).where(scope_filter(**scope))
    return str(stmt.compile(dialect=postgresql.dialect(), compile_kwargs={"literal_binds": True}))


def test_month_and_account_with_aggregate() -> None:
    sql = _sql(month_key="2024-03", account_id="acc-1", include_aggregate=True)
    assert "dashboard_cache.month_key = '2024-03'" in sql
    assert "dashboard_cache.account_id = 'acc-1' OR dashboard_cache.account_id IS NULL" in sql


def test_month_only() -> None:
    sql = _sql(month_key="2024-03")
    assert "dashboard_cache.month_key = '2024-03'" in sql
    assert "account_id" not in sql


def test_account_only_excludes_aggregate_rows() -> None:
    sql = _sql(account_id="acc-1")
    assert "dashboard_cache.account_id = 'acc-1'" in sql
    assert "IS NULL" not in sql
    assert "month_key" not in sql


def test_empty_scope_is_rejected() -> None:
    with pytest.raises(ValueError):
        scope_filter()
