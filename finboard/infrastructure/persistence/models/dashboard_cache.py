"""Dashboard cache ORM: one row per cache key holding a serialized snapshot."""

from datetime import datetime

from sqlalchemy import DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from finboard.infrastructure.persistence.database import Base
from finboard.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin


class DashboardCacheEntry(CuidMixin, TimestampMixin, Base):
    """Persisted dashboard snapshot. Table: dashboard_cache.

    Rows are disposable: dropping any of them only costs a recompute.
    account_id NULL is the all-accounts aggregate view.
    """

    __tablename__ = "dashboard_cache"

    cache_key: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    data: Mapped[str] = mapped_column(Text, nullable=False)
    month_key: Mapped[str] = mapped_column(String(7), nullable=False)
    account_id: Mapped[str | None] = mapped_column(String, nullable=True)
    preferred_currency: Mapped[str | None] = mapped_column(String(3), nullable=True)
    fetched_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index("ix_dashboard_cache_month_key", "month_key"),
        Index("ix_dashboard_cache_account_id", "account_id"),
    )
