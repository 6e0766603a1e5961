"""Transaction and budget ORM models."""

import datetime as dt
from decimal import Decimal

from sqlalchemy import Date, ForeignKey, Index, Numeric, String, UniqueConstraint
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from finboard.domain.enums import Currency, TransactionType
from finboard.infrastructure.persistence.database import Base
from finboard.infrastructure.persistence.models.mixins import (
    CuidMixin,
    SoftDeleteMixin,
    TimestampMixin,
)


class Transaction(CuidMixin, TimestampMixin, SoftDeleteMixin, Base):
    """Income or expense entry. Table: transaction.

    month is the first day of the month of date (denormalized for month scans).
    """

    __tablename__ = "transaction"

    account_id: Mapped[str] = mapped_column(
        String, ForeignKey("account.id", ondelete="CASCADE"), nullable=False
    )
    category_id: Mapped[str] = mapped_column(
        String, ForeignKey("category.id", ondelete="RESTRICT"), nullable=False
    )
    type: Mapped[TransactionType] = mapped_column(
        SAEnum(TransactionType, name="transaction_type"), nullable=False
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    currency: Mapped[Currency] = mapped_column(
        SAEnum(Currency, name="currency"), nullable=False
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    month: Mapped[dt.date] = mapped_column(Date, nullable=False)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)

    __table_args__ = (Index("ix_transaction_account_month", "account_id", "month"),)


class Budget(CuidMixin, TimestampMixin, Base):
    """Planned spend for one category in one account and month. Table: budget."""

    __tablename__ = "budget"

    account_id: Mapped[str] = mapped_column(
        String, ForeignKey("account.id", ondelete="CASCADE"), nullable=False
    )
    category_id: Mapped[str] = mapped_column(
        String, ForeignKey("category.id", ondelete="CASCADE"), nullable=False
    )
    month: Mapped[dt.date] = mapped_column(Date, nullable=False)
    planned: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    currency: Mapped[Currency] = mapped_column(
        SAEnum(Currency, name="currency"), nullable=False
    )

    __table_args__ = (
        UniqueConstraint(
            "account_id", "category_id", "month", name="uq_budget_account_category_month"
        ),
    )
