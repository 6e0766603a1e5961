"""Account and category ORM models."""

from sqlalchemy import Enum as SAEnum
from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from finboard.domain.enums import Currency, TransactionType
from finboard.infrastructure.persistence.database import Base
from finboard.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin


class Account(CuidMixin, TimestampMixin, Base):
    """A ledger owned by one user. Table: account."""

    __tablename__ = "account"

    user_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    currency: Mapped[Currency] = mapped_column(
        SAEnum(Currency, name="currency"), nullable=False, default=Currency.USD
    )


class Category(CuidMixin, TimestampMixin, Base):
    """Income or expense category. Table: category."""

    __tablename__ = "category"

    user_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    type: Mapped[TransactionType] = mapped_column(
        SAEnum(TransactionType, name="transaction_type"), nullable=False
    )
    color: Mapped[str | None] = mapped_column(String(16), nullable=True)

    __table_args__ = (
        UniqueConstraint("user_id", "name", "type", name="uq_category_user_name_type"),
    )
