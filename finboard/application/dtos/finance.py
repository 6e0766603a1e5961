"""DTOs for accounts, categories, transactions, and budgets."""

from dataclasses import dataclass
import datetime as dt
from decimal import Decimal

from finboard.domain.enums import Currency, TransactionType


@dataclass(frozen=True)
class AccountResult:
    """Account read-model."""

    id: str
    user_id: str
    name: str
    currency: Currency


@dataclass(frozen=True)
class CategoryResult:
    """Category read-model."""

    id: str
    name: str
    type: TransactionType
    color: str | None


@dataclass(frozen=True)
class TransactionResult:
    """Transaction read-model (category display fields joined in)."""

    id: str
    account_id: str
    category_id: str
    category_name: str
    category_color: str | None
    type: TransactionType
    amount: Decimal
    currency: Currency
    date: dt.date
    description: str | None


@dataclass(frozen=True)
class TransactionCreate:
    """Input for creating a transaction."""

    account_id: str
    category_id: str
    type: TransactionType
    amount: Decimal
    currency: Currency
    date: dt.date
    description: str | None = None


@dataclass(frozen=True)
class TransactionUpdate:
    """Partial update; None leaves the field unchanged."""

    account_id: str | None = None
    category_id: str | None = None
    type: TransactionType | None = None
    amount: Decimal | None = None
    currency: Currency | None = None
    date: dt.date | None = None
    description: str | None = None


@dataclass(frozen=True)
class BudgetResult:
    """Budget read-model; month is the first day of the month."""

    id: str
    account_id: str
    category_id: str
    month: dt.date
    planned: Decimal
    currency: Currency
