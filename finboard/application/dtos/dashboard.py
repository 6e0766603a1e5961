"""DTOs for the dashboard snapshot and the query that produces it.

DashboardData is what the cache persists: it must round-trip through
pydantic's JSON serialization (dataclasses, Decimal, date, enums only).
"""

from dataclasses import dataclass, field
import datetime as dt
from decimal import Decimal

from finboard.application.dtos.finance import AccountResult
from finboard.domain.enums import Currency, TransactionType


@dataclass(frozen=True)
class DashboardQuery:
    """Parameters of one dashboard computation.

    accounts, when given, is a pre-fetched account list; such queries are
    never cached because a list cannot be represented in the cache key.
    """

    month_key: str
    account_id: str | None = None
    preferred_currency: Currency | None = None
    user_id: str | None = None
    accounts: list[AccountResult] | None = None


@dataclass(frozen=True)
class MonthSummary:
    income: Decimal
    expense: Decimal
    net: Decimal


@dataclass(frozen=True)
class CategoryBudgetSummary:
    category_id: str
    category_name: str
    planned: Decimal
    actual: Decimal
    remaining: Decimal

    @property
    def progress(self) -> Decimal:
        """Fraction of the plan spent, clamped to [0, 1].

        With nothing planned, any spending counts as fully used.
        """
        if self.planned <= 0:
            return Decimal(1) if self.actual > 0 else Decimal(0)
        return min(max(self.actual / self.planned, Decimal(0)), Decimal(1))


@dataclass(frozen=True)
class TransactionDisplay:
    """Transaction with its amount converted to the display currency."""

    id: str
    account_id: str
    category_id: str
    category_name: str
    category_color: str | None
    type: TransactionType
    amount: Decimal
    currency: Currency
    converted_amount: Decimal
    date: dt.date
    description: str | None


@dataclass(frozen=True)
class MonthComparison:
    previous_month: str
    previous_net: Decimal
    change: Decimal


@dataclass(frozen=True)
class MonthlyHistoryPoint:
    month: str
    income: Decimal
    expense: Decimal
    net: Decimal


@dataclass(frozen=True)
class DashboardData:
    """Dashboard snapshot for one month and account scope."""

    month: str
    currency: Currency
    summary: MonthSummary
    budgets: list[CategoryBudgetSummary] = field(default_factory=list)
    transactions: list[TransactionDisplay] = field(default_factory=list)
    comparison: MonthComparison | None = None
    history: list[MonthlyHistoryPoint] = field(default_factory=list)
    accounts: list[AccountResult] = field(default_factory=list)
    preferred_currency: Currency | None = None
