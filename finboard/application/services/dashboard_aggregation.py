"""Dashboard aggregation: the compute function wrapped by the dashboard cache.

DashboardAggregator is an async callable (DashboardQuery -> DashboardData)
injected into DashboardCacheService at startup. It opens its own session
(it runs inside a shared single-flight load, not inside one request) and
is side-effect free.

The arithmetic lives in the module-level helpers so it can be tested
without a database.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable
from datetime import date
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from finboard.application.dtos.dashboard import (
    CategoryBudgetSummary,
    DashboardData,
    DashboardQuery,
    MonthComparison,
    MonthlyHistoryPoint,
    MonthSummary,
    TransactionDisplay,
)
from finboard.application.dtos.finance import AccountResult, BudgetResult, TransactionResult
from finboard.domain.currency import CurrencyConverter, round_money
from finboard.domain.enums import Currency, TransactionType
from finboard.domain.exceptions import ResourceNotFoundException
from finboard.infrastructure.persistence.repositories import (
    AccountRepository,
    BudgetRepository,
    TransactionRepository,
)
from finboard.shared.telemetry.tracing import traced
from finboard.shared.utils.months import month_key_for, parse_month_key, shift_month

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
DEFAULT_DISPLAY_CURRENCY = Currency.USD


def to_display(
    transactions: Iterable[TransactionResult],
    currency: Currency,
    converter: CurrencyConverter,
) -> list[TransactionDisplay]:
    """Attach converted_amount (in currency) to each transaction, order kept."""
    return [
        TransactionDisplay(
            id=t.id,
            account_id=t.account_id,
            category_id=t.category_id,
            category_name=t.category_name,
            category_color=t.category_color,
            type=t.type,
            amount=t.amount,
            currency=t.currency,
            converted_amount=converter.convert(t.amount, t.currency, currency),
            date=t.date,
            description=t.description,
        )
        for t in transactions
    ]


def summarize(transactions: Iterable[TransactionDisplay]) -> MonthSummary:
    """Income, expense (positive), and net of converted amounts."""
    income = ZERO
    expense = ZERO
    for t in transactions:
        if t.type == TransactionType.INCOME:
            income += t.converted_amount
        else:
            expense += abs(t.converted_amount)
    return MonthSummary(
        income=round_money(income),
        expense=round_money(expense),
        net=round_money(income - expense),
    )


def summarize_budgets(
    budgets: Iterable[tuple[BudgetResult, str]],
    transactions: Iterable[TransactionDisplay],
    currency: Currency,
    converter: CurrencyConverter,
) -> list[CategoryBudgetSummary]:
    """Planned vs. actual expense per budgeted category.

    Budgets of the same category in several accounts are added together.
    """
    spent: dict[str, Decimal] = defaultdict(lambda: ZERO)
    for t in transactions:
        if t.type == TransactionType.EXPENSE:
            spent[t.category_id] += abs(t.converted_amount)

    planned: dict[str, Decimal] = defaultdict(lambda: ZERO)
    names: dict[str, str] = {}
    for budget, category_name in budgets:
        planned[budget.category_id] += converter.convert(budget.planned, budget.currency, currency)
        names[budget.category_id] = category_name

    summaries = []
    for category_id, plan in planned.items():
        actual = round_money(spent[category_id])
        summaries.append(
            CategoryBudgetSummary(
                category_id=category_id,
                category_name=names[category_id],
                planned=round_money(plan),
                actual=actual,
                remaining=round_money(plan - actual),
            )
        )
    summaries.sort(key=lambda s: s.category_name)
    return summaries


def build_history(
    totals: Iterable[tuple[date, str, Currency, Decimal]],
    last_month: date,
    months: int,
    currency: Currency,
    converter: CurrencyConverter,
) -> list[MonthlyHistoryPoint]:
    """Per-month income/expense/net for `months` months ending at last_month, oldest first.

    Months without transactions appear with zeros.
    """
    income: dict[date, Decimal] = defaultdict(lambda: ZERO)
    expense: dict[date, Decimal] = defaultdict(lambda: ZERO)
    for month, kind, source_currency, amount in totals:
        converted = converter.convert(amount, source_currency, currency)
        if kind == TransactionType.INCOME.value:
            income[month] += converted
        else:
            expense[month] += abs(converted)

    points = []
    for offset in range(months - 1, -1, -1):
        month = shift_month(last_month, -offset)
        points.append(
            MonthlyHistoryPoint(
                month=month_key_for(month),
                income=round_money(income[month]),
                expense=round_money(expense[month]),
                net=round_money(income[month] - expense[month]),
            )
        )
    return points


def compare_with_previous(summary: MonthSummary, previous: MonthlyHistoryPoint) -> MonthComparison:
    return MonthComparison(
        previous_month=previous.month,
        previous_net=previous.net,
        change=round_money(summary.net - previous.net),
    )


class DashboardAggregator:
    """Builds DashboardData from the ledger tables."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        converter: CurrencyConverter | None = None,
        history_months: int = 6,
    ) -> None:
        self.session_factory = session_factory
        self.converter = converter or CurrencyConverter()
        self.history_months = history_months

    @traced("dashboard.aggregate")
    async def __call__(self, query: DashboardQuery) -> DashboardData:
        month = parse_month_key(query.month_key)
        currency = query.preferred_currency or DEFAULT_DISPLAY_CURRENCY
        history_start = shift_month(month, -(self.history_months - 1))
        # History must reach the previous month for the comparison.
        first_month = min(history_start, shift_month(month, -1))

        async with self.session_factory() as session:
            accounts = await self._resolve_accounts(session, query)
            account_ids = [a.id for a in accounts]
            transactions = await TransactionRepository(session).list_for_month(account_ids, month)
            budgets = await BudgetRepository(session).list_for_month(account_ids, month)
            totals = await TransactionRepository(session).monthly_totals(
                account_ids, first_month, month
            )

        display = to_display(transactions, currency, self.converter)
        summary = summarize(display)
        history = build_history(totals, month, self.history_months, currency, self.converter)
        previous = build_history(totals, shift_month(month, -1), 1, currency, self.converter)[0]
        logger.debug(
            "Dashboard aggregated: month=%s accounts=%d transactions=%d",
            query.month_key,
            len(account_ids),
            len(display),
        )
        return DashboardData(
            month=query.month_key,
            currency=currency,
            summary=summary,
            budgets=summarize_budgets(budgets, display, currency, self.converter),
            transactions=display,
            comparison=compare_with_previous(summary, previous),
            history=history,
            accounts=accounts,
            preferred_currency=query.preferred_currency,
        )

    async def _resolve_accounts(
        self, session: AsyncSession, query: DashboardQuery
    ) -> list[AccountResult]:
        """Accounts in scope: pre-fetched list, one account, or all of the user's."""
        if query.accounts is not None:
            if query.account_id:
                return [a for a in query.accounts if a.id == query.account_id]
            return list(query.accounts)
        repo = AccountRepository(session)
        if query.account_id:
            account = await repo.get_by_id(query.account_id)
            if account is None:
                raise ResourceNotFoundException("account", query.account_id)
            return [account]
        return await repo.list_for_user(query.user_id)
