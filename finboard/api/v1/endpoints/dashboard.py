"""Mobile dashboard API: cached month summary for one account."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from finboard.api.v1.dependencies import get_account_repo, get_dashboard_cache, get_user_id
from finboard.application.dtos.dashboard import DashboardData, DashboardQuery
from finboard.application.services.transaction_service import require_owned_account
from finboard.core.config import get_settings
from finboard.core.limiter import limit_dashboard
from finboard.domain.currency import round_money
from finboard.domain.enums import Currency
from finboard.domain.exceptions import ValidationException
from finboard.infrastructure.cache import DashboardCacheService
from finboard.infrastructure.persistence.repositories import AccountRepository
from finboard.schemas.dashboard import (
    BudgetProgressResponse,
    DashboardSummaryResponse,
    MobileDashboardResponse,
    RecentTransactionCategory,
    RecentTransactionResponse,
)
from finboard.shared.utils.datetime import utc_now
from finboard.shared.utils.months import is_month_key, month_key_for

router = APIRouter()


def _money(value: Decimal) -> str:
    return f"{round_money(value):.2f}"


def to_mobile_response(data: DashboardData, recent_limit: int = 5) -> MobileDashboardResponse:
    """Shrink a DashboardData snapshot to what the mobile dashboard screen shows."""
    return MobileDashboardResponse(
        month=data.month,
        currency=data.currency.value,
        summary=DashboardSummaryResponse(
            total_income=_money(data.summary.income),
            total_expenses=_money(data.summary.expense),
            net_result=_money(data.summary.net),
        ),
        budget_progress=[
            BudgetProgressResponse(
                category_id=b.category_id,
                category_name=b.category_name,
                budgeted=_money(b.planned),
                spent=_money(b.actual),
                remaining=_money(b.remaining),
                percent_used=int((b.progress * 100).quantize(Decimal(1), rounding=ROUND_HALF_UP)),
            )
            for b in data.budgets
        ],
        recent_transactions=[
            RecentTransactionResponse(
                id=t.id,
                amount=_money(t.converted_amount),
                description=t.description,
                date=t.date.isoformat(),
                category=RecentTransactionCategory(name=t.category_name, color=t.category_color),
            )
            for t in data.transactions[:recent_limit]
        ],
    )


@router.get("", response_model=MobileDashboardResponse)
@limit_dashboard
async def get_dashboard(
    request: Request,
    user_id: Annotated[str | None, Depends(get_user_id)],
    account_repo: Annotated[AccountRepository, Depends(get_account_repo)],
    cache: Annotated[DashboardCacheService, Depends(get_dashboard_cache)],
    account_id: Annotated[str | None, Query(alias="accountId")] = None,
    month: Annotated[str | None, Query(description="YYYY-MM; defaults to the current month")] = None,
    currency: Annotated[Currency | None, Query(description="Display currency")] = None,
):
    """Dashboard summary for one account and month (served from the dashboard cache)."""
    if not account_id:
        raise ValidationException("accountId is required", field="accountId")
    if month:
        if not is_month_key(month):
            raise ValidationException("month must be in YYYY-MM format", field="month")
        month_key = month
    else:
        month_key = month_key_for(utc_now().date())

    await require_owned_account(account_repo, account_id, user_id)

    data = await cache.get_cached_dashboard_data(
        DashboardQuery(
            month_key=month_key,
            account_id=account_id,
            preferred_currency=currency,
            user_id=user_id,
        )
    )
    return to_mobile_response(data, get_settings().dashboard_recent_transactions)
