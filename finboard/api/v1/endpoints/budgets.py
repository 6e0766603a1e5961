"""Budgets API: set (upsert) and delete monthly category budgets."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from finboard.api.v1.dependencies import get_budget_service, get_user_id
from finboard.application.services import BudgetService
from finboard.core.limiter import limit_writes
from finboard.schemas.budget import BudgetResponse, BudgetUpsertRequest

router = APIRouter()


@router.put("", response_model=BudgetResponse)
@limit_writes
async def set_budget(
    request: Request,
    body: BudgetUpsertRequest,
    user_id: Annotated[str | None, Depends(get_user_id)],
    service: Annotated[BudgetService, Depends(get_budget_service)],
):
    """Create or replace the budget for (account, category, month)."""
    budget = await service.set_budget(
        account_id=body.account_id,
        category_id=body.category_id,
        month_key=body.month,
        planned=body.planned,
        currency=body.currency,
        user_id=user_id,
    )
    return BudgetResponse.model_validate(budget)


@router.delete("/{budget_id}", status_code=204)
@limit_writes
async def delete_budget(
    request: Request,
    budget_id: str,
    user_id: Annotated[str | None, Depends(get_user_id)],
    service: Annotated[BudgetService, Depends(get_budget_service)],
) -> None:
    await service.delete_budget(budget_id, user_id=user_id)
