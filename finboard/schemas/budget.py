"""Budget API schemas."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from finboard.core.constants import MONTH_KEY_PATTERN
from finboard.domain.enums import Currency


class BudgetUpsertRequest(BaseModel):
    """Request body for PUT /budgets (create or replace)."""

    account_id: str = Field(..., min_length=1)
    category_id: str = Field(..., min_length=1)
    month: str = Field(..., pattern=MONTH_KEY_PATTERN, description="YYYY-MM")
    planned: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    currency: Currency


class BudgetResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    account_id: str
    category_id: str
    month: date
    planned: Decimal
    currency: Currency
