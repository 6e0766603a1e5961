"""Transaction API schemas."""

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from finboard.domain.enums import Currency, TransactionType


class TransactionCreateRequest(BaseModel):
    """Request body for creating a transaction."""

    account_id: str = Field(..., min_length=1)
    category_id: str = Field(..., min_length=1)
    type: TransactionType
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    currency: Currency
    date: dt.date
    description: str | None = Field(default=None, max_length=500)


class TransactionUpdateRequest(BaseModel):
    """Request body for updating a transaction (partial)."""

    account_id: str | None = Field(default=None, min_length=1)
    category_id: str | None = Field(default=None, min_length=1)
    type: TransactionType | None = None
    amount: Decimal | None = Field(default=None, gt=0, max_digits=12, decimal_places=2)
    currency: Currency | None = None
    date: dt.date | None = None
    description: str | None = Field(default=None, max_length=500)


class TransactionResponse(BaseModel):
    """Transaction detail response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    account_id: str
    category_id: str
    category_name: str
    type: TransactionType
    amount: Decimal
    currency: Currency
    date: dt.date
    description: str | None
