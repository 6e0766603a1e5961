"""Transactions API: create, update, delete. Each write invalidates the dashboard cache."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from finboard.api.v1.dependencies import get_transaction_service, get_user_id
from finboard.application.dtos.finance import TransactionCreate, TransactionUpdate
from finboard.application.services import TransactionService
from finboard.core.limiter import limit_writes
from finboard.schemas.transaction import (
    TransactionCreateRequest,
    TransactionResponse,
    TransactionUpdateRequest,
)

router = APIRouter()


@router.post("", response_model=TransactionResponse, status_code=201)
@limit_writes
async def create_transaction(
    request: Request,
    body: TransactionCreateRequest,
    user_id: Annotated[str | None, Depends(get_user_id)],
    service: Annotated[TransactionService, Depends(get_transaction_service)],
):
    created = await service.create(TransactionCreate(**body.model_dump()), user_id=user_id)
    return TransactionResponse.model_validate(created)


@router.patch("/{transaction_id}", response_model=TransactionResponse)
@limit_writes
async def update_transaction(
    request: Request,
    transaction_id: str,
    body: TransactionUpdateRequest,
    user_id: Annotated[str | None, Depends(get_user_id)],
    service: Annotated[TransactionService, Depends(get_transaction_service)],
):
    """Partial update; only fields present in the body change."""
    changes = TransactionUpdate(**body.model_dump(exclude_unset=True))
    updated = await service.update(transaction_id, changes, user_id=user_id)
    return TransactionResponse.model_validate(updated)


@router.delete("/{transaction_id}", status_code=204)
@limit_writes
async def delete_transaction(
    request: Request,
    transaction_id: str,
    user_id: Annotated[str | None, Depends(get_user_id)],
    service: Annotated[TransactionService, Depends(get_transaction_service)],
) -> None:
    await service.delete(transaction_id, user_id=user_id)
