"""Transaction API endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, status

from routes.deps import get_current_user, to_http_error
from schemas.transaction_schema import TransactionCreate, TransactionListResponse, TransactionResponse
from services import transaction_service
from services.errors import NotFoundError


router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.post("", status_code=status.HTTP_201_CREATED, response_model=TransactionResponse)
async def create_transaction(
	payload: TransactionCreate,
	current_user: dict[str, Any] = Depends(get_current_user),
) -> dict[str, Any]:
	try:
		transaction = await transaction_service.create_transaction(current_user["id"], payload.model_dump())
	except NotFoundError as exc:
		raise to_http_error(exc) from exc
	return {"transaction": transaction}


@router.get("", response_model=TransactionListResponse)
async def list_transactions(
	limit: int | None = Query(None, ge=1, le=500),
	current_user: dict[str, Any] = Depends(get_current_user),
) -> dict[str, Any]:
	items = await transaction_service.list_transactions(current_user["id"], limit=limit)
	return {"items": items}


@router.get("/{transaction_id}", response_model=TransactionResponse)
async def get_transaction(
	transaction_id: int,
	current_user: dict[str, Any] = Depends(get_current_user),
) -> dict[str, Any]:
	transaction = await transaction_service.get_transaction(current_user["id"], transaction_id)
	if not transaction:
		raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Transaction not found")
	return {"transaction": transaction}


@router.delete("/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_transaction(
	transaction_id: int,
	current_user: dict[str, Any] = Depends(get_current_user),
) -> None:
	deleted = await transaction_service.delete_transaction(current_user["id"], transaction_id)
	if not deleted:
		raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Transaction not found")
