"""Budget API endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, status

from routes.deps import get_current_user, to_http_error
from schemas.budget_schema import (
	BudgetCreate,
	BudgetListResponse,
	BudgetResponse,
	BudgetSpending,
	BudgetType,
	BudgetUpdate,
)
from services import budget_service
from services.errors import ServiceError


router = APIRouter(prefix="/budgets", tags=["budgets"])


def _not_found() -> HTTPException:
	return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Budget not found")


@router.post("", status_code=status.HTTP_201_CREATED, response_model=BudgetResponse)
async def create_budget(
	payload: BudgetCreate,
	current_user: dict[str, Any] = Depends(get_current_user),
) -> dict[str, Any]:
	budget = await budget_service.create_budget(current_user["id"], payload.model_dump())
	return {"budget": budget}


@router.get("", response_model=BudgetListResponse)
async def list_budgets(current_user: dict[str, Any] = Depends(get_current_user)) -> dict[str, Any]:
	return {"items": await budget_service.list_budgets(current_user["id"])}


@router.get("/active", response_model=BudgetListResponse)
async def list_active_budgets(
	budget_type: BudgetType | None = Query(None, alias="type"),
	current_user: dict[str, Any] = Depends(get_current_user),
) -> dict[str, Any]:
	items = await budget_service.list_active_budgets(current_user["id"], budget_type)
	return {"items": items}


@router.get("/{budget_id}", response_model=BudgetResponse)
async def get_budget(
	budget_id: int,
	current_user: dict[str, Any] = Depends(get_current_user),
) -> dict[str, Any]:
	budget = await budget_service.get_budget(current_user["id"], budget_id)
	if not budget:
		raise _not_found()
	return {"budget": budget}


@router.patch("/{budget_id}", response_model=BudgetResponse)
async def update_budget(
	budget_id: int,
	payload: BudgetUpdate,
	current_user: dict[str, Any] = Depends(get_current_user),
) -> dict[str, Any]:
	# exclude_unset keeps an explicit "all" category, which normalises to None.
	updates = payload.model_dump(exclude_unset=True)
	try:
		budget = await budget_service.update_budget(current_user["id"], budget_id, updates)
	except ServiceError as exc:
		raise to_http_error(exc) from exc
	if not budget:
		raise _not_found()
	return {"budget": budget}


@router.delete("/{budget_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_budget(
	budget_id: int,
	current_user: dict[str, Any] = Depends(get_current_user),
) -> None:
	deleted = await budget_service.delete_budget(current_user["id"], budget_id)
	if not deleted:
		raise _not_found()


@router.get("/{budget_id}/spending", response_model=BudgetSpending)
async def get_budget_spending(
	budget_id: int,
	current_user: dict[str, Any] = Depends(get_current_user),
) -> dict[str, Any]:
	spending = await budget_service.get_budget_spending(current_user["id"], budget_id)
	if spending is None:
		raise _not_found()
	return spending
