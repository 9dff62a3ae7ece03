"""Spending analytics endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query

from routes.deps import get_current_user
from schemas.transaction_schema import CategorySpendingResponse, EmotionSpendingResponse, FinancialSummary
from services import analytics_service


router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("/spending-by-emotion", response_model=EmotionSpendingResponse)
async def spending_by_emotion(
	days: int | None = Query(None, ge=1, le=365),
	current_user: dict[str, Any] = Depends(get_current_user),
) -> dict[str, Any]:
	items = await analytics_service.spending_by_emotion(current_user["id"], days=days)
	return {"items": items}


@router.get("/spending-by-category", response_model=CategorySpendingResponse)
async def spending_by_category(
	days: int | None = Query(None, ge=1, le=365),
	current_user: dict[str, Any] = Depends(get_current_user),
) -> dict[str, Any]:
	items = await analytics_service.spending_by_category(current_user["id"], days=days)
	return {"items": items}


@router.get("/summary", response_model=FinancialSummary)
async def financial_summary(
	days: int = Query(30, ge=1, le=365),
	current_user: dict[str, Any] = Depends(get_current_user),
) -> dict[str, Any]:
	return await analytics_service.financial_summary(current_user["id"], days=days)
