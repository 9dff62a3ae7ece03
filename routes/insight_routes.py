"""Insight endpoints, including insight generation."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status

from routes.deps import get_current_user, to_http_error
from schemas.insight_schema import InsightCreate, InsightGenerateResponse, InsightListResponse, InsightResponse
from services import insight_service
from services.errors import InsufficientDataError


router = APIRouter(prefix="/insights", tags=["insights"])


@router.get("", response_model=InsightListResponse)
async def list_insights(current_user: dict[str, Any] = Depends(get_current_user)) -> dict[str, Any]:
	return {"items": await insight_service.list_insights(current_user["id"])}


@router.post("", status_code=status.HTTP_201_CREATED, response_model=InsightResponse)
async def create_insight(
	payload: InsightCreate,
	current_user: dict[str, Any] = Depends(get_current_user),
) -> dict[str, Any]:
	insight = await insight_service.create_insight(current_user["id"], payload.model_dump())
	return {"insight": insight}


@router.post("/generate", response_model=InsightGenerateResponse)
async def generate_insights(current_user: dict[str, Any] = Depends(get_current_user)) -> dict[str, Any]:
	try:
		return await insight_service.generate_insights(current_user["id"])
	except InsufficientDataError as exc:
		raise to_http_error(exc) from exc


@router.delete("/{insight_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_insight(
	insight_id: int,
	current_user: dict[str, Any] = Depends(get_current_user),
) -> None:
	deleted = await insight_service.delete_insight(current_user["id"], insight_id)
	if not deleted:
		raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Insight not found")
