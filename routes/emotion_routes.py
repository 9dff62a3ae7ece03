"""Emotion log API endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, status

from routes.deps import get_current_user
from schemas.emotion_schema import (
	EmotionCreate,
	EmotionDistributionResponse,
	EmotionListParams,
	EmotionListResponse,
	EmotionResponse,
	WeeklyRecoveryResponse,
)
from services import emotion_service


router = APIRouter(prefix="/emotions", tags=["emotions"])


@router.post("", status_code=status.HTTP_201_CREATED, response_model=EmotionResponse)
async def create_emotion(
	payload: EmotionCreate,
	current_user: dict[str, Any] = Depends(get_current_user),
) -> dict[str, Any]:
	emotion = await emotion_service.create_emotion(current_user["id"], payload.model_dump())
	return {"emotion": emotion}


@router.get("", response_model=EmotionListResponse)
async def list_emotions(
	params: EmotionListParams = Depends(),
	current_user: dict[str, Any] = Depends(get_current_user),
) -> dict[str, Any]:
	result = await emotion_service.list_emotions(current_user["id"], limit=params.limit, offset=params.offset)
	return {"items": result.items, "next_offset": result.next_offset}


@router.get("/latest", response_model=EmotionResponse)
async def get_latest_emotion(current_user: dict[str, Any] = Depends(get_current_user)) -> dict[str, Any]:
	emotion = await emotion_service.get_latest_emotion(current_user["id"])
	if not emotion:
		raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No emotions found for this user")
	return {"emotion": emotion}


@router.get("/recovery", response_model=WeeklyRecoveryResponse)
async def get_weekly_recovery(
	days: int = Query(7, ge=1, le=31),
	current_user: dict[str, Any] = Depends(get_current_user),
) -> dict[str, Any]:
	return await emotion_service.get_weekly_recovery(current_user["id"], days=days)


@router.get("/distribution", response_model=EmotionDistributionResponse)
async def get_distribution(
	days: int | None = Query(None, ge=1, le=365),
	current_user: dict[str, Any] = Depends(get_current_user),
) -> dict[str, Any]:
	return await emotion_service.get_distribution(current_user["id"], days=days)


@router.get("/{emotion_id}", response_model=EmotionResponse)
async def get_emotion(
	emotion_id: int,
	current_user: dict[str, Any] = Depends(get_current_user),
) -> dict[str, Any]:
	emotion = await emotion_service.get_emotion(current_user["id"], emotion_id)
	if not emotion:
		raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Emotion not found")
	return {"emotion": emotion}


@router.delete("/{emotion_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_emotion(
	emotion_id: int,
	current_user: dict[str, Any] = Depends(get_current_user),
) -> None:
	deleted = await emotion_service.delete_emotion(current_user["id"], emotion_id)
	if not deleted:
		raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Emotion not found")
