"""Emotion analysis endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status

from routes.deps import get_current_user, to_http_error
from schemas.analysis_schema import (
	AdvancedAnalysisResult,
	EmotionAnalysisResult,
	EmotionPatternReport,
	TextAnalysisRequest,
)
from services import analysis_service
from services.errors import NotFoundError


router = APIRouter(prefix="/emotion-analysis", tags=["emotion analysis"])


@router.post("/analyze", response_model=EmotionAnalysisResult)
async def analyze_text(
	payload: TextAnalysisRequest | None = None,
	current_user: dict[str, Any] = Depends(get_current_user),
) -> dict[str, Any]:
	if payload is None or not payload.text:
		raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Text is required")
	return await analysis_service.analyze_text(payload.text)


@router.post("/patterns", response_model=EmotionPatternReport)
async def analyze_patterns(current_user: dict[str, Any] = Depends(get_current_user)) -> dict[str, Any]:
	try:
		return await analysis_service.analyze_patterns(current_user["id"])
	except NotFoundError as exc:
		raise to_http_error(exc) from exc


@router.post("/advanced", response_model=AdvancedAnalysisResult)
async def advanced_analysis(current_user: dict[str, Any] = Depends(get_current_user)) -> dict[str, Any]:
	return await analysis_service.advanced_analysis(current_user["id"])
