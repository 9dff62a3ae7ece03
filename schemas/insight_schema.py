"""Pydantic schemas for stored insights and generated insight reports."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class InsightCreate(BaseModel):
	type: str = Field(..., min_length=1, max_length=64)
	title: str = Field(..., min_length=1, max_length=200)
	description: str = Field(..., min_length=1, max_length=4000)


class InsightOut(BaseModel):
	id: int
	type: str
	title: str
	description: str
	date: datetime
	updated_date: Optional[datetime] = None


class InsightResponse(BaseModel):
	insight: InsightOut


class InsightListResponse(BaseModel):
	items: List[InsightOut]


class InsightReport(BaseModel):
	"""Structured result of an emotion/finance insight pass."""

	emotion_finance_correlations: List[str] = Field(default_factory=list)
	spending_triggers: List[str] = Field(default_factory=list)
	positive_patterns: List[str] = Field(default_factory=list)
	improvement_areas: List[str] = Field(default_factory=list)
	actionable_insights: List[str] = Field(default_factory=list)
	summary: str = ""


class InsightGenerateResponse(BaseModel):
	message: str
	insights: List[InsightOut]
	summary: str
	source: str


__all__ = [
	"InsightCreate",
	"InsightOut",
	"InsightResponse",
	"InsightListResponse",
	"InsightReport",
	"InsightGenerateResponse",
]
