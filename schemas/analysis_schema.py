"""Pydantic schemas for text emotion analysis and pattern reports."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from schemas.emotion_schema import EmotionType
from schemas.health_schema import HealthMetricType


Sentiment = Literal["positive", "negative", "neutral"]


class TextAnalysisRequest(BaseModel):
	text: Optional[str] = Field(default=None, max_length=5000)

	@field_validator("text")
	@classmethod
	def _strip_text(cls, text: Optional[str]) -> str:
		return text.strip() if text else ""


class EmotionAnalysisResult(BaseModel):
	primary_emotion: str
	emotion_intensity: float = Field(..., ge=0, le=1)
	detected_emotions: List[str]
	emotional_triggers: List[str]
	recommendations: List[str]
	sentiment: Sentiment
	confidence: float = Field(..., ge=0, le=1)
	source: Literal["llm", "keywords"] = "keywords"


class EmotionBreakdown(BaseModel):
	emotion: EmotionType
	percentage: float


class EmotionPatternReport(BaseModel):
	primary_emotion_trend: EmotionType
	emotional_stability: float = Field(..., ge=0, le=1)
	emotional_triggers: List[str]
	recommendations: List[str]
	emotion_breakdown: List[EmotionBreakdown]
	entries_analyzed: int


class AdvancedEmotionPattern(BaseModel):
	pattern_name: str
	description: str
	confidence: float = Field(..., ge=0, le=1)
	affected_metrics: List[str] = Field(..., min_length=1)
	recommended_actions: List[str] = Field(..., min_length=1)
	severity: Literal["low", "medium", "high"]


class EmotionFinanceCorrelation(BaseModel):
	emotion_type: EmotionType
	spending_category: str
	correlation: float = Field(..., ge=-1, le=1)
	average_amount: float
	description: str
	recommended_action: str


class EmotionHealthCorrelation(BaseModel):
	emotion_type: EmotionType
	health_metric: HealthMetricType
	correlation: float = Field(..., ge=-1, le=1)
	description: str
	recommended_action: str


class AdvancedAnalysisResult(BaseModel):
	emotion_patterns: List[AdvancedEmotionPattern] = Field(..., min_length=1)
	emotion_finance_correlations: List[EmotionFinanceCorrelation] = Field(..., min_length=1)
	emotion_health_correlations: List[EmotionHealthCorrelation] = Field(..., min_length=1)
	overall_insights: str
	primary_influencers: List[str] = Field(..., min_length=1)
	action_plan: List[str] = Field(..., min_length=1)
	source: Literal["llm", "fallback"] = "fallback"


__all__ = [
	"Sentiment",
	"TextAnalysisRequest",
	"EmotionAnalysisResult",
	"EmotionBreakdown",
	"EmotionPatternReport",
	"AdvancedEmotionPattern",
	"EmotionFinanceCorrelation",
	"EmotionHealthCorrelation",
	"AdvancedAnalysisResult",
]
