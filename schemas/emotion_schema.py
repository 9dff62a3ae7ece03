"""Pydantic schemas for the emotion tracking domain."""

from __future__ import annotations

from datetime import date, datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator


EmotionType = Literal["stressed", "worried", "neutral", "content", "happy"]

# Ordered from most negative to most positive.
EMOTION_TYPES: tuple[str, ...] = ("stressed", "worried", "neutral", "content", "happy")

EMOTION_RECOVERY_PERCENTAGES: Dict[str, int] = {
	"happy": 100,
	"content": 75,
	"neutral": 50,
	"worried": 30,
	"stressed": 20,
}


def recovery_percentage_for(emotion_type: str) -> int:
	"""Return the recovery percentage shown for an emotion type."""
	try:
		return EMOTION_RECOVERY_PERCENTAGES[emotion_type]
	except KeyError as exc:
		raise ValueError(f"Unsupported emotion type: {emotion_type}") from exc


class EmotionCreate(BaseModel):
	type: EmotionType
	notes: Optional[str] = Field(default=None, max_length=2000)
	date: Optional[datetime] = None

	@field_validator("notes")
	@classmethod
	def _normalize_notes(cls, notes: Optional[str]) -> Optional[str]:
		if notes is None:
			return notes
		return notes.strip() or None


class EmotionOut(BaseModel):
	id: int
	type: EmotionType
	notes: Optional[str] = None
	date: datetime
	recovery_percentage: int
	emoji: str
	color: str


class EmotionResponse(BaseModel):
	emotion: EmotionOut


class EmotionListResponse(BaseModel):
	items: List[EmotionOut]
	next_offset: Optional[int] = None


class EmotionListParams(BaseModel):
	limit: int = Field(default=30, ge=1, le=100)
	offset: int = Field(default=0, ge=0)


class DailyRecovery(BaseModel):
	day: date
	recovery_percentage: Optional[float] = None
	dominant_emotion: Optional[EmotionType] = None
	entries: int = 0


class WeeklyRecoveryResponse(BaseModel):
	items: List[DailyRecovery]
	average: Optional[float] = None


class EmotionDistributionResponse(BaseModel):
	days: Optional[int] = None
	counts: Dict[str, int]


__all__ = [
	"EmotionType",
	"EMOTION_TYPES",
	"EMOTION_RECOVERY_PERCENTAGES",
	"recovery_percentage_for",
	"EmotionCreate",
	"EmotionOut",
	"EmotionResponse",
	"EmotionListResponse",
	"EmotionListParams",
	"DailyRecovery",
	"WeeklyRecoveryResponse",
	"EmotionDistributionResponse",
]
