"""Emotion analysis of free text and of a user's logged history.

Text analysis prefers the Gemini model when one is configured and falls back
to a keyword classifier otherwise, or when the model answer is unusable.
"""

from __future__ import annotations

import logging
from collections import Counter
from statistics import pstdev
from typing import Any, Iterable, Mapping

from pydantic import ValidationError

from agent import LLMError, invoke_json, llm_configured
from agent.prompts import ADVANCED_ANALYSIS_PROMPT, EMOTION_ANALYSIS_PROMPT
from agent.utils import to_prompt_json
from schemas.analysis_schema import AdvancedAnalysisResult, EmotionAnalysisResult
from schemas.emotion_schema import EMOTION_TYPES, recovery_percentage_for
from services import emotion_service, health_service, transaction_service
from services.errors import NotFoundError

logger = logging.getLogger(__name__)

# Checked in this order; the first emotion wins a tie.
EMOTION_KEYWORDS: dict[str, tuple[str, ...]] = {
	"happy": ("happy", "joy", "exciting", "pleased", "thrilled", "delighted"),
	"content": ("content", "satisfied", "comfortable", "pleasant", "calm"),
	"worried": ("worried", "anxious", "concern", "uncertain", "nervous"),
	"stressed": ("stressed", "overwhelmed", "pressure", "tense", "exhausted"),
}

EMOTION_TRIGGERS: dict[str, list[str]] = {
	"happy": ["achievement", "social connection", "good news"],
	"content": ["stability", "balance", "routine"],
	"worried": ["uncertainty", "unexpected expenses", "future concerns"],
	"stressed": ["work pressure", "financial strain", "time constraints"],
	"neutral": ["daily routine", "typical activities"],
}

EMOTION_RECOMMENDATIONS: dict[str, list[str]] = {
	"happy": [
		"Consider increasing your savings rate while you're feeling positive",
		"This is a good time to review your financial goals",
		"Your positive mood can help with long-term financial planning",
	],
	"content": [
		"This balanced emotional state is ideal for making financial decisions",
		"Consider reviewing your investment portfolio",
		"A good time to evaluate recurring expenses",
	],
	"worried": [
		"Try to avoid making major financial decisions when worried",
		"Consider speaking with someone you trust about your concerns",
		"Practice a quick relaxation technique before financial planning",
	],
	"stressed": [
		"Postpone major financial decisions if possible",
		"Focus on self-care to reduce stress levels",
		"Consider implementing a 24-hour rule for purchases when stressed",
	],
	"neutral": [
		"Maintain awareness of how your emotions affect financial decisions",
		"This is a good time for routine financial maintenance",
		"Consider tracking your mood alongside spending",
	],
}

_SENTIMENTS = {"happy": "positive", "content": "positive", "worried": "negative", "stressed": "negative"}

MAX_PATTERN_TRIGGERS = 5
HEALTH_SAMPLE_LIMIT = 200

FALLBACK_ANALYSIS: dict[str, Any] = {
	"emotion_patterns": [
		{
			"pattern_name": "Insufficient Data for Pattern Recognition",
			"description": (
				"There is currently not enough data to identify clear emotional patterns. Continue tracking "
				"your emotions, finances, and health metrics to enable more accurate pattern recognition."
			),
			"confidence": 0.3,
			"affected_metrics": ["all metrics"],
			"recommended_actions": [
				"Continue logging your emotions daily",
				"Track your spending and categorize transactions",
				"Record health metrics consistently",
			],
			"severity": "low",
		}
	],
	"emotion_finance_correlations": [
		{
			"emotion_type": "neutral",
			"spending_category": "general",
			"correlation": 0,
			"average_amount": 0,
			"description": "Insufficient data to establish correlation between emotions and spending patterns.",
			"recommended_action": (
				"Continue tracking both emotional states and financial transactions to identify potential connections."
			),
		}
	],
	"emotion_health_correlations": [
		{
			"emotion_type": "neutral",
			"health_metric": "heartRate",
			"correlation": 0,
			"description": "Insufficient data to establish correlation between emotions and health metrics.",
			"recommended_action": (
				"Continue tracking both emotional states and health metrics to identify potential connections."
			),
		}
	],
	"overall_insights": (
		"Currently, there isn't enough data to provide comprehensive insights about the relationships between "
		"your emotions, financial behaviors, and health metrics. Continue using the app consistently to track "
		"these aspects of your life, and more meaningful patterns will emerge over time."
	),
	"primary_influencers": ["Need more data to identify primary influencers"],
	"action_plan": [
		"Log your emotions at least once daily",
		"Track all financial transactions and categorize them accurately",
		"Record health metrics regularly, especially after significant emotional events",
	],
}


def _keyword_counts(text: str) -> dict[str, int]:
	lowered = text.lower()
	return {
		emotion: sum(1 for keyword in keywords if keyword in lowered)
		for emotion, keywords in EMOTION_KEYWORDS.items()
	}


def classify_text(text: str) -> dict[str, Any]:
	"""Keyword-based emotion analysis in a single pass over the keyword table."""

	counts = _keyword_counts(text)
	max_count = max(counts.values())
	if max_count == 0:
		primary = "neutral"
		intensity = 0.5
		detected = ["neutral"]
	else:
		primary = next(emotion for emotion, count in counts.items() if count == max_count)
		intensity = min(0.5 + 0.1 * max_count, 1.0)
		detected = [emotion for emotion, count in counts.items() if count > 0]

	return {
		"primary_emotion": primary,
		"emotion_intensity": round(intensity, 2),
		"detected_emotions": detected,
		"emotional_triggers": list(EMOTION_TRIGGERS[primary]),
		"recommendations": list(EMOTION_RECOMMENDATIONS[primary]),
		"sentiment": _SENTIMENTS.get(primary, "neutral"),
		"confidence": round(min(0.7 + 0.05 * max_count, 0.95), 2),
		"source": "keywords",
	}


async def analyze_text(text: str) -> dict[str, Any]:
	if not llm_configured():
		return classify_text(text)

	try:
		data = await invoke_json(EMOTION_ANALYSIS_PROMPT, text=text)
		result = EmotionAnalysisResult.model_validate(data)
	except (LLMError, ValidationError) as exc:
		logger.warning("Falling back to keyword emotion analysis: %s", exc)
		return classify_text(text)

	return result.model_dump() | {"source": "llm"}


def _emotional_stability(types: Iterable[str]) -> float:
	scores = [recovery_percentage_for(emotion) for emotion in types]
	if len(scores) < 2:
		return 1.0
	stability = 1 - pstdev(scores) / 50
	return round(min(max(stability, 0.0), 1.0), 4)


def _pattern_triggers(emotions: Iterable[Mapping[str, Any]]) -> list[str]:
	counter: Counter[str] = Counter()
	for emotion in emotions:
		counter.update(EMOTION_TRIGGERS[emotion["type"]])
		notes = emotion.get("notes")
		if notes:
			from_notes = classify_text(notes)["primary_emotion"]
			if from_notes != "neutral" and from_notes != emotion["type"]:
				counter.update(EMOTION_TRIGGERS[from_notes])
	# Counter.most_common keeps first-seen order among equal counts.
	return [trigger for trigger, _ in counter.most_common(MAX_PATTERN_TRIGGERS)]


def build_pattern_report(emotions: list[Mapping[str, Any]]) -> dict[str, Any]:
	types = [emotion["type"] for emotion in emotions]
	counts = Counter(types)
	primary = emotion_service.dominant_emotion(types)
	breakdown = [
		{"emotion": emotion, "percentage": round(counts[emotion] / len(types) * 100, 2)}
		for emotion in reversed(EMOTION_TYPES)
	]
	return {
		"primary_emotion_trend": primary,
		"emotional_stability": _emotional_stability(types),
		"emotional_triggers": _pattern_triggers(emotions),
		"recommendations": list(EMOTION_RECOMMENDATIONS[primary]),
		"emotion_breakdown": breakdown,
		"entries_analyzed": len(types),
	}


async def analyze_patterns(user_id: int) -> dict[str, Any]:
	emotions = await emotion_service.fetch_emotions_since(user_id)
	if not emotions:
		raise NotFoundError("No emotions found for this user")
	return build_pattern_report(emotions)


def fallback_analysis() -> dict[str, Any]:
	return AdvancedAnalysisResult.model_validate(FALLBACK_ANALYSIS).model_dump()


async def advanced_analysis(user_id: int) -> dict[str, Any]:
	"""Cross-domain analysis of emotions, transactions and health samples."""

	if not llm_configured():
		return fallback_analysis()

	emotions = await emotion_service.fetch_emotions_since(user_id)
	transactions = await transaction_service.list_transactions(user_id)
	health_data = await health_service.list_health_data(user_id, limit=HEALTH_SAMPLE_LIMIT)
	payload = {
		"emotions": [
			{"type": e["type"], "date": e["date"], "notes": e.get("notes")} for e in emotions
		],
		"transactions": [
			{
				"amount": t["amount"],
				"category": t["category"],
				"description": t["description"],
				"date": t["date"],
				"emotion": t["emotion"]["type"] if t.get("emotion") else None,
			}
			for t in transactions
		],
		"health_data": [
			{"type": h["type"], "value": h["value"], "unit": h["unit"], "timestamp": h["timestamp"]}
			for h in health_data
		],
	}

	try:
		data = await invoke_json(ADVANCED_ANALYSIS_PROMPT, data=to_prompt_json(payload))
		result = AdvancedAnalysisResult.model_validate(data)
	except (LLMError, ValidationError) as exc:
		logger.warning("Advanced analysis unavailable, serving fallback: %s", exc)
		return fallback_analysis()

	return result.model_dump() | {"source": "llm"}


__all__ = [
	"EMOTION_KEYWORDS",
	"EMOTION_TRIGGERS",
	"EMOTION_RECOMMENDATIONS",
	"classify_text",
	"analyze_text",
	"build_pattern_report",
	"analyze_patterns",
	"fallback_analysis",
	"advanced_analysis",
]
