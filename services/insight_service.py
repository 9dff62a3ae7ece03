"""Stored insights and the emotion/finance insight generator."""

from __future__ import annotations

import logging
from collections import Counter
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping

from pydantic import ValidationError

from agent import LLMError, LLMResponseError, invoke_json, llm_configured
from agent.prompts import INSIGHTS_PROMPT
from agent.utils import to_prompt_json
from db import db_session
from schemas.insight_schema import InsightReport
from services import emotion_service, transaction_service
from services.analytics_service import compute_financial_summary, compute_spending_by_emotion
from services.errors import InsufficientDataError
from services.formatting import format_currency

logger = logging.getLogger(__name__)

INSIGHT_COLUMNS = "id, type, title, description, date, updated_date"
MIN_TRANSACTIONS = 3
MAX_INSIGHTS = 5

# (report field, stored insight type, title), in selection order.
INSIGHT_CATEGORIES: tuple[tuple[str, str, str], ...] = (
	("emotion_finance_correlations", "emotion-finance-correlation", "Emotion-Finance Pattern"),
	("spending_triggers", "spending-trigger", "Spending Trigger Identified"),
	("actionable_insights", "action-recommendation", "Recommended Action"),
)

_NEGATIVE_EMOTIONS = ("stressed", "worried")
_POSITIVE_EMOTIONS = ("happy", "content")


def _now() -> datetime:
	"""Return a timezone-aware UTC timestamp (patchable in tests)."""

	return datetime.now(timezone.utc)


def _serialize(row: Mapping[str, Any]) -> dict[str, Any]:
	return {
		"id": row["id"],
		"type": row["type"],
		"title": row["title"],
		"description": row["description"],
		"date": row["date"],
		"updated_date": row.get("updated_date"),
	}


async def list_insights(user_id: int) -> list[dict[str, Any]]:
	async with db_session() as conn:
		rows = await conn.fetch(
			f"SELECT {INSIGHT_COLUMNS} FROM insights WHERE user_id = $1 ORDER BY date DESC, id DESC",
			user_id,
		)
	return [_serialize(row) for row in rows]


async def create_insight(user_id: int, payload: Mapping[str, Any]) -> dict[str, Any]:
	now = _now()
	async with db_session() as conn:
		row = await conn.fetchrow(
			f"""
			INSERT INTO insights (user_id, type, title, description, date, updated_date)
			VALUES ($1, $2, $3, $4, $5, $5)
			RETURNING {INSIGHT_COLUMNS}
			""",
			user_id,
			payload["type"],
			payload["title"],
			payload["description"],
			now,
		)
	return _serialize(row)


async def delete_insight(user_id: int, insight_id: int) -> bool:
	async with db_session() as conn:
		row = await conn.fetchrow(
			"DELETE FROM insights WHERE id = $1 AND user_id = $2 RETURNING id",
			insight_id,
			user_id,
		)
	return bool(row)


def _emotion_of(transaction: Mapping[str, Any]) -> str | None:
	emotion = transaction.get("emotion")
	return emotion["type"] if emotion else None


def build_rule_based_report(
	emotions: list[Mapping[str, Any]],
	transactions: list[Mapping[str, Any]],
) -> dict[str, Any]:
	"""Derive an insight report from the user's own numbers, without a model."""

	by_emotion = [item for item in compute_spending_by_emotion(transactions) if item["amount"] > 0]
	by_emotion.sort(key=lambda item: -item["amount"])
	expenses = [t for t in transactions if t["amount"] < 0]
	summary = compute_financial_summary(transactions, None, days=0)

	correlations = [
		f"{item['percentage']:.0f}% of your emotion-linked spending ({format_currency(item['amount'])}) "
		f"happened while feeling {item['emotion']}"
		for item in by_emotion
	]

	triggers: list[str] = []
	for emotion in _NEGATIVE_EMOTIONS:
		linked = [t for t in expenses if _emotion_of(t) == emotion]
		if not linked:
			continue
		category, _ = Counter(t["category"] for t in linked).most_common(1)[0]
		total = sum(abs(t["amount"]) for t in linked)
		noun = "purchase" if len(linked) == 1 else "purchases"
		triggers.append(
			f"Feeling {emotion} came with {len(linked)} {noun} totalling {format_currency(total)}, mostly on {category}"
		)

	positive: list[str] = []
	if summary["savings_rate"] > 0:
		positive.append(f"You kept {summary['savings_rate'] * 100:.0f}% of your income as savings")
	positive_income = [t for t in transactions if t["amount"] > 0 and _emotion_of(t) in _POSITIVE_EMOTIONS]
	if positive_income:
		positive.append("Income events line up with your happier and more content days")

	improvements: list[str] = []
	negative_share = sum(item["percentage"] for item in by_emotion if item["emotion"] in _NEGATIVE_EMOTIONS)
	if negative_share >= 30:
		improvements.append(
			f"{negative_share:.0f}% of emotion-linked spending happens while stressed or worried"
		)
	unlinked = [t for t in expenses if _emotion_of(t) is None]
	if unlinked:
		improvements.append(f"{len(unlinked)} expenses have no emotion attached yet")

	actions: list[str] = []
	if triggers:
		actions.append("Try a 24-hour waiting period before purchases when you feel stressed or worried")
	if summary["top_spending_category"]:
		category = summary["top_spending_category"]
		actions.append(f"Set a budget for {category}, currently your largest expense category")
	if unlinked or not by_emotion:
		actions.append("Log how you feel with each transaction to reveal how your mood drives spending")
	if summary["savings_rate"] <= 0:
		actions.append("Aim to set aside a fixed share of every paycheck before spending")

	dominant = emotion_service.dominant_emotion([e["type"] for e in emotions])
	mood = f"Your most frequent mood is {dominant}. " if dominant else ""
	summary_text = (
		f"{mood}Across {len(transactions)} transactions you earned {format_currency(summary['income'])} "
		f"and spent {format_currency(summary['expenses'])}."
	)

	return {
		"emotion_finance_correlations": correlations,
		"spending_triggers": triggers,
		"positive_patterns": positive,
		"improvement_areas": improvements,
		"actionable_insights": actions,
		"summary": summary_text,
	}


def select_insights(report: Mapping[str, Any], limit: int = MAX_INSIGHTS) -> list[dict[str, str]]:
	"""Pick up to `limit` insights, alternating between categories."""

	queues = [
		[(kind, title, text) for text in report.get(field) or []]
		for field, kind, title in INSIGHT_CATEGORIES
	]
	selected: list[dict[str, str]] = []
	index = 0
	while len(selected) < limit and any(index < len(queue) for queue in queues):
		for queue in queues:
			if index < len(queue) and len(selected) < limit:
				kind, title, text = queue[index]
				selected.append({"type": kind, "title": title, "description": text})
		index += 1
	return selected


def _prompt_payload(emotions: Iterable[Mapping[str, Any]], transactions: Iterable[Mapping[str, Any]]) -> str:
	return to_prompt_json(
		{
			"emotions": [{"type": e["type"], "date": e["date"], "notes": e.get("notes")} for e in emotions],
			"finances": [
				{
					"amount": t["amount"],
					"category": t["category"],
					"description": t["description"],
					"date": t["date"],
					"currency": t["currency"],
					"emotion": _emotion_of(t),
				}
				for t in transactions
			],
		}
	)


async def _llm_report(emotions: list[Mapping[str, Any]], transactions: list[Mapping[str, Any]]) -> dict[str, Any]:
	data = await invoke_json(INSIGHTS_PROMPT, data=_prompt_payload(emotions, transactions))
	try:
		report = InsightReport.model_validate(data).model_dump()
	except ValidationError as exc:
		raise LLMResponseError(f"Insight report has an unexpected shape: {exc.error_count()} errors") from exc
	if not select_insights(report):
		raise LLMResponseError("Insight report contains no insights")
	return report


async def build_report(
	emotions: list[Mapping[str, Any]],
	transactions: list[Mapping[str, Any]],
) -> tuple[dict[str, Any], str]:
	if llm_configured():
		try:
			return await _llm_report(emotions, transactions), "llm"
		except LLMError as exc:
			logger.warning("Falling back to rule-based insights: %s", exc)
	return build_rule_based_report(emotions, transactions), "rules"


async def replace_insights(user_id: int, insights: list[Mapping[str, str]]) -> list[dict[str, Any]]:
	now = _now()
	stored: list[dict[str, Any]] = []
	async with db_session() as conn:
		async with conn.transaction():
			await conn.execute("DELETE FROM insights WHERE user_id = $1", user_id)
			for insight in insights:
				row = await conn.fetchrow(
					f"""
					INSERT INTO insights (user_id, type, title, description, date, updated_date)
					VALUES ($1, $2, $3, $4, $5, $5)
					RETURNING {INSIGHT_COLUMNS}
					""",
					user_id,
					insight["type"],
					insight["title"],
					insight["description"],
					now,
				)
				stored.append(_serialize(row))
	return stored


async def generate_insights(user_id: int) -> dict[str, Any]:
	transactions = await transaction_service.list_transactions(user_id)
	if len(transactions) < MIN_TRANSACTIONS:
		raise InsufficientDataError(
			"Not enough transaction data to generate insights",
			minimum_required=MIN_TRANSACTIONS,
			current_count=len(transactions),
		)

	emotions = await emotion_service.fetch_emotions_since(user_id)
	report, source = await build_report(emotions, transactions)
	stored = await replace_insights(user_id, select_insights(report))
	logger.info("Stored %d %s insights for user %s", len(stored), source, user_id)

	return {
		"message": "Insights generated and stored successfully",
		"insights": stored,
		"summary": report["summary"],
		"source": source,
	}


__all__ = [
	"list_insights",
	"create_insight",
	"delete_insight",
	"build_rule_based_report",
	"select_insights",
	"build_report",
	"replace_insights",
	"generate_insights",
]
