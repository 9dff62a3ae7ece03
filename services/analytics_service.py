"""Spending analytics derived from a user's transactions and emotions."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Iterable, Mapping

from schemas.emotion_schema import EMOTION_TYPES
from services import transaction_service
from services.formatting import category_color, emotion_color


def _now() -> datetime:
	"""Return a timezone-aware UTC timestamp (patchable in tests)."""

	return datetime.now(timezone.utc)


def _percentage(part: float, total: float) -> float:
	if total <= 0:
		return 0.0
	return round(part / total * 100, 2)


def _expenses(transactions: Iterable[Mapping[str, Any]]) -> list[Mapping[str, Any]]:
	return [t for t in transactions if t["amount"] < 0]


def compute_spending_by_emotion(transactions: Iterable[Mapping[str, Any]]) -> list[dict[str, Any]]:
	"""Total expenses per emotion felt at purchase time.

	Every emotion type is present, in canonical order, even with no spending.
	Income and transactions without a linked emotion are ignored.
	"""

	totals = {emotion: 0.0 for emotion in EMOTION_TYPES}
	for transaction in _expenses(transactions):
		emotion = transaction.get("emotion")
		if emotion and emotion.get("type") in totals:
			totals[emotion["type"]] += abs(transaction["amount"])
	grand_total = sum(totals.values())
	return [
		{
			"emotion": emotion,
			"amount": round(amount, 2),
			"percentage": _percentage(amount, grand_total),
			"color": emotion_color(emotion),
		}
		for emotion, amount in totals.items()
	]


def compute_spending_by_category(transactions: Iterable[Mapping[str, Any]]) -> list[dict[str, Any]]:
	totals: dict[str, float] = {}
	for transaction in _expenses(transactions):
		totals[transaction["category"]] = totals.get(transaction["category"], 0.0) + abs(transaction["amount"])
	grand_total = sum(totals.values())
	ordered = sorted(totals.items(), key=lambda item: (-item[1], item[0]))
	return [
		{
			"category": category,
			"amount": round(amount, 2),
			"percentage": _percentage(amount, grand_total),
			"color": category_color(category),
		}
		for category, amount in ordered
	]


def compute_financial_summary(
	current: Iterable[Mapping[str, Any]],
	previous: Iterable[Mapping[str, Any]] | None,
	days: int,
) -> dict[str, Any]:
	current = list(current)
	income = sum(t["amount"] for t in current if t["amount"] > 0)
	expenses = sum(abs(t["amount"]) for t in current if t["amount"] < 0)
	net = income - expenses
	categories = compute_spending_by_category(current)

	change = None
	if previous is not None:
		prev_expenses = sum(abs(t["amount"]) for t in previous if t["amount"] < 0)
		if prev_expenses > 0:
			change = round((expenses - prev_expenses) / prev_expenses, 4)

	return {
		"days": days,
		"income": round(income, 2),
		"expenses": round(expenses, 2),
		"net": round(net, 2),
		"savings_rate": round(net / income, 4) if income > 0 else 0.0,
		"top_spending_category": categories[0]["category"] if categories else None,
		"expense_change_vs_prev_period": change,
	}


async def spending_by_emotion(user_id: int, days: int | None = None) -> list[dict[str, Any]]:
	start = _now() - timedelta(days=days) if days is not None else None
	transactions = await transaction_service.list_transactions(user_id, start=start)
	return compute_spending_by_emotion(transactions)


async def spending_by_category(user_id: int, days: int | None = None) -> list[dict[str, Any]]:
	start = _now() - timedelta(days=days) if days is not None else None
	transactions = await transaction_service.list_transactions(user_id, start=start)
	return compute_spending_by_category(transactions)


async def financial_summary(user_id: int, days: int = 30) -> dict[str, Any]:
	now = _now()
	start = now - timedelta(days=days)
	current = await transaction_service.list_transactions(user_id, start=start)
	previous = await transaction_service.list_transactions(user_id, start=start - timedelta(days=days), end=start)
	return compute_financial_summary(current, previous, days)


__all__ = [
	"compute_spending_by_emotion",
	"compute_spending_by_category",
	"compute_financial_summary",
	"spending_by_emotion",
	"spending_by_category",
	"financial_summary",
]
