from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping

from db import db_session
from services.emotion_service import serialize_emotion
from services.errors import NotFoundError

TRANSACTION_SELECT = """
SELECT t.id, t.amount, t.description, t.category, t.currency, t.date, t.emotion_id,
       e.type AS emotion_type, e.notes AS emotion_notes, e.date AS emotion_date
FROM transactions t
LEFT JOIN emotions e ON e.id = t.emotion_id
"""


def _now() -> datetime:
	"""Return a timezone-aware UTC timestamp (patchable in tests)."""

	return datetime.now(timezone.utc)


def serialize_transaction(row: Mapping[str, Any], emotion: Mapping[str, Any] | None = None) -> dict[str, Any]:
	if emotion is None and row.get("emotion_type"):
		emotion = serialize_emotion(
			{
				"id": row["emotion_id"],
				"type": row["emotion_type"],
				"notes": row.get("emotion_notes"),
				"date": row["emotion_date"],
			}
		)
	return {
		"id": row["id"],
		"amount": float(row["amount"]),
		"description": row["description"],
		"category": row["category"],
		"currency": row.get("currency") or "USD",
		"date": row["date"],
		"emotion_id": row.get("emotion_id"),
		"emotion": dict(emotion) if emotion else None,
	}


async def create_transaction(user_id: int, payload: Mapping[str, Any]) -> dict[str, Any]:
	emotion_id = payload.get("emotion_id")
	async with db_session() as conn:
		emotion = None
		if emotion_id is not None:
			emotion_row = await conn.fetchrow(
				"SELECT id, type, notes, date FROM emotions WHERE id = $1 AND user_id = $2",
				emotion_id,
				user_id,
			)
			if not emotion_row:
				raise NotFoundError("Emotion not found")
			emotion = serialize_emotion(emotion_row)

		row = await conn.fetchrow(
			"""
			INSERT INTO transactions (user_id, amount, description, category, currency, date, emotion_id)
			VALUES ($1, $2, $3, $4, $5, $6, $7)
			RETURNING id, amount, description, category, currency, date, emotion_id
			""",
			user_id,
			float(payload["amount"]),
			payload["description"],
			payload["category"],
			payload.get("currency") or "USD",
			payload.get("date") or _now(),
			emotion_id,
		)
	return serialize_transaction(row, emotion)


async def list_transactions(
	user_id: int,
	*,
	limit: int | None = None,
	start: datetime | None = None,
	end: datetime | None = None,
) -> list[dict[str, Any]]:
	clauses = ["t.user_id = $1"]
	params: list[Any] = [user_id]
	if start is not None:
		clauses.append(f"t.date >= ${len(params)+1}")
		params.append(start)
	if end is not None:
		clauses.append(f"t.date < ${len(params)+1}")
		params.append(end)
	query = f"{TRANSACTION_SELECT} WHERE {' AND '.join(clauses)} ORDER BY t.date DESC"
	if limit is not None:
		query += f" LIMIT ${len(params)+1}"
		params.append(limit)
	async with db_session() as conn:
		rows = await conn.fetch(query, *params)
	return [serialize_transaction(row) for row in rows]


async def count_transactions(user_id: int) -> int:
	async with db_session() as conn:
		value = await conn.fetchval("SELECT COUNT(*) FROM transactions WHERE user_id = $1", user_id)
	return int(value or 0)


async def get_transaction(user_id: int, transaction_id: int) -> dict[str, Any] | None:
	async with db_session() as conn:
		row = await conn.fetchrow(
			f"{TRANSACTION_SELECT} WHERE t.id = $1 AND t.user_id = $2",
			transaction_id,
			user_id,
		)
	if not row:
		return None
	return serialize_transaction(row)


async def delete_transaction(user_id: int, transaction_id: int) -> bool:
	async with db_session() as conn:
		row = await conn.fetchrow(
			"DELETE FROM transactions WHERE id = $1 AND user_id = $2 RETURNING id",
			transaction_id,
			user_id,
		)
	return bool(row)


__all__ = [
	"serialize_transaction",
	"create_transaction",
	"list_transactions",
	"count_transactions",
	"get_transaction",
	"delete_transaction",
]
