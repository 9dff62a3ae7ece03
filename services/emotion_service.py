from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Mapping

from db import db_session
from schemas.emotion_schema import EMOTION_TYPES, recovery_percentage_for
from services.formatting import emotion_color, emotion_emoji

EMOTION_COLUMNS = "id, type, notes, date"


def _now() -> datetime:
	"""Return a timezone-aware UTC timestamp (patchable in tests)."""

	return datetime.now(timezone.utc)


def _normalize_notes(notes: str | None) -> str | None:
	if notes is None:
		return None
	trimmed = notes.strip()
	return trimmed or None


def _as_utc_date(value: datetime) -> date:
	if value.tzinfo is None:
		return value.date()
	return value.astimezone(timezone.utc).date()


def _window_start(days: int) -> datetime:
	"""Midnight UTC of the first day of a `days`-long window ending today."""

	first_day = _now().date() - timedelta(days=days - 1)
	return datetime.combine(first_day, time.min, tzinfo=timezone.utc)


def serialize_emotion(row: Mapping[str, Any]) -> dict[str, Any]:
	return {
		"id": row["id"],
		"type": row["type"],
		"notes": row.get("notes"),
		"date": row["date"],
		"recovery_percentage": recovery_percentage_for(row["type"]),
		"emoji": emotion_emoji(row["type"]),
		"color": emotion_color(row["type"]),
	}


def dominant_emotion(types: list[str]) -> str | None:
	"""Most frequent emotion; ties go to the more positive emotion."""

	if not types:
		return None
	counts = Counter(types)
	return max(counts, key=lambda emotion: (counts[emotion], EMOTION_TYPES.index(emotion)))


@dataclass
class EmotionListResult:
	items: list[dict[str, Any]]
	next_offset: int | None


async def create_emotion(user_id: int, payload: Mapping[str, Any]) -> dict[str, Any]:
	emotion_type = payload["type"]
	recovery_percentage_for(emotion_type)
	notes = _normalize_notes(payload.get("notes"))
	when = payload.get("date") or _now()
	async with db_session() as conn:
		row = await conn.fetchrow(
			f"""
			INSERT INTO emotions (user_id, type, notes, date)
			VALUES ($1, $2, $3, $4)
			RETURNING {EMOTION_COLUMNS}
			""",
			user_id,
			emotion_type,
			notes,
			when,
		)
	return serialize_emotion(row)


async def list_emotions(user_id: int, *, limit: int = 30, offset: int = 0) -> EmotionListResult:
	async with db_session() as conn:
		rows = await conn.fetch(
			f"""
			SELECT {EMOTION_COLUMNS}
			FROM emotions
			WHERE user_id = $1
			ORDER BY date DESC
			LIMIT $2 OFFSET $3
			""",
			user_id,
			limit,
			offset,
		)
	items = [serialize_emotion(row) for row in rows]
	next_offset = offset + len(items) if len(items) == limit else None
	return EmotionListResult(items=items, next_offset=next_offset)


async def fetch_emotions_since(user_id: int, start: datetime | None = None) -> list[dict[str, Any]]:
	"""Return every emotion of the user (optionally since `start`), newest first."""

	params: list[Any] = [user_id]
	condition = ""
	if start is not None:
		condition = " AND date >= $2"
		params.append(start)
	async with db_session() as conn:
		rows = await conn.fetch(
			f"SELECT {EMOTION_COLUMNS} FROM emotions WHERE user_id = $1{condition} ORDER BY date DESC",
			*params,
		)
	return [serialize_emotion(row) for row in rows]


async def get_emotion(user_id: int, emotion_id: int) -> dict[str, Any] | None:
	async with db_session() as conn:
		row = await conn.fetchrow(
			f"SELECT {EMOTION_COLUMNS} FROM emotions WHERE id = $1 AND user_id = $2",
			emotion_id,
			user_id,
		)
	if not row:
		return None
	return serialize_emotion(row)


async def get_latest_emotion(user_id: int) -> dict[str, Any] | None:
	async with db_session() as conn:
		row = await conn.fetchrow(
			f"""
			SELECT {EMOTION_COLUMNS}
			FROM emotions
			WHERE user_id = $1
			ORDER BY date DESC
			LIMIT 1
			""",
			user_id,
		)
	if not row:
		return None
	return serialize_emotion(row)


async def delete_emotion(user_id: int, emotion_id: int) -> bool:
	async with db_session() as conn:
		row = await conn.fetchrow(
			"DELETE FROM emotions WHERE id = $1 AND user_id = $2 RETURNING id",
			emotion_id,
			user_id,
		)
	return bool(row)


async def get_weekly_recovery(user_id: int, days: int = 7) -> dict[str, Any]:
	start = _window_start(days)
	emotions = await fetch_emotions_since(user_id, start)

	by_day: dict[date, list[str]] = {}
	for emotion in emotions:
		by_day.setdefault(_as_utc_date(emotion["date"]), []).append(emotion["type"])

	items: list[dict[str, Any]] = []
	for index in range(days):
		day = start.date() + timedelta(days=index)
		types = by_day.get(day, [])
		recovery = None
		if types:
			recovery = sum(recovery_percentage_for(t) for t in types) / len(types)
		items.append(
			{
				"day": day,
				"recovery_percentage": recovery,
				"dominant_emotion": dominant_emotion(types),
				"entries": len(types),
			}
		)

	scored = [item["recovery_percentage"] for item in items if item["recovery_percentage"] is not None]
	average = sum(scored) / len(scored) if scored else None
	return {"items": items, "average": average}


async def get_distribution(user_id: int, days: int | None = None) -> dict[str, Any]:
	params: list[Any] = [user_id]
	condition = ""
	if days is not None:
		condition = " AND date >= $2"
		params.append(_now() - timedelta(days=days))
	async with db_session() as conn:
		rows = await conn.fetch(
			f"SELECT type, COUNT(*) AS count FROM emotions WHERE user_id = $1{condition} GROUP BY type",
			*params,
		)
	counts = {emotion: 0 for emotion in EMOTION_TYPES}
	for row in rows:
		if row["type"] in counts:
			counts[row["type"]] = int(row["count"])
	return {"days": days, "counts": counts}


__all__ = [
	"serialize_emotion",
	"dominant_emotion",
	"EmotionListResult",
	"create_emotion",
	"list_emotions",
	"fetch_emotions_since",
	"get_emotion",
	"get_latest_emotion",
	"delete_emotion",
	"get_weekly_recovery",
	"get_distribution",
]
