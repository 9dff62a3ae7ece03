from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping

from db import db_session
from schemas.budget_schema import as_utc, normalize_budget_category
from services.errors import ServiceError

BUDGET_COLUMNS = "id, type, amount, category, start_date, end_date, is_active, currency"
UPDATABLE_FIELDS = ("type", "amount", "category", "start_date", "end_date", "is_active", "currency")


def _now() -> datetime:
	"""Return a timezone-aware UTC timestamp (patchable in tests)."""

	return datetime.now(timezone.utc)


def _serialize(row: Mapping[str, Any]) -> dict[str, Any]:
	return {
		"id": row["id"],
		"type": row["type"],
		"amount": float(row["amount"]),
		"category": row.get("category"),
		"start_date": row["start_date"],
		"end_date": row.get("end_date"),
		"is_active": bool(row["is_active"]),
		"currency": row.get("currency") or "USD",
	}


def compute_budget_spending(amount: float, spent: float) -> dict[str, float]:
	remaining = max(0.0, amount - spent)
	percentage = (spent / amount) * 100 if amount > 0 else 0.0
	return {
		"spent": round(spent, 2),
		"remaining": round(remaining, 2),
		"percentage": round(min(100.0, percentage), 2),
	}


async def create_budget(user_id: int, payload: Mapping[str, Any]) -> dict[str, Any]:
	async with db_session() as conn:
		row = await conn.fetchrow(
			f"""
			INSERT INTO budgets (user_id, type, amount, category, start_date, end_date, is_active, currency)
			VALUES ($1, $2, $3, $4, $5, $6, $7, $8)
			RETURNING {BUDGET_COLUMNS}
			""",
			user_id,
			payload["type"],
			float(payload["amount"]),
			normalize_budget_category(payload.get("category")),
			payload["start_date"],
			payload.get("end_date"),
			payload.get("is_active", True),
			(payload.get("currency") or "USD").upper(),
		)
	return _serialize(row)


async def list_budgets(user_id: int) -> list[dict[str, Any]]:
	async with db_session() as conn:
		rows = await conn.fetch(
			f"SELECT {BUDGET_COLUMNS} FROM budgets WHERE user_id = $1 ORDER BY start_date DESC",
			user_id,
		)
	return [_serialize(row) for row in rows]


async def list_active_budgets(user_id: int, budget_type: str | None = None) -> list[dict[str, Any]]:
	clauses = [
		"user_id = $1",
		"is_active IS TRUE",
		"start_date <= $2",
		"(end_date IS NULL OR end_date >= $2)",
	]
	params: list[Any] = [user_id, _now()]
	if budget_type:
		clauses.append("type = $3")
		params.append(budget_type)
	async with db_session() as conn:
		rows = await conn.fetch(
			f"SELECT {BUDGET_COLUMNS} FROM budgets WHERE {' AND '.join(clauses)} ORDER BY start_date DESC",
			*params,
		)
	return [_serialize(row) for row in rows]


async def get_budget(user_id: int, budget_id: int) -> dict[str, Any] | None:
	async with db_session() as conn:
		row = await conn.fetchrow(
			f"SELECT {BUDGET_COLUMNS} FROM budgets WHERE id = $1 AND user_id = $2",
			budget_id,
			user_id,
		)
	if not row:
		return None
	return _serialize(row)


async def update_budget(user_id: int, budget_id: int, updates: Mapping[str, Any]) -> dict[str, Any] | None:
	if ("start_date" in updates) != ("end_date" in updates):
		current = await get_budget(user_id, budget_id)
		if current is None:
			return None
		start = as_utc(updates.get("start_date", current["start_date"]))
		end = as_utc(updates.get("end_date", current["end_date"]))
		if end is not None and end < start:
			raise ServiceError("end_date must not precede start_date")

	assignments: list[str] = []
	params: list[Any] = []
	for field in UPDATABLE_FIELDS:
		if field not in updates:
			continue
		value = updates[field]
		if field == "category":
			value = normalize_budget_category(value)
		elif field == "amount":
			value = float(value)
		elif field in ("start_date", "end_date"):
			value = as_utc(value)
		assignments.append(f"{field} = ${len(params)+1}")
		params.append(value)

	if not assignments:
		return await get_budget(user_id, budget_id)

	async with db_session() as conn:
		row = await conn.fetchrow(
			f"""
			UPDATE budgets
			SET {', '.join(assignments)}
			WHERE id = ${len(params)+1} AND user_id = ${len(params)+2}
			RETURNING {BUDGET_COLUMNS}
			""",
			*params,
			budget_id,
			user_id,
		)
	if not row:
		return None
	return _serialize(row)


async def delete_budget(user_id: int, budget_id: int) -> bool:
	async with db_session() as conn:
		row = await conn.fetchrow(
			"DELETE FROM budgets WHERE id = $1 AND user_id = $2 RETURNING id",
			budget_id,
			user_id,
		)
	return bool(row)


async def get_budget_spending(user_id: int, budget_id: int) -> dict[str, float] | None:
	budget = await get_budget(user_id, budget_id)
	if budget is None:
		return None

	clauses = ["user_id = $1", "amount < 0", "date >= $2", "date <= $3"]
	params: list[Any] = [user_id, budget["start_date"], budget["end_date"] or _now()]
	if budget["category"]:
		clauses.append("category = $4")
		params.append(budget["category"])
	async with db_session() as conn:
		spent = await conn.fetchval(
			f"SELECT COALESCE(SUM(ABS(amount)), 0)::float FROM transactions WHERE {' AND '.join(clauses)}",
			*params,
		)
	return compute_budget_spending(budget["amount"], float(spent or 0.0))


__all__ = [
	"compute_budget_spending",
	"create_budget",
	"list_budgets",
	"list_active_budgets",
	"get_budget",
	"update_budget",
	"delete_budget",
	"get_budget_spending",
]
