"""Health metric storage, statistics and health/finance correlation."""

from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta, timezone
from math import sqrt
from typing import Any, Iterable, Mapping, Sequence

from db import db_session
from schemas.health_schema import HEALTH_METRIC_TYPES, HEALTH_METRIC_UNITS
from services import transaction_service

logger = logging.getLogger(__name__)

HEALTH_COLUMNS = "id, type, value, unit, source, timestamp, metadata"
MIN_CORRELATION_DAYS = 3

DEVICE_PERMISSIONS: dict[str, str] = {
	"heartRate": "heart_rate",
	"sleepQuality": "sleep",
	"recovery": "activity",
	"strain": "activity",
	"readiness": "activity",
	"steps": "activity",
	"calories": "activity",
	"workout": "workouts",
}

_METRIC_LABELS: dict[str, str] = {
	"heartRate": "heart rate",
	"sleepQuality": "sleep",
	"recovery": "recovery",
	"strain": "strain",
	"readiness": "readiness",
	"steps": "step count",
	"calories": "calories burned",
	"workout": "workout time",
}


def _now() -> datetime:
	"""Return a timezone-aware UTC timestamp (patchable in tests)."""

	return datetime.now(timezone.utc)


def _as_utc_date(value: datetime) -> date:
	if value.tzinfo is None:
		return value.date()
	return value.astimezone(timezone.utc).date()


def _window_start(days: int) -> datetime:
	first_day = _now().date() - timedelta(days=days - 1)
	return datetime.combine(first_day, time.min, tzinfo=timezone.utc)


def _serialize(row: Mapping[str, Any]) -> dict[str, Any]:
	return {
		"id": row["id"],
		"type": row["type"],
		"value": float(row["value"]),
		"unit": row["unit"],
		"source": row["source"],
		"timestamp": row["timestamp"],
		"metadata": row.get("metadata"),
	}


def pearson(xs: Sequence[float], ys: Sequence[float]) -> float | None:
	"""Pearson correlation coefficient, or None when undefined."""

	n = len(xs)
	if n != len(ys) or n < 2:
		return None
	x_mean = sum(xs) / n
	y_mean = sum(ys) / n
	covariance = sum((x - x_mean) * (y - y_mean) for x, y in zip(xs, ys))
	x_var = sum((x - x_mean) ** 2 for x in xs)
	y_var = sum((y - y_mean) ** 2 for y in ys)
	if x_var == 0 or y_var == 0:
		return None
	return covariance / sqrt(x_var * y_var)


def correlation_strength(value: float) -> str:
	magnitude = abs(value)
	if magnitude >= 0.6:
		return "strong"
	if magnitude >= 0.3:
		return "moderate"
	return "weak"


def daily_averages(samples: Iterable[Mapping[str, Any]]) -> dict[date, float]:
	buckets: dict[date, list[float]] = {}
	for sample in samples:
		buckets.setdefault(_as_utc_date(sample["timestamp"]), []).append(float(sample["value"]))
	return {day: sum(values) / len(values) for day, values in buckets.items()}


def daily_expenses(transactions: Iterable[Mapping[str, Any]]) -> dict[date, float]:
	totals: dict[date, float] = {}
	for transaction in transactions:
		if transaction["amount"] < 0:
			day = _as_utc_date(transaction["date"])
			totals[day] = totals.get(day, 0.0) + abs(transaction["amount"])
	return totals


def compute_correlations(
	samples: Iterable[Mapping[str, Any]],
	transactions: Iterable[Mapping[str, Any]],
) -> list[dict[str, Any]]:
	"""Correlate each metric's daily average with that day's total expenses.

	Days with a metric sample but no spending count as zero spending. Metrics
	with fewer than MIN_CORRELATION_DAYS sampled days, or with a constant
	series, are left out.
	"""

	expenses_by_day = daily_expenses(transactions)
	if not expenses_by_day:
		return []

	by_type: dict[str, list[Mapping[str, Any]]] = {}
	for sample in samples:
		by_type.setdefault(sample["type"], []).append(sample)

	results: list[dict[str, Any]] = []
	for metric in HEALTH_METRIC_TYPES:
		averages = daily_averages(by_type.get(metric, []))
		if len(averages) < MIN_CORRELATION_DAYS:
			continue
		days = sorted(averages)
		coefficient = pearson([averages[d] for d in days], [expenses_by_day.get(d, 0.0) for d in days])
		if coefficient is None:
			continue
		coefficient = round(coefficient, 4)
		strength = correlation_strength(coefficient)
		if coefficient > 0:
			direction = "positive"
			trend = "higher"
		elif coefficient < 0:
			direction = "negative"
			trend = "lower"
		else:
			direction = "none"
			trend = "unchanged"
		label = _METRIC_LABELS[metric]
		results.append(
			{
				"health_metric": metric,
				"financial_metric": "daily_expenses",
				"correlation": coefficient,
				"direction": direction,
				"strength": strength,
				"sample_days": len(days),
				"description": f"Days with higher {label} show {trend} spending ({strength} {direction} correlation)",
			}
		)
	results.sort(key=lambda item: -abs(item["correlation"]))
	return results


async def create_health_data(user_id: int, payload: Mapping[str, Any]) -> dict[str, Any]:
	metric = payload["type"]
	async with db_session() as conn:
		row = await conn.fetchrow(
			f"""
			INSERT INTO health_data (user_id, type, value, unit, source, timestamp, metadata)
			VALUES ($1, $2, $3, $4, $5, $6, $7)
			RETURNING {HEALTH_COLUMNS}
			""",
			user_id,
			metric,
			float(payload["value"]),
			payload.get("unit") or HEALTH_METRIC_UNITS[metric],
			payload.get("source") or "manual",
			payload.get("timestamp") or _now(),
			payload.get("metadata"),
		)
	return _serialize(row)


async def list_health_data(
	user_id: int,
	*,
	metric: str | None = None,
	limit: int | None = None,
	start: datetime | None = None,
) -> list[dict[str, Any]]:
	clauses = ["user_id = $1"]
	params: list[Any] = [user_id]
	if metric is not None:
		clauses.append(f"type = ${len(params)+1}")
		params.append(metric)
	if start is not None:
		clauses.append(f"timestamp >= ${len(params)+1}")
		params.append(start)
	query = f"SELECT {HEALTH_COLUMNS} FROM health_data WHERE {' AND '.join(clauses)} ORDER BY timestamp DESC"
	if limit is not None:
		query += f" LIMIT ${len(params)+1}"
		params.append(limit)
	async with db_session() as conn:
		rows = await conn.fetch(query, *params)
	return [_serialize(row) for row in rows]


async def get_latest(user_id: int, metric: str) -> dict[str, Any] | None:
	items = await list_health_data(user_id, metric=metric, limit=1)
	return items[0] if items else None


async def get_stats(user_id: int, metric: str, days: int = 7) -> dict[str, Any]:
	now = _now()
	async with db_session() as conn:
		row = await conn.fetchrow(
			"""
			SELECT MIN(value)::float AS min, MAX(value)::float AS max, AVG(value)::float AS avg, COUNT(*) AS count
			FROM health_data
			WHERE user_id = $1 AND type = $2 AND timestamp >= $3 AND timestamp <= $4
			""",
			user_id,
			metric,
			now - timedelta(days=days),
			now,
		)
	if not row or not row["count"]:
		return {"min": 0.0, "max": 0.0, "avg": 0.0, "count": 0}
	return {
		"min": float(row["min"]),
		"max": float(row["max"]),
		"avg": float(row["avg"]),
		"count": int(row["count"]),
	}


async def get_history(user_id: int, metric: str, days: int = 7) -> list[dict[str, Any]]:
	start = _window_start(days)
	averages = daily_averages(await list_health_data(user_id, metric=metric, start=start))
	history = []
	for index in range(days):
		day = start.date() + timedelta(days=index)
		value = averages.get(day)
		history.append({"day": day, "value": round(value, 2) if value is not None else None})
	return history


async def get_snapshot(user_id: int) -> dict[str, Any]:
	async with db_session() as conn:
		rows = await conn.fetch(
			f"""
			SELECT DISTINCT ON (type) {HEALTH_COLUMNS}
			FROM health_data
			WHERE user_id = $1
			ORDER BY type, timestamp DESC
			""",
			user_id,
		)
	snapshot: dict[str, Any] = {metric: None for metric in HEALTH_METRIC_TYPES}
	for row in rows:
		if row["type"] in snapshot:
			snapshot[row["type"]] = _serialize(row)
	return snapshot


async def health_finance_correlations(user_id: int, days: int = 30) -> list[dict[str, Any]]:
	start = _window_start(days)
	samples = await list_health_data(user_id, start=start)
	transactions = await transaction_service.list_transactions(user_id, start=start)
	return compute_correlations(samples, transactions)


def connect_device(user_id: int, device_type: str, metrics: Sequence[str]) -> dict[str, Any]:
	permissions: list[str] = []
	for metric in metrics:
		permission = DEVICE_PERMISSIONS.get(metric)
		if permission and permission not in permissions:
			permissions.append(permission)
	logger.info("User %s connected %s with metrics %s", user_id, device_type, list(metrics))
	return {
		"success": True,
		"device_type": device_type,
		"connection_status": "connected",
		"message": f"Successfully connected to {device_type}",
		"metrics": list(metrics),
		"data_access_permissions": permissions,
	}


__all__ = [
	"pearson",
	"correlation_strength",
	"daily_averages",
	"daily_expenses",
	"compute_correlations",
	"create_health_data",
	"list_health_data",
	"get_latest",
	"get_stats",
	"get_history",
	"get_snapshot",
	"health_finance_correlations",
	"connect_device",
]
