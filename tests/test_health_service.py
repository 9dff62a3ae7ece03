from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from services import health_service
from tests.stubs import StubConnection


BASE = datetime(2025, 1, 1, 8, tzinfo=timezone.utc)


def _sample(metric: str, value: float, day: int) -> dict[str, object]:
	return {"type": metric, "value": value, "timestamp": BASE + timedelta(days=day)}


def _expense(amount: float, day: int) -> dict[str, object]:
	return {"amount": -amount, "date": BASE + timedelta(days=day, hours=2)}


def test_pearson_perfect_and_undefined() -> None:
	assert health_service.pearson([1, 2, 3], [2, 4, 6]) == pytest.approx(1.0)
	assert health_service.pearson([1, 2, 3], [3, 2, 1]) == pytest.approx(-1.0)
	assert health_service.pearson([1, 1, 1], [1, 2, 3]) is None
	assert health_service.pearson([1], [1]) is None


def test_correlation_strength_thresholds() -> None:
	assert health_service.correlation_strength(0.6) == "strong"
	assert health_service.correlation_strength(-0.45) == "moderate"
	assert health_service.correlation_strength(0.29) == "weak"


def test_compute_correlations_counts_days_without_spending_as_zero() -> None:
	samples = [
		_sample("sleepQuality", 8, 0),
		_sample("sleepQuality", 6, 1),
		_sample("sleepQuality", 5, 2),
		_sample("heartRate", 70, 0),
	]
	transactions = [_expense(20, 1), _expense(40, 2), {"amount": 500, "date": BASE}]

	result = health_service.compute_correlations(samples, transactions)

	assert [item["health_metric"] for item in result] == ["sleepQuality"]
	item = result[0]
	assert item["sample_days"] == 3
	assert item["direction"] == "negative"
	assert item["strength"] == "strong"
	assert item["correlation"] < -0.9


def test_compute_correlations_requires_expenses() -> None:
	samples = [_sample("steps", value, day) for day, value in enumerate([1000, 2000, 3000])]
	assert health_service.compute_correlations(samples, [{"amount": 10, "date": BASE}]) == []


@pytest.mark.asyncio
async def test_stats_zero_when_empty(make_db_session, patch_now) -> None:
	patch_now(health_service)
	make_db_session(health_service, StubConnection(fetchrow_results=[{"min": None, "max": None, "avg": None, "count": 0}]))

	assert await health_service.get_stats(3, "heartRate") == {"min": 0.0, "max": 0.0, "avg": 0.0, "count": 0}


@pytest.mark.asyncio
async def test_history_one_row_per_day(make_db_session, patch_now) -> None:
	patch_now(health_service)
	rows = [
		{"id": 1, "type": "steps", "value": 4000, "unit": "steps", "source": "manual",
		 "timestamp": datetime(2025, 1, 1, 9, tzinfo=timezone.utc), "metadata": None},
		{"id": 2, "type": "steps", "value": 6000, "unit": "steps", "source": "manual",
		 "timestamp": datetime(2025, 1, 1, 18, tzinfo=timezone.utc), "metadata": None},
	]
	make_db_session(health_service, StubConnection(fetch_results=[rows]))

	history = await health_service.get_history(3, "steps", days=3)

	assert [point["value"] for point in history] == [None, None, 5000]


@pytest.mark.asyncio
async def test_snapshot_has_every_metric(make_db_session) -> None:
	row = {"id": 5, "type": "recovery", "value": 87, "unit": "percent", "source": "appleWatch",
		   "timestamp": BASE, "metadata": {"hrvScore": 60}}
	make_db_session(health_service, StubConnection(fetch_results=[[row]]))

	snapshot = await health_service.get_snapshot(3)

	assert set(snapshot) == set(health_service.HEALTH_METRIC_TYPES)
	assert snapshot["recovery"]["value"] == 87.0
	assert snapshot["heartRate"] is None


def test_connect_device_permissions_are_unique() -> None:
	result = health_service.connect_device(3, "whoop", ["recovery", "strain", "heartRate"])

	assert result["data_access_permissions"] == ["activity", "heart_rate"]
	assert result["message"] == "Successfully connected to whoop"
