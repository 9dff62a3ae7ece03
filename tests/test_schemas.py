from __future__ import annotations

import pytest
from pydantic import ValidationError

from schemas.budget_schema import BudgetUpdate, normalize_budget_category
from schemas.emotion_schema import recovery_percentage_for
from schemas.health_schema import HealthDataCreate


def test_recovery_percentages() -> None:
	assert [recovery_percentage_for(t) for t in ("happy", "content", "neutral", "worried", "stressed")] == [
		100,
		75,
		50,
		30,
		20,
	]
	with pytest.raises(ValueError):
		recovery_percentage_for("angry")


def test_health_defaults_unit_by_type() -> None:
	assert HealthDataCreate(type="sleepQuality", value=7.5).unit == "hours"
	assert HealthDataCreate(type="steps", value=100, unit="count").unit == "count"


def test_health_percentage_limits() -> None:
	with pytest.raises(ValidationError):
		HealthDataCreate(type="recovery", value=120)


def test_budget_category_normalization() -> None:
	assert normalize_budget_category(" Food ") == "food"
	assert normalize_budget_category("ALL") is None
	assert normalize_budget_category("") is None


def test_budget_update_period_check() -> None:
	with pytest.raises(ValidationError):
		BudgetUpdate(start_date="2025-02-01T00:00:00Z", end_date="2025-01-01T00:00:00Z")
