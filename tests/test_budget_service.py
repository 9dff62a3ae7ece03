from __future__ import annotations

from datetime import datetime, timezone

import pytest

from services import budget_service
from services.errors import ServiceError
from tests.stubs import StubConnection


START = datetime(2024, 12, 1, tzinfo=timezone.utc)


def _budget_row(**overrides: object) -> dict[str, object]:
	row = {
		"id": 2,
		"type": "monthly",
		"amount": 200,
		"category": "food",
		"start_date": START,
		"end_date": None,
		"is_active": True,
		"currency": "USD",
	}
	return row | overrides


def test_compute_budget_spending_caps_percentage() -> None:
	assert budget_service.compute_budget_spending(100, 150) == {"spent": 150, "remaining": 0, "percentage": 100}
	assert budget_service.compute_budget_spending(200, 50) == {"spent": 50, "remaining": 150, "percentage": 25}


@pytest.mark.asyncio
async def test_budget_spending_filters_category(make_db_session, patch_now, frozen_now) -> None:
	patch_now(budget_service)
	conn = make_db_session(
		budget_service,
		StubConnection(fetchrow_results=[_budget_row()], fetchval_results=[50.0]),
	)

	spending = await budget_service.get_budget_spending(3, 2)

	query, params = conn.fetchval_calls[0]
	assert "category = $4" in query
	assert params == (3, START, frozen_now, "food")
	assert spending == {"spent": 50.0, "remaining": 150.0, "percentage": 25.0}


@pytest.mark.asyncio
async def test_budget_spending_all_categories(make_db_session, patch_now) -> None:
	patch_now(budget_service)
	conn = make_db_session(
		budget_service,
		StubConnection(fetchrow_results=[_budget_row(category=None)], fetchval_results=[0]),
	)

	await budget_service.get_budget_spending(3, 2)

	query, params = conn.fetchval_calls[0]
	assert "category" not in query
	assert len(params) == 3


@pytest.mark.asyncio
async def test_budget_spending_missing_budget(make_db_session) -> None:
	make_db_session(budget_service, StubConnection(fetchrow_results=[None]))

	assert await budget_service.get_budget_spending(3, 2) is None


@pytest.mark.asyncio
async def test_update_budget_builds_assignments(make_db_session) -> None:
	conn = make_db_session(budget_service, StubConnection(fetchrow_results=[_budget_row(amount=300, category=None)]))

	budget = await budget_service.update_budget(3, 2, {"amount": 300, "category": "all"})

	query, params = conn.fetchrow_calls[0]
	assert "amount = $1" in query
	assert "category = $2" in query
	assert params == (300.0, None, 2, 3)
	assert budget["category"] is None


@pytest.mark.asyncio
async def test_list_active_with_type(make_db_session, patch_now, frozen_now) -> None:
	patch_now(budget_service)
	conn = make_db_session(budget_service, StubConnection(fetch_results=[[_budget_row()]]))

	items = await budget_service.list_active_budgets(3, "monthly")

	_, params = conn.fetch_calls[0]
	assert params == (3, frozen_now, "monthly")
	assert items[0]["amount"] == 200.0


@pytest.mark.asyncio
async def test_update_rejects_end_before_stored_start(make_db_session) -> None:
	conn = make_db_session(budget_service, StubConnection(fetchrow_results=[_budget_row()]))

	with pytest.raises(ServiceError, match="end_date must not precede start_date"):
		await budget_service.update_budget(3, 2, {"end_date": datetime(2024, 11, 1, tzinfo=timezone.utc)})

	assert len(conn.fetchrow_calls) == 1


@pytest.mark.asyncio
async def test_update_compares_naive_end_with_stored_start(make_db_session) -> None:
	make_db_session(budget_service, StubConnection(fetchrow_results=[_budget_row()]))

	with pytest.raises(ServiceError, match="end_date must not precede start_date"):
		await budget_service.update_budget(3, 2, {"end_date": datetime(2024, 11, 1)})


@pytest.mark.asyncio
async def test_update_stores_naive_end_as_utc(make_db_session) -> None:
	end = datetime(2025, 1, 31)
	conn = make_db_session(
		budget_service,
		StubConnection(fetchrow_results=[_budget_row(), _budget_row(end_date=end.replace(tzinfo=timezone.utc))]),
	)

	budget = await budget_service.update_budget(3, 2, {"end_date": end})

	_, params = conn.fetchrow_calls[1]
	assert params == (datetime(2025, 1, 31, tzinfo=timezone.utc), 2, 3)
	assert budget["end_date"].tzinfo is not None
