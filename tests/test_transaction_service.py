from __future__ import annotations

from datetime import datetime, timezone

import pytest

from services import transaction_service
from services.errors import NotFoundError
from tests.stubs import StubConnection


WHEN = datetime(2025, 1, 1, tzinfo=timezone.utc)


def _joined_row(**overrides: object) -> dict[str, object]:
	row = {
		"id": 1,
		"amount": -20,
		"description": "Lunch",
		"category": "food",
		"currency": "USD",
		"date": WHEN,
		"emotion_id": 4,
		"emotion_type": "stressed",
		"emotion_notes": "Deadline",
		"emotion_date": WHEN,
	}
	return row | overrides


@pytest.mark.asyncio
async def test_create_rejects_emotion_of_another_user(make_db_session) -> None:
	conn = make_db_session(transaction_service, StubConnection(fetchrow_results=[None]))

	with pytest.raises(NotFoundError, match="Emotion not found"):
		await transaction_service.create_transaction(
			3,
			{"amount": -5.0, "description": "Snack", "category": "food", "emotion_id": 12},
		)

	assert len(conn.fetchrow_calls) == 1
	assert conn.fetchrow_calls[0][1] == (12, 3)


@pytest.mark.asyncio
async def test_create_links_emotion(make_db_session, patch_now, frozen_now) -> None:
	emotion_row = {"id": 12, "type": "happy", "notes": None, "date": WHEN}
	inserted = {
		"id": 8,
		"amount": 100.0,
		"description": "Gift",
		"category": "income",
		"currency": "USD",
		"date": frozen_now,
		"emotion_id": 12,
	}
	conn = make_db_session(transaction_service, StubConnection(fetchrow_results=[emotion_row, inserted]))
	patch_now(transaction_service)

	transaction = await transaction_service.create_transaction(
		3,
		{"amount": 100.0, "description": "Gift", "category": "income", "emotion_id": 12},
	)

	assert conn.fetchrow_calls[1][1][-2:] == (frozen_now, 12)
	assert transaction["emotion"]["type"] == "happy"
	assert transaction["emotion"]["recovery_percentage"] == 100


@pytest.mark.asyncio
async def test_list_enriches_with_emotion(make_db_session) -> None:
	rows = [_joined_row(), _joined_row(id=2, emotion_id=None, emotion_type=None, emotion_notes=None, emotion_date=None)]
	conn = make_db_session(transaction_service, StubConnection(fetch_results=[rows]))

	items = await transaction_service.list_transactions(3, limit=10)

	query, params = conn.fetch_calls[0]
	assert "LIMIT $2" in query
	assert params == (3, 10)
	assert items[0]["emotion"]["type"] == "stressed"
	assert items[0]["emotion"]["notes"] == "Deadline"
	assert items[1]["emotion"] is None


@pytest.mark.asyncio
async def test_list_with_window(make_db_session) -> None:
	conn = make_db_session(transaction_service, StubConnection(fetch_results=[[]]))
	end = datetime(2025, 2, 1, tzinfo=timezone.utc)

	await transaction_service.list_transactions(3, start=WHEN, end=end)

	query, params = conn.fetch_calls[0]
	assert "t.date >= $2" in query
	assert "t.date < $3" in query
	assert params == (3, WHEN, end)


@pytest.mark.asyncio
async def test_count_transactions(make_db_session) -> None:
	make_db_session(transaction_service, StubConnection(fetchval_results=[4]))

	assert await transaction_service.count_transactions(3) == 4
