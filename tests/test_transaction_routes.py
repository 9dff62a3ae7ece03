from __future__ import annotations

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from routes import analytics_routes, transaction_routes
from services.errors import NotFoundError


AUTH_HEADERS = {"Authorization": "Bearer token"}


@pytest.fixture
def client(make_client) -> TestClient:
	return make_client(transaction_routes.router, analytics_routes.router)


def test_create_transaction_normalizes_payload(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
	captured: dict[str, object] = {}

	async def _fake_create(user_id: int, payload: dict[str, object]) -> dict[str, object]:
		captured.update(payload)
		return {"id": 3, **payload, "date": datetime(2025, 1, 1, tzinfo=timezone.utc), "emotion": None}

	monkeypatch.setattr(transaction_routes.transaction_service, "create_transaction", _fake_create)

	response = client.post(
		"/transactions",
		headers=AUTH_HEADERS,
		json={"amount": -12.5, "description": " Coffee ", "category": "Food", "currency": "eur"},
	)

	assert response.status_code == 201
	assert captured["description"] == "Coffee"
	assert captured["category"] == "food"
	assert captured["currency"] == "EUR"


def test_create_transaction_rejects_zero_amount(client: TestClient) -> None:
	response = client.post(
		"/transactions",
		headers=AUTH_HEADERS,
		json={"amount": 0, "description": "Nothing", "category": "other"},
	)
	assert response.status_code == 422


def test_create_transaction_with_foreign_emotion(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
	async def _fake_create(user_id: int, payload: dict[str, object]):
		raise NotFoundError("Emotion not found")

	monkeypatch.setattr(transaction_routes.transaction_service, "create_transaction", _fake_create)

	response = client.post(
		"/transactions",
		headers=AUTH_HEADERS,
		json={"amount": -5, "description": "Snack", "category": "food", "emotion_id": 99},
	)

	assert response.status_code == 404
	assert response.json()["detail"] == "Emotion not found"


def test_get_transaction_not_found(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
	async def _fake_get(user_id: int, transaction_id: int):
		return None

	monkeypatch.setattr(transaction_routes.transaction_service, "get_transaction", _fake_get)

	response = client.get("/transactions/5", headers=AUTH_HEADERS)

	assert response.status_code == 404
	assert response.json()["detail"] == "Transaction not found"


def test_spending_by_emotion(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
	async def _fake_spending(user_id: int, days: int | None = None):
		assert user_id == 7
		assert days == 14
		return [{"emotion": "stressed", "amount": 10.0, "percentage": 100.0, "color": "#ff4d4f"}]

	monkeypatch.setattr(analytics_routes.analytics_service, "spending_by_emotion", _fake_spending)

	response = client.get("/analytics/spending-by-emotion", headers=AUTH_HEADERS, params={"days": 14})

	assert response.status_code == 200
	assert response.json()["items"][0]["emotion"] == "stressed"


def test_financial_summary_default_window(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
	captured: dict[str, object] = {}

	async def _fake_summary(user_id: int, days: int = 30):
		captured["days"] = days
		return {
			"days": days,
			"income": 0.0,
			"expenses": 0.0,
			"net": 0.0,
			"savings_rate": 0.0,
			"top_spending_category": None,
			"expense_change_vs_prev_period": None,
		}

	monkeypatch.setattr(analytics_routes.analytics_service, "financial_summary", _fake_summary)

	response = client.get("/analytics/summary", headers=AUTH_HEADERS)

	assert response.status_code == 200
	assert captured["days"] == 30
	assert response.json()["top_spending_category"] is None


def test_transaction_response_drops_unlisted_fields(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
	async def _fake_get(user_id: int, transaction_id: int):
		return {
			"id": transaction_id,
			"amount": -4.5,
			"description": "Coffee",
			"category": "food",
			"currency": "USD",
			"date": datetime(2025, 1, 1, tzinfo=timezone.utc),
			"emotion_id": None,
			"emotion": None,
			"user_id": 7,
		}

	monkeypatch.setattr(transaction_routes.transaction_service, "get_transaction", _fake_get)

	response = client.get("/transactions/5", headers=AUTH_HEADERS)

	assert response.status_code == 200
	transaction = response.json()["transaction"]
	assert transaction["amount"] == -4.5
	assert "user_id" not in transaction
