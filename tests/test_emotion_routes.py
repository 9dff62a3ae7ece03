from __future__ import annotations

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from routes import emotion_routes


AUTH_HEADERS = {"Authorization": "Bearer token"}


def _emotion(emotion_id: int = 1, emotion_type: str = "happy") -> dict[str, object]:
	return {
		"id": emotion_id,
		"type": emotion_type,
		"notes": None,
		"date": datetime(2025, 1, 1, tzinfo=timezone.utc),
		"recovery_percentage": 100,
		"emoji": "x",
		"color": "#52c41a",
	}


@pytest.fixture
def client(make_client) -> TestClient:
	return make_client(emotion_routes.router)


def test_auth_required(client: TestClient) -> None:
	response = client.get("/emotions")
	assert response.status_code == 401
	assert response.json()["detail"] == "Authorization header missing"


def test_invalid_token_rejected(client: TestClient) -> None:
	response = client.get("/emotions", headers={"Authorization": "Bearer nope"})
	assert response.status_code == 401
	assert response.json()["detail"] == "Invalid or expired token"


def test_create_emotion(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
	captured: dict[str, object] = {}

	async def _fake_create(user_id: int, payload: dict[str, object]) -> dict[str, object]:
		captured["user_id"] = user_id
		captured["payload"] = payload
		return _emotion(emotion_type="worried")

	monkeypatch.setattr(emotion_routes.emotion_service, "create_emotion", _fake_create)

	response = client.post("/emotions", headers=AUTH_HEADERS, json={"type": "worried", "notes": "  bills  "})

	assert response.status_code == 201
	assert captured["user_id"] == 7
	assert captured["payload"]["type"] == "worried"
	assert captured["payload"]["notes"] == "bills"
	assert response.json()["emotion"]["type"] == "worried"


def test_create_emotion_rejects_unknown_type(client: TestClient) -> None:
	response = client.post("/emotions", headers=AUTH_HEADERS, json={"type": "angry"})
	assert response.status_code == 422


def test_list_emotions_passes_paging(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
	class _Result:
		items = [_emotion()]
		next_offset = 1

	async def _fake_list(user_id: int, *, limit: int, offset: int):
		assert (user_id, limit, offset) == (7, 1, 0)
		return _Result()

	monkeypatch.setattr(emotion_routes.emotion_service, "list_emotions", _fake_list)

	response = client.get("/emotions", headers=AUTH_HEADERS, params={"limit": 1})

	assert response.status_code == 200
	assert response.json()["next_offset"] == 1
	assert len(response.json()["items"]) == 1


def test_latest_emotion_not_found(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
	async def _fake_latest(user_id: int):
		return None

	monkeypatch.setattr(emotion_routes.emotion_service, "get_latest_emotion", _fake_latest)

	response = client.get("/emotions/latest", headers=AUTH_HEADERS)

	assert response.status_code == 404
	assert response.json()["detail"] == "No emotions found for this user"


def test_weekly_recovery_days_bounds(client: TestClient) -> None:
	response = client.get("/emotions/recovery", headers=AUTH_HEADERS, params={"days": 0})
	assert response.status_code == 422


def test_distribution(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
	async def _fake_distribution(user_id: int, days: int | None = None):
		assert days == 30
		return {"days": days, "counts": {"happy": 2, "content": 0, "neutral": 0, "worried": 1, "stressed": 0}}

	monkeypatch.setattr(emotion_routes.emotion_service, "get_distribution", _fake_distribution)

	response = client.get("/emotions/distribution", headers=AUTH_HEADERS, params={"days": 30})

	assert response.status_code == 200
	assert response.json()["counts"]["happy"] == 2


def test_delete_emotion_not_found(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
	async def _fake_delete(user_id: int, emotion_id: int) -> bool:
		return False

	monkeypatch.setattr(emotion_routes.emotion_service, "delete_emotion", _fake_delete)

	response = client.delete("/emotions/44", headers=AUTH_HEADERS)

	assert response.status_code == 404
	assert response.json()["detail"] == "Emotion not found"
