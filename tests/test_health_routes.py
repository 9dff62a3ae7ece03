from __future__ import annotations

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from routes import health_routes


AUTH_HEADERS = {"Authorization": "Bearer token"}


@pytest.fixture
def client(make_client) -> TestClient:
	return make_client(health_routes.router)


def test_create_sample_defaults_unit(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
	captured: dict[str, object] = {}

	async def _fake_create(user_id: int, payload: dict[str, object]) -> dict[str, object]:
		captured.update(payload)
		return {"id": 1, **payload, "timestamp": datetime(2025, 1, 1, tzinfo=timezone.utc)}

	monkeypatch.setattr(health_routes.health_service, "create_health_data", _fake_create)

	response = client.post("/health-data", headers=AUTH_HEADERS, json={"type": "heartRate", "value": 64})

	assert response.status_code == 201
	assert captured["unit"] == "bpm"
	assert captured["source"] == "manual"


def test_create_sample_rejects_out_of_range_strain(client: TestClient) -> None:
	response = client.post("/health-data", headers=AUTH_HEADERS, json={"type": "strain", "value": 25})
	assert response.status_code == 422


def test_latest_not_found_message(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
	async def _fake_latest(user_id: int, metric: str):
		return None

	monkeypatch.setattr(health_routes.health_service, "get_latest", _fake_latest)

	response = client.get("/health-data/sleepQuality/latest", headers=AUTH_HEADERS)

	assert response.status_code == 404
	assert response.json()["detail"] == "No sleepQuality data found for this user"


def test_unknown_metric_rejected(client: TestClient) -> None:
	response = client.get("/health-data/mood/stats", headers=AUTH_HEADERS)
	assert response.status_code == 422


def test_stats_passes_window(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
	async def _fake_stats(user_id: int, metric: str, days: int = 7):
		assert (metric, days) == ("steps", 14)
		return {"min": 1.0, "max": 2.0, "avg": 1.5, "count": 2}

	monkeypatch.setattr(health_routes.health_service, "get_stats", _fake_stats)

	response = client.get("/health-data/steps/stats", headers=AUTH_HEADERS, params={"days": 14})

	assert response.status_code == 200
	assert response.json()["avg"] == 1.5


def test_connect_device_defaults(client: TestClient) -> None:
	response = client.post("/health-data/devices/connect", headers=AUTH_HEADERS, json={})

	assert response.status_code == 200
	data = response.json()
	assert data["success"] is True
	assert data["device_type"] == "appleWatch"
	assert data["connection_status"] == "connected"
	assert "heart_rate" in data["data_access_permissions"]
	assert len(data["metrics"]) == 8


def test_snapshot_lists_every_metric(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
	async def _fake_snapshot(user_id: int):
		snapshot: dict[str, object] = {metric: None for metric in health_routes.health_service.HEALTH_METRIC_TYPES}
		snapshot["steps"] = {
			"id": 4,
			"type": "steps",
			"value": 8000.0,
			"unit": "steps",
			"source": "appleWatch",
			"timestamp": datetime(2025, 1, 1, tzinfo=timezone.utc),
			"metadata": None,
		}
		return snapshot

	monkeypatch.setattr(health_routes.health_service, "get_snapshot", _fake_snapshot)

	response = client.get("/health-data/snapshot", headers=AUTH_HEADERS)

	assert response.status_code == 200
	metrics = response.json()["metrics"]
	assert len(metrics) == 8
	assert metrics["steps"]["value"] == 8000.0
	assert metrics["heartRate"] is None
