from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import pytest

from tests.stubs import StubConnection


@pytest.fixture
def make_db_session(monkeypatch: pytest.MonkeyPatch):
    """Patch a module's db_session to use a stub connection."""

    def _maker(module: Any, connection: StubConnection) -> StubConnection:
        class _Session:
            async def __aenter__(self_inner) -> StubConnection:  # type: ignore[misc]
                return connection

            async def __aexit__(self_inner, exc_type, exc, tb) -> None:
                await connection.close()

        monkeypatch.setattr(module, "db_session", lambda: _Session())
        return connection

    return _maker


@pytest.fixture
def frozen_now() -> datetime:
    return datetime(2025, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def patch_now(monkeypatch: pytest.MonkeyPatch, frozen_now: datetime):
    def _apply(module: Any, dt: datetime = frozen_now) -> datetime:
        monkeypatch.setattr(module, "_now", lambda: dt)
        return dt

    return _apply


@pytest.fixture
def make_client(monkeypatch: pytest.MonkeyPatch):
    """Build a TestClient around routers with bearer auth resolved to user 7."""

    from fastapi import FastAPI
    from fastapi.testclient import TestClient

    from routes import deps

    async def _fake_get_user(token: str) -> dict[str, object] | None:
        if token != "token":
            return None
        return {"id": 7, "username": "demo", "name": "Demo User", "initials": "DU", "is_guest": False}

    monkeypatch.setattr(deps, "get_user_by_token", _fake_get_user)

    def _maker(*routers: Any) -> TestClient:
        app = FastAPI()
        for router in routers:
            app.include_router(router)
        return TestClient(app)

    return _maker
