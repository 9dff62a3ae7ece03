from __future__ import annotations

import pytest

import db
from tests.stubs import StubConnection


@pytest.mark.asyncio
async def test_drop_all_tables_requires_confirm(make_db_session) -> None:
	conn = make_db_session(db, StubConnection())

	with pytest.raises(ValueError, match="confirm=True"):
		await db.drop_all_tables()

	assert conn.execute_calls == []


@pytest.mark.asyncio
async def test_drop_all_tables_keeps_users_by_default(make_db_session) -> None:
	conn = make_db_session(db, StubConnection())

	await db.drop_all_tables(confirm=True)

	statements = [query for query, _ in conn.execute_calls]
	assert len(statements) == 6
	assert not any("auth_users" in statement for statement in statements)


@pytest.mark.asyncio
async def test_drop_all_tables_can_drop_users(make_db_session) -> None:
	conn = make_db_session(db, StubConnection())

	await db.drop_all_tables(confirm=True, drop_users=True)

	assert conn.execute_calls[-1][0] == "DROP TABLE IF EXISTS auth_users CASCADE;"


@pytest.mark.asyncio
async def test_get_db_requires_database_url(monkeypatch: pytest.MonkeyPatch) -> None:
	monkeypatch.setattr(db, "CONNECTION", None)

	with pytest.raises(RuntimeError, match="DATABASE_URL"):
		await db.get_db()


@pytest.mark.asyncio
async def test_init_db_creates_every_table_and_index(make_db_session) -> None:
	conn = make_db_session(db, StubConnection())

	await db.init_db()

	statements = [query for query, _ in conn.execute_calls]
	for table in ("auth_users", "auth_sessions", "emotions", "transactions", "insights", "health_data", "budgets"):
		assert any(f"CREATE TABLE IF NOT EXISTS {table} " in statement for statement in statements)
	assert statements[-len(db.INDEX_STATEMENTS):] == list(db.INDEX_STATEMENTS)
	assert conn.closed
