"""Database utilities for asyncpg-backed storage."""

from __future__ import annotations

import json
import logging
import os
from contextlib import asynccontextmanager
from typing import AsyncIterator

import asyncpg
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

CONNECTION = os.getenv("DATABASE_URL")


USER_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS auth_users (
    id SERIAL PRIMARY KEY,
    username TEXT UNIQUE NOT NULL,
    name TEXT NOT NULL,
    initials TEXT NOT NULL,
    hashed_password TEXT,
    is_guest BOOLEAN DEFAULT FALSE,
    created_at TIMESTAMPTZ DEFAULT NOW()
);
"""


SESSION_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS auth_sessions (
    token TEXT PRIMARY KEY,
    user_id INTEGER NOT NULL REFERENCES auth_users(id) ON DELETE CASCADE,
    expires_at TIMESTAMPTZ NOT NULL,
    created_at TIMESTAMPTZ DEFAULT NOW()
);
"""


EMOTIONS_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS emotions (
    id BIGSERIAL PRIMARY KEY,
    user_id INTEGER NOT NULL REFERENCES auth_users(id) ON DELETE CASCADE,
    type TEXT NOT NULL,                    -- stressed | worried | neutral | content | happy
    notes TEXT NULL,
    date TIMESTAMPTZ NOT NULL DEFAULT NOW()
);
"""


TRANSACTIONS_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS transactions (
    id BIGSERIAL PRIMARY KEY,
    user_id INTEGER NOT NULL REFERENCES auth_users(id) ON DELETE CASCADE,
    amount DOUBLE PRECISION NOT NULL,      -- negative = expense
    description TEXT NOT NULL,
    category TEXT NOT NULL,
    currency TEXT NOT NULL DEFAULT 'USD',
    date TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    emotion_id BIGINT NULL REFERENCES emotions(id) ON DELETE SET NULL
);
"""


INSIGHTS_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS insights (
    id BIGSERIAL PRIMARY KEY,
    user_id INTEGER NOT NULL REFERENCES auth_users(id) ON DELETE CASCADE,
    type TEXT NOT NULL,
    title TEXT NOT NULL,
    description TEXT NOT NULL,
    date TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    updated_date TIMESTAMPTZ NULL
);
"""


HEALTH_DATA_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS health_data (
    id BIGSERIAL PRIMARY KEY,
    user_id INTEGER NOT NULL REFERENCES auth_users(id) ON DELETE CASCADE,
    type TEXT NOT NULL,                    -- heartRate | sleepQuality | recovery | strain | ...
    value DOUBLE PRECISION NOT NULL,
    unit TEXT NOT NULL,
    source TEXT NOT NULL DEFAULT 'manual',
    timestamp TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    metadata JSONB NULL
);
"""


BUDGETS_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS budgets (
    id BIGSERIAL PRIMARY KEY,
    user_id INTEGER NOT NULL REFERENCES auth_users(id) ON DELETE CASCADE,
    type TEXT NOT NULL,                    -- daily | weekly | monthly | yearly | custom
    amount DOUBLE PRECISION NOT NULL,
    category TEXT NULL,                    -- NULL = every category
    start_date TIMESTAMPTZ NOT NULL,
    end_date TIMESTAMPTZ NULL,
    is_active BOOLEAN NOT NULL DEFAULT TRUE,
    currency TEXT NOT NULL DEFAULT 'USD',
    created_at TIMESTAMPTZ DEFAULT NOW()
);
"""


INDEX_STATEMENTS = (
    "CREATE INDEX IF NOT EXISTS idx_auth_sessions_expires_at ON auth_sessions (expires_at);",
    "CREATE INDEX IF NOT EXISTS idx_emotions_user_date ON emotions (user_id, date DESC);",
    "CREATE INDEX IF NOT EXISTS idx_transactions_user_date ON transactions (user_id, date DESC);",
    "CREATE INDEX IF NOT EXISTS idx_transactions_emotion ON transactions (emotion_id);",
    "CREATE INDEX IF NOT EXISTS idx_insights_user_date ON insights (user_id, date DESC);",
    "CREATE INDEX IF NOT EXISTS idx_health_user_type_time ON health_data (user_id, type, timestamp DESC);",
    "CREATE INDEX IF NOT EXISTS idx_budgets_user_start ON budgets (user_id, start_date DESC);",
)


def _require_connection_string() -> str:
    if not CONNECTION:
        raise RuntimeError("DATABASE_URL environment variable must be set")
    return CONNECTION


async def _init_connection(conn: asyncpg.Connection) -> None:
    # JSONB columns round-trip as Python dicts.
    await conn.set_type_codec("jsonb", encoder=json.dumps, decoder=json.loads, schema="pg_catalog")


async def get_db() -> asyncpg.Connection:
    """Create a one-off connection; caller is responsible for closing it."""

    dsn = _require_connection_string()
    conn = await asyncpg.connect(dsn)
    await _init_connection(conn)
    return conn


@asynccontextmanager
async def db_session() -> AsyncIterator[asyncpg.Connection]:
    """Context manager that opens and closes a connection automatically."""

    conn = await get_db()
    try:
        yield conn
    finally:
        await conn.close()


async def init_db() -> None:
    """Ensure required tables and indexes exist."""

    async with db_session() as conn:
        await conn.execute(USER_TABLE_SQL)
        await conn.execute(SESSION_TABLE_SQL)
        await conn.execute(EMOTIONS_TABLE_SQL)
        await conn.execute(TRANSACTIONS_TABLE_SQL)
        await conn.execute(INSIGHTS_TABLE_SQL)
        await conn.execute(HEALTH_DATA_TABLE_SQL)
        await conn.execute(BUDGETS_TABLE_SQL)
        for statement in INDEX_STATEMENTS:
            await conn.execute(statement)
    logger.info("Database schema ready")


async def drop_all_tables(confirm: bool = False, drop_users: bool = False) -> None:
    """Dangerous: drop all tracking tables.

    Parameters:
        confirm: must be True to proceed.
        drop_users: if True also drops auth_users (and cascades sessions).
    """
    if not confirm:
        raise ValueError("Set confirm=True to execute destructive drop_all_tables.")
    statements = [
        "DROP TABLE IF EXISTS budgets CASCADE;",
        "DROP TABLE IF EXISTS health_data CASCADE;",
        "DROP TABLE IF EXISTS insights CASCADE;",
        "DROP TABLE IF EXISTS transactions CASCADE;",
        "DROP TABLE IF EXISTS emotions CASCADE;",
        "DROP TABLE IF EXISTS auth_sessions CASCADE;",
    ]
    if drop_users:
        statements.append("DROP TABLE IF EXISTS auth_users CASCADE;")
    async with db_session() as conn:
        for stmt in statements:
            await conn.execute(stmt)
    logger.warning("Dropped %d tables", len(statements))
