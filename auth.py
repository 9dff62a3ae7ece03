"""Authentication utilities leveraging asyncpg storage."""

from __future__ import annotations

import base64
import hashlib
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping, Optional, Tuple

import asyncpg

from db import db_session

HASH_NAME = "sha256"
HASH_ITERATIONS = 390_000
DEFAULT_SESSION_TTL = timedelta(hours=12)
GUEST_SESSION_TTL = timedelta(hours=4)

USER_COLUMNS = ("id", "username", "name", "initials", "is_guest", "created_at")


class AuthError(Exception):
    """Base class for authentication-related issues."""


class DuplicateUserError(AuthError):
    """Raised when attempting to create a user that already exists."""


class InvalidCredentialsError(AuthError):
    """Raised when supplied credentials are invalid."""


def _b64encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("utf-8")


def _b64decode(data: str) -> bytes:
    return base64.urlsafe_b64decode(data.encode("utf-8"))


def hash_password(password: str) -> str:
    salt = secrets.token_bytes(16)
    derived = hashlib.pbkdf2_hmac(HASH_NAME, password.encode("utf-8"), salt, HASH_ITERATIONS)
    return f"{_b64encode(salt)}:{_b64encode(derived)}"


def verify_password(password: str, stored: str) -> bool:
    try:
        salt_b64, hash_b64 = stored.split(":", 1)
    except ValueError:
        return False
    salt = _b64decode(salt_b64)
    expected = _b64decode(hash_b64)
    derived = hashlib.pbkdf2_hmac(HASH_NAME, password.encode("utf-8"), salt, HASH_ITERATIONS)
    return secrets.compare_digest(derived, expected)


def derive_initials(name: str | None, username: str) -> str:
    """Return up to two upper-case initials for display avatars.

    "Youness Saber" -> "YS", "demo" -> "D". Falls back to the username when
    no usable name is given.
    """

    words = [word for word in (name or "").split() if word]
    if not words:
        return username[:1].upper()
    return "".join(word[0] for word in words[:2]).upper()


def _user_from_record(record: Mapping[str, Any]) -> dict[str, Any]:
    return {key: record[key] for key in USER_COLUMNS}


async def create_user(
    username: str,
    password: str | None,
    *,
    name: str | None = None,
    is_guest: bool = False,
) -> dict[str, Any]:
    hashed_password: Optional[str] = None if is_guest or password is None else hash_password(password)
    display_name = (name or "").strip() or username
    initials = derive_initials(display_name, username)
    try:
        async with db_session() as conn:
            record = await conn.fetchrow(
                """
                INSERT INTO auth_users (username, name, initials, hashed_password, is_guest)
                VALUES ($1, $2, $3, $4, $5)
                RETURNING id, username, name, initials, is_guest, created_at
                """,
                username,
                display_name,
                initials,
                hashed_password,
                is_guest,
            )
    except asyncpg.UniqueViolationError as exc:
        raise DuplicateUserError("Username already exists") from exc

    if record is None:  # pragma: no cover - unexpected
        raise RuntimeError("User creation failed")

    return _user_from_record(record)


async def authenticate_user(username: str, password: str) -> dict[str, Any]:
    async with db_session() as conn:
        record = await conn.fetchrow(
            """
            SELECT id, username, name, initials, hashed_password, is_guest, created_at
            FROM auth_users
            WHERE username = $1
            """,
            username,
        )

    if not record or not record["hashed_password"]:
        raise InvalidCredentialsError("Invalid username or password")

    if not verify_password(password, record["hashed_password"]):
        raise InvalidCredentialsError("Invalid username or password")

    return _user_from_record(record)


async def get_user_by_username(username: str) -> Optional[dict[str, Any]]:
    async with db_session() as conn:
        record = await conn.fetchrow(
            """
            SELECT id, username, name, initials, is_guest, created_at
            FROM auth_users
            WHERE username = $1
            """,
            username,
        )
    return _user_from_record(record) if record else None


async def _issue_session(conn: asyncpg.Connection, user_id: int, *, ttl: timedelta) -> Tuple[str, datetime]:
    expires_at = datetime.now(timezone.utc) + ttl

    while True:
        token = secrets.token_urlsafe(32)
        try:
            await conn.execute(
                """
                INSERT INTO auth_sessions (token, user_id, expires_at)
                VALUES ($1, $2, $3)
                """,
                token,
                user_id,
                expires_at,
            )
            break
        except asyncpg.UniqueViolationError:
            continue

    return token, expires_at


async def create_session(user_id: int, *, ttl: timedelta = DEFAULT_SESSION_TTL) -> Tuple[str, datetime]:
    async with db_session() as conn:
        await conn.execute("DELETE FROM auth_sessions WHERE expires_at <= NOW()")
        return await _issue_session(conn, user_id, ttl=ttl)


async def create_guest_session(display_name: str | None = None) -> Tuple[str, dict[str, Any], datetime]:
    username = f"guest-{secrets.token_hex(4)}"
    name = (display_name or "").strip() or "Guest"
    async with db_session() as conn:
        record = await conn.fetchrow(
            """
            INSERT INTO auth_users (username, name, initials, is_guest)
            VALUES ($1, $2, $3, TRUE)
            RETURNING id, username, name, initials, is_guest, created_at
            """,
            username,
            name,
            derive_initials(name, username),
        )
        if record is None:  # pragma: no cover - unexpected
            raise RuntimeError("Guest user creation failed")

        token, expires_at = await _issue_session(conn, record["id"], ttl=GUEST_SESSION_TTL)

    return token, _user_from_record(record), expires_at


async def get_user_by_token(token: str) -> Optional[dict[str, Any]]:
    async with db_session() as conn:
        record = await conn.fetchrow(
            """
            SELECT u.id, u.username, u.name, u.initials, u.is_guest, u.created_at, s.expires_at
            FROM auth_sessions s
            JOIN auth_users u ON u.id = s.user_id
            WHERE s.token = $1 AND s.expires_at > NOW()
            """,
            token,
        )

    if not record:
        return None

    return _user_from_record(record) | {"expires_at": record["expires_at"]}


async def revoke_session(token: str) -> None:
    async with db_session() as conn:
        await conn.execute("DELETE FROM auth_sessions WHERE token = $1", token)


async def cleanup_expired_sessions() -> None:
    async with db_session() as conn:
        await conn.execute("DELETE FROM auth_sessions WHERE expires_at <= NOW()")
