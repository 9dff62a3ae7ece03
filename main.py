"""FastAPI entry point for the Mood & Money backend."""

from __future__ import annotations

import logging
import os
from datetime import datetime
from typing import Any

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, HTTPException, status
from pydantic import BaseModel, Field

from auth import (
    DuplicateUserError,
    InvalidCredentialsError,
    authenticate_user,
    cleanup_expired_sessions,
    create_guest_session,
    create_session,
    create_user,
    revoke_session,
)
from db import init_db
from routes.analysis_routes import router as analysis_router
from routes.analytics_routes import router as analytics_router
from routes.budget_routes import router as budget_router
from routes.deps import get_current_user
from routes.emotion_routes import router as emotion_router
from routes.health_routes import router as health_router
from routes.insight_routes import router as insight_router
from routes.transaction_routes import router as transaction_router

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Mood & Money Tracker", version="0.1.0")

app.include_router(emotion_router)
app.include_router(transaction_router)
app.include_router(analytics_router)
app.include_router(health_router)
app.include_router(budget_router)
app.include_router(insight_router)
app.include_router(analysis_router)


class UserResponse(BaseModel):
    id: int
    username: str
    name: str
    initials: str
    is_guest: bool
    created_at: datetime


class AuthResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    user: UserResponse


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=32, pattern=r"^[A-Za-z0-9_.-]+$")
    password: str = Field(..., min_length=6, max_length=128)
    name: str | None = Field(default=None, max_length=64)


class LoginRequest(BaseModel):
    username: str
    password: str


class GuestRequest(BaseModel):
    display_name: str | None = Field(default=None, max_length=32)


def _user_response(user: dict[str, Any]) -> UserResponse:
    return UserResponse(**{key: user[key] for key in UserResponse.model_fields})


@app.on_event("startup")
async def startup() -> None:
    await init_db()
    await cleanup_expired_sessions()


@app.get("/")
async def read_root() -> dict[str, str]:
    """Return a friendly greeting so callers know the service is alive."""
    return {"message": "Hello from mood-money!"}


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Basic readiness probe for infrastructure monitors."""
    return {"status": "ok"}


@app.post("/auth/register", response_model=AuthResponse)
async def register(payload: RegisterRequest) -> AuthResponse:
    try:
        user = await create_user(payload.username, payload.password, name=payload.name)
    except DuplicateUserError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    token, expires_at = await create_session(user["id"])
    logger.info("Registered user %s", user["id"])
    return AuthResponse(access_token=token, expires_at=expires_at, user=_user_response(user))


@app.post("/auth/login", response_model=AuthResponse)
async def login(payload: LoginRequest) -> AuthResponse:
    try:
        user = await authenticate_user(payload.username, payload.password)
    except InvalidCredentialsError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc

    token, expires_at = await create_session(user["id"])
    return AuthResponse(access_token=token, expires_at=expires_at, user=_user_response(user))


@app.post("/auth/guest", response_model=AuthResponse)
async def guest_login(payload: GuestRequest | None = None) -> AuthResponse:
    display_name = payload.display_name if payload else None
    token, user, expires_at = await create_guest_session(display_name)
    return AuthResponse(access_token=token, expires_at=expires_at, user=_user_response(user))


@app.get("/auth/me", response_model=UserResponse)
async def me(current_user: dict[str, Any] = Depends(get_current_user)) -> UserResponse:
    return _user_response(current_user)


@app.post("/auth/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(current_user: dict[str, Any] = Depends(get_current_user)) -> None:
    await revoke_session(current_user["token"])


def main() -> None:
    """Run a development server when executed as a module."""

    port = int(os.getenv("PORT", "8000"))

    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=port, reload=os.getenv("UVICORN_RELOAD", "true").lower() == "true")


if __name__ == "__main__":
    main()
