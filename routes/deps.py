"""Dependencies shared by every authenticated router."""

from __future__ import annotations

from typing import Any

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from auth import get_user_by_token
from services.errors import InsufficientDataError, NotFoundError, ServiceError

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme)) -> dict[str, Any]:
	if credentials is None:
		raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authorization header missing")

	token = credentials.credentials
	user = await get_user_by_token(token)
	if not user:
		raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token")

	return user | {"token": token}


def to_http_error(exc: ServiceError) -> HTTPException:
	"""Map a service-layer error onto the matching HTTP response."""

	if isinstance(exc, NotFoundError):
		return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
	if isinstance(exc, InsufficientDataError):
		return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.to_detail())
	return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


__all__ = ["bearer_scheme", "get_current_user", "to_http_error"]
