"""Exceptions raised by the service layer and translated by the routes."""

from __future__ import annotations

from typing import Any


class ServiceError(Exception):
	"""Base class for domain errors."""


class NotFoundError(ServiceError):
	"""Raised when a referenced record does not exist for the caller."""


class InsufficientDataError(ServiceError):
	"""Raised when there is not enough data to compute a result."""

	def __init__(self, message: str, **context: Any) -> None:
		super().__init__(message)
		self.message = message
		self.context = context

	def to_detail(self) -> dict[str, Any]:
		return {"message": self.message, **self.context}


__all__ = ["ServiceError", "NotFoundError", "InsufficientDataError"]
