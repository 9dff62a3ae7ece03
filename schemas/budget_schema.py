"""Pydantic schemas for spending budgets."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


BudgetType = Literal["daily", "weekly", "monthly", "yearly", "custom"]


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
	"""Treat naive timestamps as UTC so periods compare consistently."""

	if value is not None and value.tzinfo is None:
		return value.replace(tzinfo=timezone.utc)
	return value


def normalize_budget_category(category: Optional[str]) -> Optional[str]:
	if category is None:
		return None
	category = category.strip().lower()
	if not category or category == "all":
		return None
	return category


class BudgetCreate(BaseModel):
	type: BudgetType
	amount: float = Field(..., gt=0)
	category: Optional[str] = Field(default=None, max_length=50)
	start_date: datetime
	end_date: Optional[datetime] = None
	is_active: bool = True
	currency: str = Field(default="USD", min_length=3, max_length=3)

	@field_validator("category")
	@classmethod
	def _normalize_category(cls, category: Optional[str]) -> Optional[str]:
		return normalize_budget_category(category)

	@field_validator("start_date", "end_date")
	@classmethod
	def _coerce_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
		return as_utc(value)

	@model_validator(mode="after")
	def _check_period(self) -> "BudgetCreate":
		if self.end_date is not None and self.end_date < self.start_date:
			raise ValueError("end_date must not precede start_date")
		self.currency = self.currency.upper()
		return self


class BudgetUpdate(BaseModel):
	type: Optional[BudgetType] = None
	amount: Optional[float] = Field(default=None, gt=0)
	category: Optional[str] = Field(default=None, max_length=50)
	start_date: Optional[datetime] = None
	end_date: Optional[datetime] = None
	is_active: Optional[bool] = None
	currency: Optional[str] = Field(default=None, min_length=3, max_length=3)

	@field_validator("category")
	@classmethod
	def _normalize_category(cls, category: Optional[str]) -> Optional[str]:
		return normalize_budget_category(category)

	@field_validator("start_date", "end_date")
	@classmethod
	def _coerce_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
		return as_utc(value)

	@field_validator("currency")
	@classmethod
	def _normalize_currency(cls, currency: Optional[str]) -> Optional[str]:
		return currency.upper() if currency else currency

	@model_validator(mode="after")
	def _ensure_fields_present(self) -> "BudgetUpdate":
		if not self.model_fields_set:
			raise ValueError("At least one field must be provided")
		for required in ("type", "amount", "start_date", "is_active", "currency"):
			if required in self.model_fields_set and getattr(self, required) is None:
				raise ValueError(f"{required} cannot be null")
		if self.start_date is not None and self.end_date is not None and self.end_date < self.start_date:
			raise ValueError("end_date must not precede start_date")
		return self


class BudgetOut(BaseModel):
	id: int
	type: BudgetType
	amount: float
	category: Optional[str] = None
	start_date: datetime
	end_date: Optional[datetime] = None
	is_active: bool
	currency: str


class BudgetResponse(BaseModel):
	budget: BudgetOut


class BudgetListResponse(BaseModel):
	items: List[BudgetOut]


class BudgetSpending(BaseModel):
	spent: float
	remaining: float
	percentage: float


__all__ = [
	"BudgetType",
	"as_utc",
	"normalize_budget_category",
	"BudgetCreate",
	"BudgetUpdate",
	"BudgetOut",
	"BudgetResponse",
	"BudgetListResponse",
	"BudgetSpending",
]
