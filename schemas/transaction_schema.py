"""Pydantic schemas for transactions and spending analytics."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from schemas.emotion_schema import EmotionOut, EmotionType


class TransactionCreate(BaseModel):
	amount: float = Field(..., description="Negative for expenses, positive for income")
	description: str = Field(..., min_length=1, max_length=200)
	category: str = Field(..., min_length=1, max_length=50)
	currency: str = Field(default="USD", min_length=3, max_length=3)
	date: Optional[datetime] = None
	emotion_id: Optional[int] = Field(default=None, ge=1)

	@field_validator("amount")
	@classmethod
	def _reject_zero(cls, amount: float) -> float:
		if amount == 0:
			raise ValueError("amount must be non-zero")
		return amount

	@field_validator("description")
	@classmethod
	def _strip_description(cls, description: str) -> str:
		description = description.strip()
		if not description:
			raise ValueError("description must not be blank")
		return description

	@field_validator("category")
	@classmethod
	def _normalize_category(cls, category: str) -> str:
		category = category.strip().lower()
		if not category:
			raise ValueError("category must not be blank")
		return category

	@field_validator("currency")
	@classmethod
	def _normalize_currency(cls, currency: str) -> str:
		return currency.upper()


class TransactionOut(BaseModel):
	id: int
	amount: float
	description: str
	category: str
	currency: str
	date: datetime
	emotion_id: Optional[int] = None
	emotion: Optional[EmotionOut] = None


class TransactionResponse(BaseModel):
	transaction: TransactionOut


class TransactionListResponse(BaseModel):
	items: List[TransactionOut]


class EmotionSpending(BaseModel):
	emotion: EmotionType
	amount: float
	percentage: float
	color: str


class CategorySpending(BaseModel):
	category: str
	amount: float
	percentage: float
	color: str


class EmotionSpendingResponse(BaseModel):
	items: List[EmotionSpending]


class CategorySpendingResponse(BaseModel):
	items: List[CategorySpending]


class FinancialSummary(BaseModel):
	days: int
	income: float
	expenses: float
	net: float
	savings_rate: float
	top_spending_category: Optional[str] = None
	expense_change_vs_prev_period: Optional[float] = None


__all__ = [
	"TransactionCreate",
	"TransactionOut",
	"TransactionResponse",
	"TransactionListResponse",
	"EmotionSpending",
	"CategorySpending",
	"EmotionSpendingResponse",
	"CategorySpendingResponse",
	"FinancialSummary",
]
