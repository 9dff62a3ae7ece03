"""Pydantic schemas for wearable / manual health metrics."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, model_validator


HealthMetricType = Literal[
	"heartRate",
	"sleepQuality",
	"recovery",
	"strain",
	"readiness",
	"steps",
	"calories",
	"workout",
]

HEALTH_METRIC_UNITS: Dict[str, str] = {
	"heartRate": "bpm",
	"sleepQuality": "hours",
	"recovery": "percent",
	"strain": "score",
	"readiness": "percent",
	"steps": "steps",
	"calories": "kcal",
	"workout": "minutes",
}

HEALTH_METRIC_TYPES: tuple[str, ...] = tuple(HEALTH_METRIC_UNITS)


class HealthDataCreate(BaseModel):
	type: HealthMetricType
	value: float = Field(..., ge=0)
	unit: Optional[str] = Field(default=None, max_length=16)
	source: str = Field(default="manual", max_length=32)
	timestamp: Optional[datetime] = None
	metadata: Optional[Dict[str, Any]] = None

	@model_validator(mode="after")
	def _default_unit(self) -> "HealthDataCreate":
		if not self.unit:
			self.unit = HEALTH_METRIC_UNITS[self.type]
		if self.type == "strain" and self.value > 21:
			raise ValueError("strain must be between 0 and 21")
		if self.type in {"recovery", "readiness"} and self.value > 100:
			raise ValueError(f"{self.type} is a percentage and must not exceed 100")
		return self


class HealthDataOut(BaseModel):
	id: int
	type: HealthMetricType
	value: float
	unit: str
	source: str
	timestamp: datetime
	metadata: Optional[Dict[str, Any]] = None


class HealthSampleResponse(BaseModel):
	sample: HealthDataOut


class HealthDataListResponse(BaseModel):
	items: List[HealthDataOut]


class HealthSnapshotResponse(BaseModel):
	# Every metric type is present; None when nothing was recorded.
	metrics: Dict[str, Optional[HealthDataOut]]


class HealthStats(BaseModel):
	min: float
	max: float
	avg: float
	count: int


class HealthHistoryPoint(BaseModel):
	day: date
	value: Optional[float] = None


class HealthHistoryResponse(BaseModel):
	items: List[HealthHistoryPoint]


class HealthFinanceCorrelation(BaseModel):
	health_metric: HealthMetricType
	financial_metric: str = "daily_expenses"
	correlation: float
	direction: Literal["positive", "negative", "none"]
	strength: Literal["strong", "moderate", "weak"]
	sample_days: int
	description: str


class HealthCorrelationResponse(BaseModel):
	items: List[HealthFinanceCorrelation]


class DeviceConnectRequest(BaseModel):
	device_type: str = Field(default="appleWatch", min_length=1, max_length=32)
	metrics: List[HealthMetricType] = Field(default_factory=lambda: list(HEALTH_METRIC_TYPES))


class DeviceConnectResponse(BaseModel):
	success: bool
	device_type: str
	connection_status: str
	message: str
	metrics: List[str]
	data_access_permissions: List[str]


__all__ = [
	"HealthMetricType",
	"HEALTH_METRIC_UNITS",
	"HEALTH_METRIC_TYPES",
	"HealthDataCreate",
	"HealthDataOut",
	"HealthSampleResponse",
	"HealthDataListResponse",
	"HealthSnapshotResponse",
	"HealthStats",
	"HealthHistoryPoint",
	"HealthHistoryResponse",
	"HealthFinanceCorrelation",
	"HealthCorrelationResponse",
	"DeviceConnectRequest",
	"DeviceConnectResponse",
]
