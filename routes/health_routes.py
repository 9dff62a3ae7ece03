"""Health metric endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, status

from routes.deps import get_current_user
from schemas.health_schema import (
	DeviceConnectRequest,
	DeviceConnectResponse,
	HealthCorrelationResponse,
	HealthDataCreate,
	HealthDataListResponse,
	HealthHistoryResponse,
	HealthMetricType,
	HealthSampleResponse,
	HealthSnapshotResponse,
	HealthStats,
)
from services import health_service


router = APIRouter(prefix="/health-data", tags=["health"])


@router.post("", status_code=status.HTTP_201_CREATED, response_model=HealthSampleResponse)
async def create_health_data(
	payload: HealthDataCreate,
	current_user: dict[str, Any] = Depends(get_current_user),
) -> dict[str, Any]:
	sample = await health_service.create_health_data(current_user["id"], payload.model_dump())
	return {"sample": sample}


@router.get("", response_model=HealthDataListResponse)
async def list_health_data(
	metric: HealthMetricType | None = Query(None, alias="type"),
	limit: int | None = Query(None, ge=1, le=500),
	current_user: dict[str, Any] = Depends(get_current_user),
) -> dict[str, Any]:
	items = await health_service.list_health_data(current_user["id"], metric=metric, limit=limit)
	return {"items": items}


@router.get("/snapshot", response_model=HealthSnapshotResponse)
async def get_snapshot(current_user: dict[str, Any] = Depends(get_current_user)) -> dict[str, Any]:
	return {"metrics": await health_service.get_snapshot(current_user["id"])}


@router.get("/correlations", response_model=HealthCorrelationResponse)
async def get_correlations(
	days: int = Query(30, ge=3, le=365),
	current_user: dict[str, Any] = Depends(get_current_user),
) -> dict[str, Any]:
	items = await health_service.health_finance_correlations(current_user["id"], days=days)
	return {"items": items}


@router.post("/devices/connect", response_model=DeviceConnectResponse)
async def connect_device(
	payload: DeviceConnectRequest,
	current_user: dict[str, Any] = Depends(get_current_user),
) -> dict[str, Any]:
	return health_service.connect_device(current_user["id"], payload.device_type, payload.metrics)


@router.get("/{metric}/latest", response_model=HealthSampleResponse)
async def get_latest(
	metric: HealthMetricType,
	current_user: dict[str, Any] = Depends(get_current_user),
) -> dict[str, Any]:
	sample = await health_service.get_latest(current_user["id"], metric)
	if not sample:
		raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"No {metric} data found for this user")
	return {"sample": sample}


@router.get("/{metric}/stats", response_model=HealthStats)
async def get_stats(
	metric: HealthMetricType,
	days: int = Query(7, ge=1, le=365),
	current_user: dict[str, Any] = Depends(get_current_user),
) -> dict[str, Any]:
	return await health_service.get_stats(current_user["id"], metric, days=days)


@router.get("/{metric}/history", response_model=HealthHistoryResponse)
async def get_history(
	metric: HealthMetricType,
	days: int = Query(7, ge=1, le=90),
	current_user: dict[str, Any] = Depends(get_current_user),
) -> dict[str, Any]:
	items = await health_service.get_history(current_user["id"], metric, days=days)
	return {"items": items}
