"""
Pydantic response schemas for the API.
"""
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str
    devices: int
    records: int
    orphan_records: int


class DeviceResponse(BaseModel):
    id: Optional[int]
    name: str
    timezone: str


class TotalsResponse(BaseModel):
    totalCarbon: float
    totalFuel: float
    monthlyCarbon: float
    monthlyFuel: float
    lastMonth: str


class SavingsResponse(BaseModel):
    data: list[dict[str, Any]]
    totals: TotalsResponse


class MonthBucket(BaseModel):
    month: str
    carbon: float
    fuel: float
    records: int


class MonthlyResponse(BaseModel):
    deviceId: int
    lastMonth: str
    months: list[MonthBucket]


class ErrorResponse(BaseModel):
    error: str
