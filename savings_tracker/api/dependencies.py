"""
FastAPI dependencies — store injection and savings query parsing.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fastapi import HTTPException, Query, Request

from savings_tracker.config import MSG_PARAMS_REQUIRED
from savings_tracker.data.store import SavingsStore
from savings_tracker.errors import ValidationError


def get_store(request: Request) -> SavingsStore:
    """The store built during startup and attached to app.state."""
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise HTTPException(503, "Server not initialized yet")
    return store


@dataclass(frozen=True)
class SavingsQuery:
    device_id: str
    start: str
    end: str


def parse_savings_query(
    deviceId: Optional[str] = Query(None, description="Device id"),
    startDateTime: Optional[str] = Query(None, description="Range start, device-local"),
    endDateTime: Optional[str] = Query(None, description="Range end, device-local, inclusive"),
) -> SavingsQuery:
    """All three parameters are required; blank values count as missing."""
    values = [v.strip() if v else "" for v in (deviceId, startDateTime, endDateTime)]
    if not all(values):
        raise ValidationError(MSG_PARAMS_REQUIRED)
    return SavingsQuery(*values)
