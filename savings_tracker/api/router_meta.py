"""
Meta endpoints: health and device listing.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends

from savings_tracker.api.dependencies import get_store
from savings_tracker.api.response_models import DeviceResponse, HealthResponse
from savings_tracker.data.store import SavingsStore

router = APIRouter(prefix="/api", tags=["meta"])


@router.get("/health", response_model=HealthResponse)
def health(store: SavingsStore = Depends(get_store)):
    return HealthResponse(
        status="ok",
        devices=store.device_count(),
        records=store.record_count(),
        orphan_records=store.orphan_record_count(),
    )


@router.get("/devices", response_model=list[DeviceResponse])
def list_devices(store: SavingsStore = Depends(get_store)):
    """All loaded devices with their resolved timezones."""
    return [d.to_dict() for d in store.devices()]
