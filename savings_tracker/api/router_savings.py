"""
Savings endpoints — range-filtered records, totals and monthly buckets.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from savings_tracker.analytics.common import sanitize_for_json
from savings_tracker.analytics.savings import monthly_breakdown, query_savings
from savings_tracker.api.dependencies import SavingsQuery, get_store, parse_savings_query
from savings_tracker.api.response_models import ErrorResponse, MonthlyResponse, SavingsResponse
from savings_tracker.data.store import SavingsStore

router = APIRouter(prefix="/api/savings", tags=["savings"])

_ERRORS = {400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}}


def _safe_json(data: dict) -> JSONResponse:
    return JSONResponse(content=sanitize_for_json(data))


@router.get("", response_model=SavingsResponse, responses=_ERRORS)
def get_savings(
    query: SavingsQuery = Depends(parse_savings_query),
    store: SavingsStore = Depends(get_store),
):
    """Savings records for a device between two device-local date-times, inclusive."""
    result = query_savings(store, query.device_id, query.start, query.end)
    return _safe_json(result.to_dict())


@router.get("/monthly", response_model=MonthlyResponse, responses=_ERRORS)
def get_monthly_savings(
    query: SavingsQuery = Depends(parse_savings_query),
    store: SavingsStore = Depends(get_store),
):
    """Same filter as /api/savings, bucketed by device-local month."""
    result = query_savings(store, query.device_id, query.start, query.end)
    return _safe_json({
        "deviceId": result.device.id,
        "lastMonth": result.totals.last_month,
        "months": monthly_breakdown(result),
    })
