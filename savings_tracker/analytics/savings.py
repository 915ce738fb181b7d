"""
Savings aggregation — range filtering, totals and the end-month rollup.
"""
from __future__ import annotations

import datetime as dt
import math
from typing import Iterable

import pandas as pd

from savings_tracker.analytics.common import to_tonnes
from savings_tracker.config import MSG_DEVICE_NOT_FOUND, MSG_INVALID_RANGE
from savings_tracker.data.schemas import Device, MatchedRecord, SavingsResult, SavingsTotals
from savings_tracker.data.store import SavingsStore
from savings_tracker.data.timestamps import month_key, normalize_timestamp, parse_query_datetime
from savings_tracker.errors import NotFoundError, ValidationError


def parse_device_id(value) -> int | None:
    """Device id from a query value; None if it is not a whole number.

    Accepts "1" and "1.0" alike, matching how ids are read from the CSV.
    """
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    text = str(value).strip()
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return None
    if not math.isfinite(number) or not number.is_integer():
        return None
    return int(number)


def find_device(store: SavingsStore, device_id) -> Device:
    device = store.get_device(parse_device_id(device_id))
    if device is None:
        raise NotFoundError(MSG_DEVICE_NOT_FOUND)
    return device


def resolve_range(device: Device, start: str, end: str) -> tuple[dt.datetime, dt.datetime]:
    """Parse both bounds in the device's timezone."""
    start_dt = parse_query_datetime(start, device.timezone)
    end_dt = parse_query_datetime(end, device.timezone)
    if start_dt is None or end_dt is None:
        raise ValidationError(MSG_INVALID_RANGE)
    return start_dt, end_dt


def filter_records(
    store: SavingsStore,
    device: Device,
    start: dt.datetime,
    end: dt.datetime,
) -> list[MatchedRecord]:
    """Device records with start <= timestamp <= end, in file order.

    Unparseable timestamps are skipped (a ParseWarning is emitted for each).
    """
    matched = []
    for rec in store.records_for(device.id):
        ts = normalize_timestamp(rec.device_timestamp, device.timezone, device.id)
        if ts is None:
            continue
        if start <= ts <= end:
            matched.append(MatchedRecord(rec, ts.astimezone(start.tzinfo)))
    return matched


def _sum_savings(matched: Iterable[MatchedRecord]) -> tuple[float, float]:
    carbon = 0.0
    fuel = 0.0
    for m in matched:
        carbon += m.record.carbon_saved
        fuel += m.record.fueld_saved
    return to_tonnes(carbon), fuel


def compute_totals(
    matched: list[MatchedRecord],
    device: Device,
    end: dt.datetime,
) -> SavingsTotals:
    """Range totals plus totals for the device-local month containing end."""
    total_carbon, total_fuel = _sum_savings(matched)

    last_month = month_key(end, device.timezone)
    in_month = [
        m for m in matched
        if month_key(m.timestamp, device.timezone) == last_month and m.timestamp <= end
    ]
    monthly_carbon, monthly_fuel = _sum_savings(in_month) if in_month else (0.0, 0.0)

    return SavingsTotals(
        total_carbon=total_carbon,
        total_fuel=total_fuel,
        monthly_carbon=monthly_carbon,
        monthly_fuel=monthly_fuel,
        last_month=last_month,
    )


def query_savings(store: SavingsStore, device_id, start: str, end: str) -> SavingsResult:
    """Filtered savings and totals for one device over an inclusive range.

    Raises NotFoundError for an unknown device and ValidationError when
    either bound cannot be parsed. A start after end yields an empty result.
    """
    device = find_device(store, device_id)
    start_dt, end_dt = resolve_range(device, start, end)

    matched = filter_records(store, device, start_dt, end_dt)
    totals = compute_totals(matched, device, end_dt)
    return SavingsResult(
        device=device,
        start=start_dt,
        end=end_dt,
        records=tuple(matched),
        totals=totals,
    )


def monthly_breakdown(result: SavingsResult) -> list[dict]:
    """Filtered records bucketed by device-local month, oldest first."""
    if not result.records:
        return []

    tz = result.device.timezone
    df = pd.DataFrame({
        "month": [month_key(m.timestamp, tz) for m in result.records],
        "carbon": [m.record.carbon_saved for m in result.records],
        "fuel": [m.record.fueld_saved for m in result.records],
    })
    monthly = df.groupby("month", sort=True).agg(
        carbon=("carbon", "sum"),
        fuel=("fuel", "sum"),
        records=("carbon", "size"),
    ).reset_index()

    return [
        {
            "month": row.month,
            "carbon": to_tonnes(row.carbon),
            "fuel": float(row.fuel),
            "records": int(row.records),
        }
        for row in monthly.itertuples(index=False)
    ]
