"""
Record schemas for devices, savings rows and query results.
"""
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class Device:
    """A metering device with its local timezone."""
    id: Optional[int]                    # None when the CSV id was not numeric
    name: str
    timezone: str                        # always a resolvable IANA id

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "timezone": self.timezone}


@dataclass(frozen=True)
class SavingsRecord:
    """One carbon/fuel savings reading as it appeared in the CSV."""
    device_id: Optional[int]
    device_timestamp: str                # raw text, parsed at query time
    carbon_saved: float = 0.0            # kg
    fueld_saved: float = 0.0
    extra: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    def to_dict(self) -> dict[str, Any]:
        row = {
            "device_id": self.device_id,
            "device_timestamp": self.device_timestamp,
            "carbon_saved": self.carbon_saved,
            "fueld_saved": self.fueld_saved,
        }
        row.update(self.extra)
        return row


@dataclass(frozen=True)
class SavingsTotals:
    total_carbon: float = 0.0            # tonnes
    total_fuel: float = 0.0
    monthly_carbon: float = 0.0          # tonnes
    monthly_fuel: float = 0.0
    last_month: str = ""                 # YYYY-MM

    def to_dict(self) -> dict:
        return {
            "totalCarbon": self.total_carbon,
            "totalFuel": self.total_fuel,
            "monthlyCarbon": self.monthly_carbon,
            "monthlyFuel": self.monthly_fuel,
            "lastMonth": self.last_month,
        }


@dataclass(frozen=True)
class MatchedRecord:
    """A savings record that fell inside the queried range."""
    record: SavingsRecord
    timestamp: dt.datetime               # normalized, device-local

    def to_dict(self) -> dict[str, Any]:
        row = self.record.to_dict()
        # the chart layer re-parses the raw text, so mirror it unchanged
        row["timestamp"] = self.record.device_timestamp
        return row


@dataclass(frozen=True)
class SavingsResult:
    """Filtered records plus totals for one device and date range."""
    device: Device
    start: dt.datetime
    end: dt.datetime
    records: tuple[MatchedRecord, ...]
    totals: SavingsTotals

    def to_dict(self) -> dict:
        return {
            "data": [m.to_dict() for m in self.records],
            "totals": self.totals.to_dict(),
        }
