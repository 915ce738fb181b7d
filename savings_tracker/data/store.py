"""
SavingsStore — immutable in-memory device and savings data.

Loaded once at startup and shared read-only by every request, so handlers
never need a lock. A fresh store is built rather than reloading in place.
"""
from __future__ import annotations

import logging
from collections import defaultdict
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Mapping

from savings_tracker.config import DATA_DIR, DEVICES_FILE, SAVINGS_FILE
from savings_tracker.data.loader import load_devices, load_savings
from savings_tracker.data.schemas import Device, SavingsRecord
from savings_tracker.errors import DataSourceError

logger = logging.getLogger(__name__)


class SavingsStore:
    """Devices and savings records with an index by device id."""

    def __init__(
        self,
        devices: Iterable[Device] = (),
        records: Iterable[SavingsRecord] = (),
    ) -> None:
        self._devices: tuple[Device, ...] = _dedupe_devices(devices)
        self._records: tuple[SavingsRecord, ...] = tuple(records)

        by_id = {d.id: d for d in self._devices if d.id is not None}
        self._by_id: Mapping[int, Device] = MappingProxyType(by_id)

        grouped: dict[int, list[SavingsRecord]] = defaultdict(list)
        for rec in self._records:
            if rec.device_id is not None:
                grouped[rec.device_id].append(rec)
        self._by_device: Mapping[int, tuple[SavingsRecord, ...]] = MappingProxyType(
            {k: tuple(v) for k, v in grouped.items()}
        )

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    @classmethod
    def load(
        cls,
        data_dir: Path = DATA_DIR,
        devices_file: str = DEVICES_FILE,
        savings_file: str = SAVINGS_FILE,
    ) -> "SavingsStore":
        """Load both CSVs from data_dir. Missing or broken files give empty datasets."""
        logger.info("Loading savings data from %s", data_dir)
        if not data_dir.is_dir():
            logger.error(
                "Data directory %s not found. Create it with %s and %s.",
                data_dir, devices_file, savings_file,
            )
            return cls()

        devices: list[Device] = []
        records: list[SavingsRecord] = []
        try:
            devices = load_devices(data_dir / devices_file)
        except DataSourceError as exc:
            logger.error("Could not load devices: %s", exc)
        try:
            records = load_savings(data_dir / savings_file)
        except DataSourceError as exc:
            logger.error("Could not load savings: %s", exc)

        store = cls(devices, records)
        orphans = store.orphan_record_count()
        if orphans:
            logger.warning("%s savings record(s) reference unknown devices", f"{orphans:,}")
        logger.info(
            "Loaded %s devices, %s savings records",
            f"{store.device_count():,}", f"{store.record_count():,}",
        )
        return store

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def devices(self) -> tuple[Device, ...]:
        return self._devices

    def get_device(self, device_id: int | None) -> Device | None:
        if device_id is None:
            return None
        return self._by_id.get(device_id)

    def records(self) -> tuple[SavingsRecord, ...]:
        return self._records

    def records_for(self, device_id: int) -> tuple[SavingsRecord, ...]:
        """Savings records for one device, in file order."""
        return self._by_device.get(device_id, ())

    def device_count(self) -> int:
        return len(self._devices)

    def record_count(self) -> int:
        return len(self._records)

    def orphan_record_count(self) -> int:
        """Records whose device_id matches no loaded device."""
        return sum(
            len(recs) for dev_id, recs in self._by_device.items() if dev_id not in self._by_id
        ) + sum(1 for r in self._records if r.device_id is None)


def _dedupe_devices(devices: Iterable[Device]) -> tuple[Device, ...]:
    """Keep the first device for each id; later duplicates are dropped."""
    seen: set[int] = set()
    kept = []
    for device in devices:
        if device.id is not None:
            if device.id in seen:
                logger.warning("Duplicate device id %s ('%s') ignored, first entry wins", device.id, device.name)
                continue
            seen.add(device.id)
        kept.append(device)
    return tuple(kept)
