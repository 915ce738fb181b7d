"""Data loading, timestamp/timezone normalization, and the in-memory store."""
from .loader import load_devices, load_savings
from .store import SavingsStore
from .schemas import Device, SavingsRecord, SavingsResult, SavingsTotals
from .timestamps import normalize_timestamp, parse_query_datetime
from .timezones import resolve_timezone
