"""
Timezone resolution for device records.
"""
from __future__ import annotations

from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from savings_tracker.config import DEFAULT_TIMEZONE


@lru_cache(maxsize=None)
def _is_known_zone(name: str) -> bool:
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        # malformed keys ("../x", absolute paths) raise ValueError, directory
        # names like "America" can surface as OSError
        return False
    return True


def resolve_timezone(name: str | None) -> str:
    """Return ``name`` if it is a known IANA zone, else DEFAULT_TIMEZONE."""
    if not isinstance(name, str):
        return DEFAULT_TIMEZONE
    name = name.strip()
    if not name or not _is_known_zone(name):
        return DEFAULT_TIMEZONE
    return name


@lru_cache(maxsize=None)
def get_zone(name: str) -> ZoneInfo:
    """ZoneInfo for a timezone name, falling back to the default zone."""
    return ZoneInfo(resolve_timezone(name))
