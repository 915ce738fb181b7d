"""
Timestamp normalization — turns raw device timestamps into aware datetimes.

The savings export does not commit to one timestamp convention, so parsing
runs through an ordered list of strategies and takes the first success:

    1. strict ISO-8601
    2. lenient dateutil parse
    3. compact digits / epoch values read as UTC (logged as a fallback)

Query bounds skip (3) and must name a full date.

Naive results from (1) and (2) are read as wall-clock time in the device's
timezone. If nothing matches, the caller gets ``None`` and the record simply
never matches a date range.
"""
from __future__ import annotations

import datetime as dt
import re
import warnings
from typing import Callable, Optional
from zoneinfo import ZoneInfo

from dateutil import parser as date_parser

from savings_tracker.config import MONTH_FORMAT
from savings_tracker.data.timezones import get_zone
from savings_tracker.errors import ParseWarning

Strategy = Callable[[str, ZoneInfo], Optional[dt.datetime]]

# Missing components in a lenient parse default to this, never to "today"
_LENIENT_DEFAULT = dt.datetime(1970, 1, 1)
# Second base; a component that differs between the two parses was not given
_ALT_DEFAULT = dt.datetime(1971, 2, 2)

_DIGITS_RE = re.compile(r"^\d+$")
_COMPACT_FORMATS = {
    12: "%Y%m%d%H%M",
    14: "%Y%m%d%H%M%S",
}


def _localize(value: dt.datetime, tz: ZoneInfo) -> dt.datetime | None:
    """Attach tz to naive values; None if the parsed offset is out of range."""
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    try:
        # dateutil accepts offsets such as +2500 that datetime cannot use
        value.utcoffset()
    except ValueError:
        return None
    return value


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

def parse_iso8601(raw: str, tz: ZoneInfo) -> dt.datetime | None:
    """Strict ISO-8601, keeping any offset carried by the string."""
    try:
        value = dt.datetime.fromisoformat(raw)
    except ValueError:
        return None
    return _localize(value, tz)


def parse_lenient(raw: str, tz: ZoneInfo) -> dt.datetime | None:
    """General-purpose parse for formats like '15/06/2023 10:00' or 'Jun 15 2023'."""
    if _DIGITS_RE.match(raw):
        # bare digit runs are epoch / compact values, handled by the UTC strategy
        return None
    try:
        value = date_parser.parse(raw, default=_LENIENT_DEFAULT)
    except (ValueError, OverflowError):
        return None
    return _localize(value, tz)


def parse_lenient_dated(raw: str, tz: ZoneInfo) -> dt.datetime | None:
    """Lenient parse that also requires an explicit year, month and day.

    Used for query bounds, where a bare '10:00' or 'June' would otherwise
    silently land on the 1970 default date.
    """
    value = parse_lenient(raw, tz)
    if value is None:
        return None
    try:
        alt = date_parser.parse(raw, default=_ALT_DEFAULT)
    except (ValueError, OverflowError):
        return None
    if (value.year, value.month, value.day) != (alt.year, alt.month, alt.day):
        return None
    return value


def parse_utc_components(raw: str, tz: ZoneInfo) -> dt.datetime | None:
    """Last resort: compact YYYYMMDDHHMM[SS] or epoch seconds/millis, as UTC.

    Eight-digit YYYYMMDD never reaches this point: it is an ISO-8601 basic
    date and is read in device-local time by parse_iso8601.
    """
    if not _DIGITS_RE.match(raw):
        return None

    fmt = _COMPACT_FORMATS.get(len(raw))
    try:
        if fmt is not None:
            value = dt.datetime.strptime(raw, fmt).replace(tzinfo=dt.timezone.utc)
        elif len(raw) == 10:
            value = dt.datetime.fromtimestamp(int(raw), tz=dt.timezone.utc)
        elif len(raw) == 13:
            value = dt.datetime.fromtimestamp(int(raw) / 1000, tz=dt.timezone.utc)
        else:
            return None
    except (ValueError, OverflowError, OSError):
        return None

    warnings.warn(
        f"Timestamp '{raw}' is not ISO-8601, using UTC fallback",
        ParseWarning,
        stacklevel=2,
    )
    return value


RECORD_STRATEGIES: tuple[Strategy, ...] = (parse_iso8601, parse_lenient, parse_utc_components)
QUERY_STRATEGIES: tuple[Strategy, ...] = (parse_iso8601, parse_lenient_dated)


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------

def run_strategies(
    raw: str | None,
    tz: ZoneInfo,
    strategies: tuple[Strategy, ...] = RECORD_STRATEGIES,
) -> dt.datetime | None:
    """Try each strategy in order and return the first parsed value."""
    if not isinstance(raw, str):
        return None
    text = raw.strip()
    if not text:
        return None
    for strategy in strategies:
        value = strategy(text, tz)
        if value is not None:
            return value
    return None


def normalize_timestamp(
    raw: str | None,
    timezone: str,
    device_id: int | None = None,
) -> dt.datetime | None:
    """Parse a record timestamp into an aware datetime, or None if unparseable."""
    value = run_strategies(raw, get_zone(timezone), RECORD_STRATEGIES)
    if value is None:
        warnings.warn(
            f"Unparseable timestamp '{raw}' for device {device_id}, record excluded",
            ParseWarning,
            stacklevel=2,
        )
    return value


def parse_query_datetime(text: str | None, timezone: str) -> dt.datetime | None:
    """Parse a query bound in the device's timezone.

    Returns the instant expressed in that timezone, or None when the text
    is not a recognisable date-time.
    """
    tz = get_zone(timezone)
    value = run_strategies(text, tz, QUERY_STRATEGIES)
    if value is None:
        return None
    try:
        return value.astimezone(tz)
    except (ValueError, OverflowError):
        return None


def month_key(value: dt.datetime, timezone: str) -> str:
    """Calendar month ('YYYY-MM') of an instant, in the given timezone."""
    return value.astimezone(get_zone(timezone)).strftime(MONTH_FORMAT)
