"""
CSV loading and field cleaning for the device and savings exports.
"""
from __future__ import annotations

import logging
import math
import warnings
from pathlib import Path
from types import MappingProxyType

import numpy as np
import pandas as pd

from savings_tracker.config import DEVICE_COLUMNS, SAVINGS_COLUMNS, SAVINGS_NUMERIC_COLS
from savings_tracker.data.schemas import Device, SavingsRecord
from savings_tracker.data.timezones import resolve_timezone
from savings_tracker.errors import DataSourceError, ParseWarning

logger = logging.getLogger(__name__)

_STRAY_QUOTES_RE = r'^"|"$'


# ---------------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------------

def read_csv_text(filepath: Path) -> pd.DataFrame:
    """Read a header-delimited CSV with every column kept as cleaned text.

    Raises DataSourceError when the file is missing, unreadable or empty.
    """
    if not filepath.is_file():
        raise DataSourceError(filepath, "file not found")
    try:
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always", pd.errors.ParserWarning)
            df = pd.read_csv(
                filepath,
                dtype=str,
                encoding="utf-8-sig",
                keep_default_na=False,
                skip_blank_lines=True,
                on_bad_lines="warn",
            )
    except pd.errors.EmptyDataError:
        raise DataSourceError(filepath, "file is empty")
    except (OSError, UnicodeDecodeError, pd.errors.ParserError) as exc:
        raise DataSourceError(filepath, str(exc))

    for w in caught:
        logger.warning("%s: %s", filepath.name, str(w.message).strip())

    df.columns = [clean_field(c) for c in df.columns]
    return clean_frame(df)


def clean_field(value) -> str:
    """Trim whitespace and one stray leading/trailing double quote."""
    text = "" if value is None else str(value).strip()
    if text.startswith('"'):
        text = text[1:]
    if text.endswith('"'):
        text = text[:-1]
    return text


def clean_frame(df: pd.DataFrame) -> pd.DataFrame:
    """Vectorized clean_field over every column."""
    for col in df.columns:
        df[col] = (
            df[col].fillna("").astype(str)
            .str.strip()
            .str.replace(_STRAY_QUOTES_RE, "", regex=True)
        )
    return df


# ---------------------------------------------------------------------------
# Type coercion
# ---------------------------------------------------------------------------

def parse_int_series(values: pd.Series) -> list[int | None]:
    """Integer ids; anything non-integral becomes None so it never matches."""
    numeric = pd.to_numeric(values, errors="coerce")
    out: list[int | None] = []
    for raw, num in zip(values, numeric):
        if pd.isna(num) or not math.isfinite(num) or float(num) != int(num):
            if raw != "":
                warnings.warn(f"Non-numeric id '{raw}', row will not match any device", ParseWarning)
            out.append(None)
        else:
            out.append(int(num))
    return out


def parse_amount_series(values: pd.Series, column: str) -> pd.Series:
    """Non-negative finite floats; unparseable, negative or infinite → 0."""
    numeric = pd.to_numeric(values, errors="coerce").astype("float64")
    bad = ~np.isfinite(numeric) | (numeric < 0)
    # blank cells are common in the export and coerce silently
    noisy = bad & (values != "")
    if noisy.any():
        sample = ", ".join(repr(v) for v in values[noisy].head(3))
        warnings.warn(
            f"{int(noisy.sum())} {column} value(s) coerced to 0 (e.g. {sample})",
            ParseWarning,
        )
    return numeric.where(~bad, 0.0)


def _require_columns(df: pd.DataFrame, columns: list[str], filepath: Path) -> pd.DataFrame:
    missing = [c for c in columns if c not in df.columns]
    if missing:
        logger.warning("%s: missing column(s) %s, using defaults", filepath.name, ", ".join(missing))
        for col in missing:
            df[col] = ""
    return df


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def load_devices(filepath: Path) -> list[Device]:
    """Load devices.csv (id,name,timezone) into Device records."""
    df = _require_columns(read_csv_text(filepath), DEVICE_COLUMNS, filepath)

    ids = parse_int_series(df["id"])
    devices = []
    for device_id, name, tz_name in zip(ids, df["name"], df["timezone"]):
        timezone = resolve_timezone(tz_name)
        if timezone != tz_name:
            logger.warning("Device %s: unknown timezone '%s', using %s", device_id, tz_name, timezone)
        devices.append(Device(id=device_id, name=name, timezone=timezone))
    return devices


def load_savings(filepath: Path) -> list[SavingsRecord]:
    """Load device-saving.csv into SavingsRecord rows.

    Columns beyond the known four are carried through as text.
    """
    df = _require_columns(read_csv_text(filepath), SAVINGS_COLUMNS, filepath)

    device_ids = parse_int_series(df["device_id"])
    for col in SAVINGS_NUMERIC_COLS:
        df[col] = parse_amount_series(df[col], col)

    extra_cols = [c for c in df.columns if c not in SAVINGS_COLUMNS]
    records = []
    for device_id, (_, row) in zip(device_ids, df.iterrows()):
        extra = MappingProxyType({c: row[c] for c in extra_cols})
        records.append(SavingsRecord(
            device_id=device_id,
            device_timestamp=row["device_timestamp"],
            carbon_saved=float(row["carbon_saved"]),
            fueld_saved=float(row["fueld_saved"]),
            extra=extra,
        ))
    return records
