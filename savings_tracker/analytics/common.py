"""
Unit conversion and JSON helpers used across analytics modules.
"""
from __future__ import annotations

import math

from savings_tracker.config import CARBON_UNIT_DIVISOR


def to_tonnes(carbon_kg: float) -> float:
    """Convert a carbon_saved sum to tonnes."""
    return float(carbon_kg) / CARBON_UNIT_DIVISOR


def sanitize_for_json(obj):
    """Recursively replace NaN/inf floats so the payload is valid JSON."""
    if isinstance(obj, dict):
        return {k: sanitize_for_json(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [sanitize_for_json(v) for v in obj]
    if isinstance(obj, float):
        return 0.0 if (math.isnan(obj) or math.isinf(obj)) else obj
    return obj
