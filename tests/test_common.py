import math

import pytest

from savings_tracker.analytics.common import sanitize_for_json, to_tonnes


def test_to_tonnes():
    assert to_tonnes(1250.5) == pytest.approx(1.2505)


def test_sanitize_replaces_non_finite_floats():
    payload = {"a": math.nan, "b": [math.inf, -math.inf, 1.5], "c": ("x", 2)}
    assert sanitize_for_json(payload) == {"a": 0.0, "b": [0.0, 0.0, 1.5], "c": ["x", 2]}


def test_sanitize_keeps_plain_values():
    assert sanitize_for_json({"month": "2023-06", "records": 3, "ok": None}) == {
        "month": "2023-06", "records": 3, "ok": None,
    }
