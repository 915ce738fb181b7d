"""
Savings Tracker — Configuration: paths, server settings, constants.
"""
import os
from pathlib import Path

# ---------------------------------------------------------------------------
# Paths — override with SAVINGS_DATA_DIR / SAVINGS_STATIC_DIR for deployment
# ---------------------------------------------------------------------------
PROJECT_ROOT = Path(__file__).resolve().parent.parent
DATA_DIR = Path(os.environ.get("SAVINGS_DATA_DIR", str(PROJECT_ROOT / "data")))
STATIC_DIR = Path(os.environ.get("SAVINGS_STATIC_DIR", str(PROJECT_ROOT / "public")))

DEVICES_FILE = os.environ.get("DEVICES_FILE", "devices.csv")
SAVINGS_FILE = os.environ.get("SAVINGS_FILE", "device-saving.csv")

# ---------------------------------------------------------------------------
# Server
# ---------------------------------------------------------------------------
HOST = os.environ.get("HOST", "0.0.0.0")
PORT = int(os.environ.get("PORT", "8081"))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# ---------------------------------------------------------------------------
# CSV columns
# ---------------------------------------------------------------------------
DEVICE_COLUMNS = ["id", "name", "timezone"]
SAVINGS_COLUMNS = ["device_id", "device_timestamp", "carbon_saved", "fueld_saved"]
SAVINGS_NUMERIC_COLS = ["carbon_saved", "fueld_saved"]

# ---------------------------------------------------------------------------
# Domain constants
# ---------------------------------------------------------------------------
DEFAULT_TIMEZONE = "Asia/Kolkata"

# carbon_saved is recorded in kg, totals are reported in tonnes
CARBON_UNIT_DIVISOR = 1000

MONTH_FORMAT = "%Y-%m"

# ---------------------------------------------------------------------------
# API error messages (clients match on these strings)
# ---------------------------------------------------------------------------
MSG_PARAMS_REQUIRED = "deviceId, startDateTime, and endDateTime are required"
MSG_DEVICE_NOT_FOUND = "Device not found"
MSG_INVALID_RANGE = "Invalid startDateTime or endDateTime format"
