import pytest
from fastapi.testclient import TestClient

from savings_tracker.data.store import SavingsStore
from savings_tracker.main import create_app

DEVICES_CSV = """id,name,timezone
1,Delhi Bus,Asia/Kolkata
2,Berlin Van,Europe/Berlin
3,Legacy Unit,Mars/Phobos
"""

SAVINGS_CSV = """device_id,device_timestamp,carbon_saved,fueld_saved
1,2023-05-31T22:00:00+05:30,420.5,8.2
1,2023-06-01T00:00:00+05:30,500,10
1,2023-06-15T10:00:00+05:30,650.25,12.5
1,not-a-date,999,99
1,2023-06-30T23:59:00+05:30,100,2
1,2023-07-01T00:00:00+05:30,700,14
2,2023-06-10T08:00:00+02:00,210,4.4
2,2023-06-30 23:30:00,190,3.8
9,2023-06-20T12:00:00,75,1.5
"""


def write_data(directory, devices=DEVICES_CSV, savings=SAVINGS_CSV):
    """Write devices.csv / device-saving.csv into directory; None skips a file."""
    directory.mkdir(parents=True, exist_ok=True)
    if devices is not None:
        (directory / "devices.csv").write_text(devices)
    if savings is not None:
        (directory / "device-saving.csv").write_text(savings)
    return directory


@pytest.fixture
def data_dir(tmp_path):
    return write_data(tmp_path / "data")


@pytest.fixture
def store(data_dir):
    return SavingsStore.load(data_dir)


@pytest.fixture
def client(store, tmp_path):
    app = create_app(store=store, static_dir=tmp_path / "no-static")
    with TestClient(app) as c:
        yield c
