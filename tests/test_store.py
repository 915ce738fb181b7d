import logging

import pytest

from savings_tracker.data.loader import clean_field, load_devices, load_savings
from savings_tracker.data.schemas import Device, SavingsRecord
from savings_tracker.data.store import SavingsStore
from savings_tracker.errors import DataSourceError, ParseWarning

from tests.conftest import write_data


def test_load_sample_data(store):
    assert store.device_count() == 3
    assert store.record_count() == 9
    assert [d.id for d in store.devices()] == [1, 2, 3]
    assert store.get_device(2).timezone == "Europe/Berlin"


def test_unknown_timezone_resolves_to_default(store):
    assert store.get_device(3).timezone == "Asia/Kolkata"


def test_records_indexed_by_device_in_file_order(store):
    stamps = [r.device_timestamp for r in store.records_for(2)]
    assert stamps == ["2023-06-10T08:00:00+02:00", "2023-06-30 23:30:00"]
    assert store.records_for(42) == ()


def test_orphan_records_are_kept_and_counted(store):
    assert len(store.records_for(9)) == 1
    assert store.orphan_record_count() == 1


def test_fields_are_trimmed_and_unquoted(tmp_path):
    path = tmp_path / "devices.csv"
    path.write_text('id,name,timezone\n 7 , Depot Bus" ,  Europe/Paris \n')
    devices = load_devices(path)
    assert devices == [Device(id=7, name="Depot Bus", timezone="Europe/Paris")]


def test_clean_field_strips_one_quote_each_side():
    assert clean_field('  "abc"  ') == "abc"
    assert clean_field('abc"') == "abc"
    assert clean_field(None) == ""


def test_non_numeric_device_id_becomes_sentinel(tmp_path):
    path = tmp_path / "devices.csv"
    path.write_text("id,name,timezone\nabc,Ghost,UTC\n5,Real,UTC\n")
    with pytest.warns(ParseWarning, match="abc"):
        devices = load_devices(path)
    assert devices[0].id is None
    store = SavingsStore(devices)
    assert store.get_device(None) is None
    assert store.device_count() == 2


def test_bad_amounts_coerce_to_zero(tmp_path):
    path = tmp_path / "device-saving.csv"
    path.write_text(
        "device_id,device_timestamp,carbon_saved,fueld_saved\n"
        "1,2023-06-01T00:00,abc,-4\n"
        "1,2023-06-02T00:00,,inf\n"
        "1,2023-06-03T00:00,12.5,3\n"
    )
    with pytest.warns(ParseWarning):
        records = load_savings(path)
    assert [(r.carbon_saved, r.fueld_saved) for r in records] == [(0.0, 0.0), (0.0, 0.0), (12.5, 3.0)]


def test_extra_columns_pass_through_as_text(tmp_path):
    path = tmp_path / "device-saving.csv"
    path.write_text(
        "device_id,device_timestamp,carbon_saved,fueld_saved,route\n"
        "1,2023-06-01T00:00,10,1, R-42 \n"
    )
    [record] = load_savings(path)
    assert record.extra == {"route": "R-42"}
    assert record.to_dict()["route"] == "R-42"


def test_missing_columns_get_defaults(tmp_path):
    path = tmp_path / "device-saving.csv"
    path.write_text("device_id,device_timestamp\n1,2023-06-01T00:00\n")
    [record] = load_savings(path)
    assert record.carbon_saved == 0.0
    assert record.fueld_saved == 0.0


def test_duplicate_device_ids_first_wins(caplog):
    with caplog.at_level(logging.WARNING):
        store = SavingsStore([
            Device(1, "First", "UTC"),
            Device(1, "Second", "Asia/Kolkata"),
        ])
    assert store.get_device(1).name == "First"
    assert store.device_count() == 1
    assert "Duplicate device id 1" in caplog.text


def test_missing_file_raises_data_source_error(tmp_path):
    with pytest.raises(DataSourceError):
        load_devices(tmp_path / "nope.csv")


def test_empty_file_raises_data_source_error(tmp_path):
    path = tmp_path / "devices.csv"
    path.write_text("")
    with pytest.raises(DataSourceError):
        load_devices(path)


def test_missing_directory_gives_empty_store(tmp_path, caplog):
    with caplog.at_level(logging.ERROR):
        store = SavingsStore.load(tmp_path / "missing")
    assert store.device_count() == 0
    assert store.record_count() == 0
    assert "not found" in caplog.text


def test_missing_savings_file_keeps_devices(tmp_path):
    data_dir = write_data(tmp_path / "data", savings=None)
    store = SavingsStore.load(data_dir)
    assert store.device_count() == 3
    assert store.record_count() == 0


def test_store_is_read_only(store):
    assert isinstance(store.devices(), tuple)
    assert isinstance(store.records_for(1), tuple)
    with pytest.raises(Exception):
        store.get_device(1).name = "changed"
    with pytest.raises(TypeError):
        store._by_id[99] = Device(99, "x", "UTC")


def test_records_without_device_id_count_as_orphans():
    store = SavingsStore(
        [Device(1, "A", "UTC")],
        [SavingsRecord(None, "2023-06-01"), SavingsRecord(1, "2023-06-01")],
    )
    assert store.orphan_record_count() == 1
