import json
import os

from savings_tracker.cli import main


def test_devices_command(data_dir, capsys):
    assert main(["--data-dir", str(data_dir), "devices"]) == 0
    out = capsys.readouterr().out
    assert "DEVICES (3)" in out
    assert "Berlin Van" in out


def test_savings_command_prints_json(data_dir, capsys):
    code = main(["--data-dir", str(data_dir), "savings", "2", "2023-06-01T00:00", "2023-06-30T23:59"])
    assert code == 0
    body = json.loads(capsys.readouterr().out)
    assert len(body["data"]) == 2
    assert body["totals"]["lastMonth"] == "2023-06"


def test_savings_command_monthly(data_dir, capsys):
    code = main(["--data-dir", str(data_dir), "savings", "2", "2023-06-01", "2023-06-30T23:59", "--monthly"])
    assert code == 0
    body = json.loads(capsys.readouterr().out)
    assert body["months"][0]["month"] == "2023-06"
    assert body["months"][0]["records"] == 2


def test_savings_command_unknown_device(data_dir, capsys):
    code = main(["--data-dir", str(data_dir), "savings", "99", "2023-06-01", "2023-06-30"])
    assert code == 1
    assert "Device not found" in capsys.readouterr().err


def test_serve_uses_data_dir(data_dir, monkeypatch):
    import uvicorn

    calls = []
    monkeypatch.setenv("SAVINGS_DATA_DIR", "unset")
    monkeypatch.setattr(uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))

    assert main(["--data-dir", str(data_dir), "serve", "--port", "9000"]) == 0
    app, kwargs = calls[0]
    assert app.state.data_dir == data_dir.resolve()
    assert kwargs["port"] == 9000
    assert os.environ["SAVINGS_DATA_DIR"] == str(data_dir.resolve())


def test_serve_reload_passes_data_dir_through_env(data_dir, monkeypatch):
    import uvicorn

    calls = []
    monkeypatch.setenv("SAVINGS_DATA_DIR", "unset")
    monkeypatch.setattr(uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))

    main(["--data-dir", str(data_dir), "serve", "--reload"])
    assert calls[0][0] == "savings_tracker.main:app"
    assert calls[0][1]["reload"] is True
    assert os.environ["SAVINGS_DATA_DIR"] == str(data_dir.resolve())
