#!/usr/bin/env python3
"""
Savings Tracker CLI — API server and ad-hoc savings queries.

USAGE:
  python -m savings_tracker.cli serve                                 # Start API server
  python -m savings_tracker.cli serve --port 9000 --reload

  python -m savings_tracker.cli devices                               # List loaded devices

  python -m savings_tracker.cli savings 1 2023-06-01T00:00 2023-06-30T23:59
  python -m savings_tracker.cli savings 1 2023-01-01 2023-12-31 --monthly
"""
from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path

from savings_tracker.config import DATA_DIR, HOST, PORT
from savings_tracker.analytics.savings import monthly_breakdown, query_savings
from savings_tracker.data.store import SavingsStore
from savings_tracker.errors import SavingsError


def _load(args) -> SavingsStore:
    return SavingsStore.load(Path(args.data_dir))


def cmd_serve(args):
    """Start the API server."""
    import uvicorn
    from savings_tracker.main import create_app

    data_dir = Path(args.data_dir).resolve()
    # the reload worker re-imports savings_tracker.main and reads this
    os.environ["SAVINGS_DATA_DIR"] = str(data_dir)

    print(f"\nStarting Savings Tracker API on http://{args.host}:{args.port} ...")
    if args.reload:
        uvicorn.run("savings_tracker.main:app", host=args.host, port=args.port, reload=True)
    else:
        uvicorn.run(create_app(data_dir=data_dir), host=args.host, port=args.port)


def cmd_devices(args):
    """Print loaded devices."""
    store = _load(args)
    devices = store.devices()
    print(f"\nDEVICES ({len(devices)}):\n")
    for d in devices:
        print(f"{str(d.id):<8}{d.name[:40]:<42}{d.timezone}")
    return 0


def cmd_savings(args):
    """Run a savings query and print the JSON result."""
    store = _load(args)
    try:
        result = query_savings(store, args.device_id, args.start, args.end)
    except SavingsError as exc:
        print(f"Error: {exc.message}", file=sys.stderr)
        return 1

    if args.monthly:
        payload = {
            "deviceId": result.device.id,
            "lastMonth": result.totals.last_month,
            "months": monthly_breakdown(result),
        }
    else:
        payload = result.to_dict()
    print(json.dumps(payload, indent=2, default=str))
    return 0


def main(argv: list[str] | None = None) -> int:
    from savings_tracker.main import configure_logging
    configure_logging()

    parser = argparse.ArgumentParser(
        description="Savings Tracker — device carbon and fuel savings",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--data-dir", default=str(DATA_DIR), help=f"CSV directory (default {DATA_DIR})")
    subparsers = parser.add_subparsers(dest="command", help="Command")

    serve_parser = subparsers.add_parser("serve", help="Start API server")
    serve_parser.add_argument("--host", default=HOST, help=f"Bind address (default {HOST})")
    serve_parser.add_argument("--port", type=int, default=PORT, help=f"Port (default {PORT})")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    serve_parser.set_defaults(func=cmd_serve)

    devices_parser = subparsers.add_parser("devices", help="List devices")
    devices_parser.set_defaults(func=cmd_devices)

    savings_parser = subparsers.add_parser("savings", help="Query savings for a device")
    savings_parser.add_argument("device_id", help="Device id")
    savings_parser.add_argument("start", help="Range start (device-local)")
    savings_parser.add_argument("end", help="Range end (device-local, inclusive)")
    savings_parser.add_argument("--monthly", action="store_true", help="Bucket results by month")
    savings_parser.set_defaults(func=cmd_savings)

    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 0

    return args.func(args) or 0


if __name__ == "__main__":
    sys.exit(main())
