"""Savings Tracker — device carbon and fuel savings API."""

__version__ = "1.0.0"
