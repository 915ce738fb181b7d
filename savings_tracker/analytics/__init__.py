"""Savings aggregation over the in-memory store."""
from .savings import monthly_breakdown, query_savings
