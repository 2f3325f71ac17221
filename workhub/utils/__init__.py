"""Utility functions and helpers."""

from .dates import end_of_month, month_range, previous_month, start_of_month, to_naive_utc, utcnow
from .security import get_password_hash, verify_password

__all__ = [
    "end_of_month",
    "get_password_hash",
    "month_range",
    "previous_month",
    "start_of_month",
    "to_naive_utc",
    "utcnow",
    "verify_password",
]
