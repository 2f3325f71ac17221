"""Date helpers for naive-UTC timestamps and calendar month ranges."""

import calendar
from datetime import datetime, timezone
from typing import Tuple


def utcnow() -> datetime:
    """Current time as a naive UTC datetime (the storage convention)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def start_of_month(value: datetime) -> datetime:
    """First instant of the month containing ``value``."""
    return value.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def end_of_month(value: datetime) -> datetime:
    """Last representable instant of the month containing ``value``."""
    last_day = calendar.monthrange(value.year, value.month)[1]
    return value.replace(
        day=last_day, hour=23, minute=59, second=59, microsecond=999999
    )


def previous_month(value: datetime) -> datetime:
    """Same instant shifted one calendar month back, clamped to the month length."""
    year, month = (value.year - 1, 12) if value.month == 1 else (value.year, value.month - 1)
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def month_range(value: datetime) -> Tuple[datetime, datetime]:
    """Inclusive ``(start, end)`` bounds of the month containing ``value``."""
    return start_of_month(value), end_of_month(value)


def to_naive_utc(value: datetime) -> datetime:
    """Normalize an aware datetime to naive UTC; naive values are assumed UTC."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
