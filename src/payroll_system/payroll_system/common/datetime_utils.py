from __future__ import annotations

import calendar
from datetime import date, datetime, time
from typing import Iterator

from ..core.exceptions import ValidationError


def parse_iso_datetime(value: str) -> datetime:
    """Parse YYYY-MM-DD or YYYY-MM-DDTHH:MM[:SS] into a datetime."""
    try:
        return datetime.fromisoformat(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid datetime {value!r} (expected ISO format)")


def parse_hhmm(value: str) -> time:
    try:
        return datetime.strptime(value, "%H:%M").time()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid time {value!r} (expected HH:MM)")


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def validate_period(month: int, year: int) -> None:
    if not isinstance(month, int) or not 1 <= month <= 12:
        raise ValidationError(f"Invalid month {month!r}")
    if not isinstance(year, int) or not 1900 <= year <= 9999:
        raise ValidationError(f"Invalid year {year!r}")


def month_bounds(month: int, year: int) -> tuple[date, date]:
    """First and last calendar day of a month."""
    validate_period(month, year)
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def iter_month_days(month: int, year: int) -> Iterator[date]:
    first, last = month_bounds(month, year)
    for day in range(first.day, last.day + 1):
        yield date(year, month, day)
