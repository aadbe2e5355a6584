"""Platform timezone helpers.

All platform dates are interpreted in Brazil time (America/Sao_Paulo), modeled
as a fixed UTC-3 offset. Brazil has not observed DST since 2019.
"""
from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Union

BRAZIL_UTC_OFFSET_HOURS = 3
BRAZIL_TZ = timezone(timedelta(hours=-BRAZIL_UTC_OFFSET_HOURS), name="BRT")

DateLike = Union[date, datetime, str]


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def get_brazil_date(instant: Optional[datetime] = None) -> date:
    """Calendar day in Brazil for an instant (defaults to now).

    Naive datetimes are taken as UTC, which is how the database stores them.
    """
    if instant is None:
        instant = now_utc()
    elif instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(BRAZIL_TZ).date()


def start_of_day_brazil(year: int, month: int, day: int) -> datetime:
    """00:00:00 of the given Brazil day, as an aware datetime."""
    return datetime(year, month, day, tzinfo=BRAZIL_TZ)


def end_of_day_brazil(year: int, month: int, day: int) -> datetime:
    """23:59:59.999999 of the given Brazil day, as an aware datetime."""
    return datetime.combine(date(year, month, day), time.max, tzinfo=BRAZIL_TZ)


def parse_date_string_as_brazil_day(value: str) -> date:
    """Read ``YYYY-MM-DD`` or an ISO timestamp as a Brazil calendar day.

    Only the date part is used: ``2025-03-15T00:00:00Z`` is March 15th.
    """
    only_date = value.split("T", 1)[0].strip()
    return date.fromisoformat(only_date)


def to_brazil_date(value: Optional[DateLike]) -> Optional[date]:
    """Normalize a date, datetime or date string to a Brazil calendar day.

    Returns None for missing or unparseable values.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return get_brazil_date(value)
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return parse_date_string_as_brazil_day(value)
        except ValueError:
            return None
    return None


def days_difference_brazil(first: DateLike, second: Optional[DateLike] = None) -> int:
    """Whole days from ``first`` to ``second`` (default today), by Brazil date."""
    start = to_brazil_date(first)
    end = to_brazil_date(second) if second is not None else get_brazil_date()
    if start is None or end is None:
        raise ValueError("Both dates must be valid")
    return (end - start).days
