from __future__ import annotations

import calendar
from datetime import date, datetime, time, timedelta


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_iso_datetime(value: str) -> datetime:
    """Parse 'YYYY-MM-DDTHH:MM[:SS]' into a naive local datetime."""
    return datetime.fromisoformat(value).replace(tzinfo=None)


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """Half-open [start, end) of a calendar day."""
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


def month_bounds(month: int, year: int) -> tuple[date, date]:
    """First and last calendar day of a month (both inclusive)."""
    last = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last)


def inclusive_day_count(start: date, end: date) -> int:
    return (end - start).days + 1


def minutes_between(earlier: datetime, later: datetime) -> float:
    """Signed minutes from `earlier` to `later`."""
    return (later - earlier).total_seconds() / 60


def hours_between(earlier: datetime, later: datetime) -> float:
    return (later - earlier).total_seconds() / 3600


def intervals_overlap(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    """True when half-open intervals [a_start, a_end) and [b_start, b_end) intersect."""
    return a_start < b_end and b_start < a_end
