"""Calendar-day and week boundary helpers."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional
from zoneinfo import ZoneInfo

DEFAULT_TIMEZONE = "Europe/Copenhagen"


def day_key(value) -> Optional[str]:
    """Return the ``YYYY-MM-DD`` day of a date-like value, or None when unresolvable."""

    if isinstance(value, str):
        return value[:10] if value else None
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return None


def today_iso(tz_name: Optional[str] = None, now: Optional[datetime] = None) -> str:
    """Return today's calendar day in ``tz_name`` as an ISO string."""

    tz = ZoneInfo(tz_name or DEFAULT_TIMEZONE)
    current = now.astimezone(tz) if now is not None else datetime.now(tz)
    return current.date().isoformat()


def _as_date(day) -> date:
    if isinstance(day, datetime):
        return day.date()
    if isinstance(day, date):
        return day
    return date.fromisoformat(str(day)[:10])


def week_bounds(today) -> tuple[date, date]:
    """Return (monday, sunday) of the ISO week containing ``today``."""

    current = _as_date(today)
    week_start = current - timedelta(days=current.weekday())
    return week_start, week_start + timedelta(days=6)


def query_bounds(today) -> tuple[str, str]:
    """Return inclusive start / exclusive end day strings for week-scoped queries."""

    week_start, week_end = week_bounds(today)
    return week_start.isoformat(), (week_end + timedelta(days=1)).isoformat()
