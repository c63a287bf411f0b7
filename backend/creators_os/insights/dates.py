"""
Calendar-day helpers shared by detectors and the health score.

All rules compare calendar days in the configured timezone, so naive and
aware timestamps can be mixed in one snapshot without raising.
"""

from datetime import date, datetime, timedelta, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo


def get_timezone(name: str) -> tzinfo:
    return ZoneInfo(name)


def resolve_now(now: Optional[datetime], tz: tzinfo) -> datetime:
    """
    Return an aware "now" in the given timezone.

    A naive `now` is interpreted as local time in `tz`.
    """
    if now is None:
        return datetime.now(tz)
    if now.tzinfo is None:
        return now.replace(tzinfo=tz)
    return now.astimezone(tz)


def to_local_date(value, tz: tzinfo) -> Optional[date]:
    """
    Project a date or datetime onto a calendar day in `tz`.

    Naive datetimes are taken as already local. Anything else yields None.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.date()
        return value.astimezone(tz).date()
    if isinstance(value, date):
        return value
    return None


def start_of_week(day: date, week_start_day: int = 0) -> date:
    """First day of the week containing `day` (0 = Monday)."""
    offset = (day.weekday() - week_start_day) % 7
    return day - timedelta(days=offset)


def in_trailing_window(day: Optional[date], today: date, days: int) -> bool:
    """True when `day` is one of the `days` calendar days ending today."""
    if day is None or days <= 0:
        return False
    return today - timedelta(days=days) < day <= today
