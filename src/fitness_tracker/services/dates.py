"""Calendar boundary helpers shared by the analytics services."""

from datetime import UTC, date, datetime, timedelta
from zoneinfo import ZoneInfo


def utc_now() -> datetime:
    """Return the current time in UTC."""
    return datetime.now(tz=UTC)


def local_today(now: datetime, timezone_name: str = "UTC") -> date:
    """Return the calendar date of ``now`` in the given timezone."""
    return now.astimezone(ZoneInfo(timezone_name)).date()


def start_of_week(today: date) -> date:
    """Return the Monday on or before ``today``."""
    return today - timedelta(days=today.weekday())


def start_of_month(today: date) -> date:
    """Return the first day of the month containing ``today``."""
    return today.replace(day=1)


def utc_day(value: datetime) -> date:
    """Return the UTC calendar date of a timestamp.

    Naive timestamps are treated as already being in UTC.
    """
    if value.tzinfo is None:
        return value.date()
    return value.astimezone(UTC).date()


def day_start(day: date) -> datetime:
    """Return UTC midnight for a calendar date."""
    return datetime(day.year, day.month, day.day, tzinfo=UTC)
