from __future__ import annotations

from datetime import date, datetime, timezone


def format_date(value: date) -> str:
    return value.strftime("%Y-%m-%d")


def month_key(value: str) -> str:
    """Calendar month (YYYY-MM) of a YYYY-MM-DD date key."""
    return value[:7]


def month_bounds(year: int, month: int) -> tuple[date, date]:
    start = date(year, month, 1)
    if month == 12:
        next_month = date(year + 1, 1, 1)
    else:
        next_month = date(year, month + 1, 1)
    return start, date.fromordinal(next_month.toordinal() - 1)


def now_utc() -> datetime:
    """Current UTC time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(timezone.utc)


def timestamp() -> str:
    """ISO-8601 timestamp stored on documents."""
    return now_utc().isoformat()
