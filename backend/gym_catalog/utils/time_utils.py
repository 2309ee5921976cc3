"""
Date utility functions for route statistics.
"""
from datetime import date, timedelta
from typing import Iterator


def days_between(earlier: date, later: date) -> int:
    """
    Whole days from `earlier` to `later`.

    Signed: negative when `earlier` is after `later`.

    Example:
        >>> days_between(date(2024, 1, 1), date(2024, 1, 10))
        9
    """
    return (later - earlier).days


def date_range(start: date, end: date) -> Iterator[date]:
    """
    Iterate every calendar day from start to end, both inclusive.

    Yields nothing when start is after end.

    Example:
        >>> [d.day for d in date_range(date(2024, 1, 1), date(2024, 1, 3))]
        [1, 2, 3]
    """
    for offset in range((end - start).days + 1):
        yield start + timedelta(days=offset)


def iso_day(value: date) -> str:
    """Calendar-day key of a date (YYYY-MM-DD)."""
    return value.strftime("%Y-%m-%d")
