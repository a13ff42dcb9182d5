"""
Datetime utility functions.
All domain time checks go through utcnow()/utctoday() so "now" is UTC everywhere.
"""

from datetime import date, datetime
from typing import Optional, Union
import pytz


def utcnow() -> datetime:
    """
    Get current UTC datetime using pytz.UTC.

    Returns:
        Current UTC datetime with pytz timezone information
    """
    return datetime.now(pytz.UTC)


def utctoday() -> date:
    """Get the current UTC calendar date."""
    return utcnow().date()


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    Normalize a datetime to an aware UTC datetime.

    Naive datetimes are treated as already being in UTC (SQLite hands them back
    without tzinfo). Aware datetimes are converted to UTC.

    Args:
        value: Datetime to normalize, or None

    Returns:
        Aware UTC datetime, or None when value is None
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return pytz.UTC.localize(value)
    return value.astimezone(pytz.UTC)


def add_years(value: Union[date, datetime], years: int) -> Union[date, datetime]:
    """
    Shift a date or datetime by a whole number of calendar years.

    February 29th falls back to February 28th when the target year is not a
    leap year.

    Examples:
        >>> add_years(date(2024, 2, 29), 1)
        datetime.date(2025, 2, 28)
        >>> add_years(date(2020, 6, 15), -100)
        datetime.date(1920, 6, 15)
    """
    try:
        return value.replace(year=value.year + years)
    except ValueError:
        return value.replace(year=value.year + years, day=28)
