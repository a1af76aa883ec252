"""
Time utilities for predictarb.

Handles timezone conversions and standardized timestamp formats.
All internal timestamps use UTC; calendar dates (the breakeven
"worth purchasing by" date) use the configured timezone.
"""

from datetime import date, datetime, timedelta, timezone
from typing import Optional

import pytz

from predictarb.core.config import get_settings


def get_timezone() -> pytz.BaseTzInfo:
    """Get configured timezone."""
    settings = get_settings()
    return pytz.timezone(settings.timezone)


def now_utc() -> datetime:
    """Get current UTC time."""
    return datetime.now(timezone.utc)


def now_local() -> datetime:
    """Get current time in configured timezone."""
    return datetime.now(get_timezone())


def today_local() -> date:
    """Get today's calendar date in the configured timezone."""
    return now_local().date()


def add_days(start: date, days: int) -> date:
    """Shift a calendar date by a (possibly negative) number of days."""
    return start + timedelta(days=days)


def format_timestamp(dt: Optional[datetime] = None, fmt: str = "iso") -> str:
    """
    Format datetime to string.

    Args:
        dt: Datetime to format. Uses current UTC time if not provided.
        fmt: Format type - 'iso', 'display', 'date', 'time'

    Returns:
        Formatted string
    """
    if dt is None:
        dt = now_utc()

    formats = {
        "iso": "%Y-%m-%dT%H:%M:%SZ",
        "display": "%Y-%m-%d %H:%M:%S",
        "date": "%Y-%m-%d",
        "time": "%H:%M:%S",
    }

    return dt.strftime(formats.get(fmt, fmt))


def generate_run_id(prefix: str = "cycle") -> str:
    """Generate a cycle ID based on timestamp."""
    return f"{prefix}_{format_timestamp(now_utc(), '%Y%m%d_%H%M%S')}"
