"""Calendar arithmetic and display formatting for training history.

All arithmetic is done on ``datetime.date`` values, never on timestamps, so
week boundaries cannot drift across daylight-saving changes.
"""

import math
import re
from datetime import date, datetime, timedelta
from typing import Optional, Union

DateLike = Union[date, datetime, str]

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def to_date(value: DateLike) -> date:
    """Normalise a date, datetime or ``YYYY-MM-DD`` string to a ``date``.

    Raises:
        ValueError: if a string is not a valid ISO calendar date
        TypeError: for any other type
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        if not ISO_DATE_PATTERN.match(value):
            raise ValueError(f"Expected a YYYY-MM-DD date, got {value!r}")
        return datetime.strptime(value, "%Y-%m-%d").date()
    raise TypeError(f"Cannot interpret {type(value).__name__} as a date")


def is_valid_iso_date(value) -> bool:
    """True for ``YYYY-MM-DD`` strings naming a real calendar day."""
    if not isinstance(value, str) or not ISO_DATE_PATTERN.match(value):
        return False
    try:
        datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        return False
    return True


def is_in_range(value, minimum: float, maximum: float) -> bool:
    """True when value is a finite number within [minimum, maximum]."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and minimum <= value <= maximum


def today() -> date:
    """Current local calendar date."""
    return date.today()


def week_start(value: DateLike) -> date:
    """Monday that begins the ISO week containing ``value``.

    Sunday belongs to the week that started six days earlier.
    """
    day = to_date(value)
    return day - timedelta(days=day.weekday())


def days_between(start: DateLike, end: DateLike) -> int:
    """Whole calendar days from ``start`` to ``end`` (negative if end is earlier)."""
    return (to_date(end) - to_date(start)).days


def format_date(value: Optional[DateLike]) -> str:
    """Short display form, e.g. ``Jan 5, 2025``."""
    if value is None:
        return ""
    day = to_date(value)
    return f"{day.strftime('%b')} {day.day}, {day.year}"


def format_date_range(start: DateLike, end: Optional[DateLike] = None) -> str:
    if end is not None:
        return f"{format_date(start)} - {format_date(end)}"
    return f"{format_date(start)} - Ongoing"


def format_duration(seconds: Optional[int]) -> str:
    """Format seconds as ``m:ss`` or ``h:mm:ss``."""
    if seconds is None or seconds < 0:
        return ""
    seconds = int(seconds)
    hours, remainder = divmod(seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def format_minutes(minutes: int) -> str:
    """Format a minute count as ``45min``, ``2h`` or ``1h 30min``."""
    minutes = int(minutes)
    if minutes < 60:
        return f"{minutes}min"
    hours, remaining = divmod(minutes, 60)
    if remaining == 0:
        return f"{hours}h"
    return f"{hours}h {remaining}min"
