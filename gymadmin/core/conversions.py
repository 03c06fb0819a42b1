"""Conversion helpers for common type coercion."""

from datetime import date, datetime, time, timedelta
from typing import Optional


def coerce_int(value: object) -> Optional[int]:
    """Return an int for valid string/int inputs, otherwise None."""
    if value is None:
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except (TypeError, ValueError):
            return None
    return None


def parse_hhmm(value: str) -> Optional[time]:
    """Parse a 24-hour HH:MM string, returning None when malformed."""
    if not isinstance(value, str) or len(value) != 5 or value[2] != ":":
        return None
    try:
        return datetime.strptime(value, "%H:%M").time()
    except ValueError:
        return None


def add_minutes_hhmm(value: str, minutes: int) -> str:
    """Add minutes to an HH:MM string, wrapping past midnight."""
    start = datetime.combine(date.min, parse_hhmm(value))
    return (start + timedelta(minutes=minutes)).strftime("%H:%M")


def sunday_weekday(day: date) -> int:
    """Weekday number with Sunday=0 .. Saturday=6."""
    return (day.weekday() + 1) % 7
