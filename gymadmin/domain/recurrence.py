"""
Recurrence expansion
Turns a recurrence pattern plus an anchor date/time into concrete occurrences
"""
from datetime import date, timedelta
from typing import List, Tuple

from gymadmin.core.conversions import parse_hhmm, sunday_weekday
from gymadmin.domain.entities import RecurrencePattern, ScheduleType
from gymadmin.domain.errors import InvalidInput

DEFAULT_HORIZON_DAYS = 365
MAX_HORIZON_DAYS = 3650

Occurrence = Tuple[date, str]


def validate_pattern(pattern: RecurrencePattern) -> None:
    """Raise InvalidInput for patterns that cannot be expanded"""
    if pattern.schedule_type == ScheduleType.RECURRING:
        if not pattern.days_of_week:
            raise InvalidInput("Days of week are required for recurring schedules")
        invalid = [d for d in pattern.days_of_week if not isinstance(d, int) or not 0 <= d <= 6]
        if invalid:
            raise InvalidInput(f"Days of week must be between 0 and 6, got {sorted(invalid)}")
    if pattern.max_occurrences is not None and pattern.max_occurrences < 1:
        raise InvalidInput("max_occurrences must be at least 1")


def expand(
    pattern: RecurrencePattern,
    anchor_date: date,
    anchor_time: str,
    horizon_days: int = DEFAULT_HORIZON_DAYS
) -> List[Occurrence]:
    """
    Expand a pattern into (date, time) occurrences in ascending date order.

    Args:
        pattern: Single or recurring pattern
        anchor_date: First date that may be emitted
        anchor_time: HH:MM time shared by every occurrence
        horizon_days: Days after anchor_date to walk (inclusive)

    Returns:
        Ordered list of (date, "HH:MM") pairs
    """
    validate_pattern(pattern)
    if parse_hhmm(anchor_time) is None:
        raise InvalidInput(f"Invalid time '{anchor_time}', use HH:MM")
    if not 0 <= horizon_days <= MAX_HORIZON_DAYS:
        raise InvalidInput(f"horizon_days must be between 0 and {MAX_HORIZON_DAYS}")

    if pattern.schedule_type == ScheduleType.SINGLE:
        return [(anchor_date, anchor_time)]

    try:
        last_date = anchor_date + timedelta(days=horizon_days)
    except OverflowError:
        raise InvalidInput("Horizon runs past the last representable date") from None
    if pattern.end_date is not None and pattern.end_date < last_date:
        last_date = pattern.end_date

    occurrences = []
    for offset in range((last_date - anchor_date).days + 1):
        current_date = anchor_date + timedelta(days=offset)
        if pattern.max_occurrences is not None and len(occurrences) >= pattern.max_occurrences:
            break
        if sunday_weekday(current_date) in pattern.days_of_week:
            occurrences.append((current_date, anchor_time))

    return occurrences
