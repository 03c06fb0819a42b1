"""Tests for recurrence expansion."""

from datetime import date, timedelta

import pytest

from gymadmin.core.conversions import sunday_weekday
from gymadmin.domain.entities import RecurrencePattern
from gymadmin.domain.errors import InvalidInput
from gymadmin.domain.recurrence import MAX_HORIZON_DAYS, expand


def test_recurring_monday_wednesday_two_weeks():
    pattern = RecurrencePattern(schedule_type="recurring", days_of_week={1, 3})

    occurrences = expand(pattern, date(2024, 1, 1), "14:00", horizon_days=14)

    assert [d for d, _ in occurrences] == [
        date(2024, 1, 1),
        date(2024, 1, 3),
        date(2024, 1, 8),
        date(2024, 1, 10),
        date(2024, 1, 15),
    ]
    assert all(t == "14:00" for _, t in occurrences)


def test_recurring_emits_every_matching_day_once_in_order():
    days = {0, 2, 6}
    anchor = date(2024, 2, 14)
    pattern = RecurrencePattern(schedule_type="recurring", days_of_week=days)

    dates = [d for d, _ in expand(pattern, anchor, "07:30", horizon_days=60)]

    expected = [
        anchor + timedelta(days=offset)
        for offset in range(61)
        if sunday_weekday(anchor + timedelta(days=offset)) in days
    ]
    assert dates == expected
    assert len(set(dates)) == len(dates)


def test_single_yields_anchor_only():
    pattern = RecurrencePattern(schedule_type="single", days_of_week={1, 2, 3})

    assert expand(pattern, date(2024, 5, 5), "18:00") == [(date(2024, 5, 5), "18:00")]


def test_zero_horizon_includes_anchor_day():
    pattern = RecurrencePattern(schedule_type="recurring", days_of_week={1})

    assert expand(pattern, date(2024, 1, 1), "09:00", horizon_days=0) == [(date(2024, 1, 1), "09:00")]


def test_recurrence_end_date_narrows_horizon():
    pattern = RecurrencePattern(
        schedule_type="recurring",
        days_of_week={1, 3},
        end_date=date(2024, 1, 8),
    )

    dates = [d for d, _ in expand(pattern, date(2024, 1, 1), "09:00", horizon_days=365)]

    assert dates == [date(2024, 1, 1), date(2024, 1, 3), date(2024, 1, 8)]


def test_max_occurrences_caps_output():
    pattern = RecurrencePattern(schedule_type="recurring", days_of_week={1, 3}, max_occurrences=3)

    assert len(expand(pattern, date(2024, 1, 1), "09:00")) == 3


@pytest.mark.parametrize(
    "pattern,time",
    [
        (RecurrencePattern(schedule_type="recurring", days_of_week=set()), "09:00"),
        (RecurrencePattern(schedule_type="recurring", days_of_week={7}), "09:00"),
        (RecurrencePattern(schedule_type="recurring", days_of_week={1}, max_occurrences=0), "09:00"),
        (RecurrencePattern(schedule_type="single"), "9am"),
        (RecurrencePattern(schedule_type="single"), "25:00"),
    ],
)
def test_malformed_patterns_are_rejected(pattern, time):
    with pytest.raises(InvalidInput):
        expand(pattern, date(2024, 1, 1), time)


def test_negative_horizon_is_rejected():
    pattern = RecurrencePattern(schedule_type="recurring", days_of_week={1})

    with pytest.raises(InvalidInput):
        expand(pattern, date(2024, 1, 1), "09:00", horizon_days=-1)


def test_unknown_schedule_type_is_a_value_error():
    with pytest.raises(ValueError):
        RecurrencePattern(schedule_type="monthly")


@pytest.mark.parametrize("horizon", [MAX_HORIZON_DAYS + 1, 10**7])
def test_horizon_above_cap_is_rejected(horizon):
    pattern = RecurrencePattern(schedule_type="recurring", days_of_week={1})

    with pytest.raises(InvalidInput):
        expand(pattern, date(2024, 1, 1), "09:00", horizon_days=horizon)


def test_horizon_at_cap_is_accepted():
    pattern = RecurrencePattern(schedule_type="recurring", days_of_week={1})

    occurrences = expand(pattern, date(2024, 1, 1), "09:00", horizon_days=MAX_HORIZON_DAYS)

    assert occurrences[-1][0] <= date(2024, 1, 1) + timedelta(days=MAX_HORIZON_DAYS)


def test_horizon_past_last_representable_date_is_invalid_input():
    pattern = RecurrencePattern(schedule_type="recurring", days_of_week={1})

    with pytest.raises(InvalidInput):
        expand(pattern, date(9999, 12, 1), "09:00", horizon_days=60)
