"""Tests for the class instance state machine."""

from datetime import datetime, timedelta, timezone

import pytest

from gymadmin.domain import class_lifecycle
from gymadmin.domain.entities import ClassStatus
from gymadmin.domain.errors import InvalidInput, InvalidTransition


def test_start_then_end_completes(make_instance):
    started_at = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)
    instance = make_instance()

    ongoing = class_lifecycle.start(instance, now=started_at)
    completed = class_lifecycle.end(ongoing, now=started_at + timedelta(minutes=55))

    assert ongoing.status == ClassStatus.ONGOING
    assert ongoing.started_at == started_at
    assert completed.status == ClassStatus.COMPLETED
    assert completed.actual_duration == 55
    # snapshots are never mutated
    assert instance.status == ClassStatus.SCHEDULED


def test_end_uses_explicit_duration(make_instance):
    ongoing = class_lifecycle.start(make_instance())

    assert class_lifecycle.end(ongoing, actual_duration=42).actual_duration == 42


def test_end_rejects_non_positive_duration(make_instance):
    ongoing = class_lifecycle.start(make_instance())

    with pytest.raises(InvalidInput):
        class_lifecycle.end(ongoing, actual_duration=0)


def test_end_without_start_marker_falls_back_to_scheduled_duration(make_instance):
    ongoing = make_instance(status=ClassStatus.ONGOING, duration_min=45)

    assert class_lifecycle.end(ongoing).actual_duration == 45


def test_cancel_scheduled_records_reason(make_instance):
    cancelled = class_lifecycle.cancel(make_instance(), reason="  Instructor sick ")

    assert cancelled.status == ClassStatus.CANCELLED
    assert cancelled.cancellation_reason == "Instructor sick"


def test_cancel_reason_is_optional(make_instance):
    assert class_lifecycle.cancel(make_instance()).cancellation_reason is None


def test_ongoing_cannot_be_cancelled(make_instance):
    ongoing = class_lifecycle.start(make_instance())

    with pytest.raises(InvalidTransition):
        class_lifecycle.cancel(ongoing)


@pytest.mark.parametrize("status", [ClassStatus.COMPLETED, ClassStatus.CANCELLED])
@pytest.mark.parametrize("operation", ["start", "end", "cancel"])
def test_terminal_states_reject_every_operation(make_instance, status, operation):
    instance = make_instance(status=status)

    with pytest.raises(InvalidTransition):
        getattr(class_lifecycle, operation)(instance)


def test_scheduled_cannot_end(make_instance):
    with pytest.raises(InvalidTransition):
        class_lifecycle.end(make_instance())


def test_predicates_follow_transition_table():
    assert class_lifecycle.available_actions(ClassStatus.SCHEDULED) == ["start", "cancel"]
    assert class_lifecycle.available_actions(ClassStatus.ONGOING) == ["end"]
    assert class_lifecycle.available_actions(ClassStatus.COMPLETED) == []
    assert class_lifecycle.can_register("scheduled")
    assert not class_lifecycle.can_register("ongoing")
    assert class_lifecycle.is_terminal("cancelled")
    assert not class_lifecycle.can_cancel(ClassStatus.ONGOING)
