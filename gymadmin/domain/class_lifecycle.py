"""
Class instance state machine

    scheduled -> ongoing -> completed
    scheduled -> cancelled

completed and cancelled are terminal.
"""
from dataclasses import replace
from datetime import datetime, timezone
from typing import Dict, FrozenSet, List, Optional

from gymadmin.domain.entities import ClassInstance, ClassStatus
from gymadmin.domain.errors import InvalidInput, InvalidTransition

TRANSITIONS: Dict[str, Dict[ClassStatus, ClassStatus]] = {
    "start": {ClassStatus.SCHEDULED: ClassStatus.ONGOING},
    "end": {ClassStatus.ONGOING: ClassStatus.COMPLETED},
    "cancel": {ClassStatus.SCHEDULED: ClassStatus.CANCELLED},
}

TERMINAL_STATES: FrozenSet[ClassStatus] = frozenset({ClassStatus.COMPLETED, ClassStatus.CANCELLED})


def next_status(status: ClassStatus, operation: str) -> ClassStatus:
    """Single transition function; raises InvalidTransition for undefined edges"""
    status = ClassStatus(status)
    try:
        return TRANSITIONS[operation][status]
    except KeyError:
        raise InvalidTransition(operation, status.value) from None


def can_start(status: ClassStatus) -> bool:
    return ClassStatus(status) in TRANSITIONS["start"]


def can_end(status: ClassStatus) -> bool:
    return ClassStatus(status) in TRANSITIONS["end"]


def can_cancel(status: ClassStatus) -> bool:
    return ClassStatus(status) in TRANSITIONS["cancel"]


def can_register(status: ClassStatus) -> bool:
    return ClassStatus(status) == ClassStatus.SCHEDULED


def is_terminal(status: ClassStatus) -> bool:
    return ClassStatus(status) in TERMINAL_STATES


def available_actions(status: ClassStatus) -> List[str]:
    """Operations the UI/API may offer for an instance in this status"""
    status = ClassStatus(status)
    return [operation for operation, edges in TRANSITIONS.items() if status in edges]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def start(instance: ClassInstance, now: Optional[datetime] = None) -> ClassInstance:
    """Move a scheduled instance to ongoing and record the start marker"""
    status = next_status(instance.status, "start")
    return replace(instance, status=status, started_at=now or _utcnow())


def end(
    instance: ClassInstance,
    now: Optional[datetime] = None,
    actual_duration: Optional[int] = None
) -> ClassInstance:
    """
    Complete an ongoing instance.

    actual_duration (minutes) is taken from the caller when positive,
    otherwise measured from the start marker, otherwise the scheduled duration.
    """
    status = next_status(instance.status, "end")

    if actual_duration is not None:
        if actual_duration <= 0:
            raise InvalidInput("actual_duration must be a positive number of minutes")
        minutes = actual_duration
    elif instance.started_at is not None:
        elapsed = (now or _utcnow()) - instance.started_at
        minutes = max(0, int(elapsed.total_seconds() // 60))
    else:
        minutes = instance.duration_min

    return replace(instance, status=status, actual_duration=minutes)


def cancel(instance: ClassInstance, reason: Optional[str] = None) -> ClassInstance:
    """Cancel a scheduled instance; ongoing and terminal instances cannot be cancelled"""
    status = next_status(instance.status, "cancel")
    reason = reason.strip() if reason else None
    return replace(instance, status=status, cancellation_reason=reason or None)
