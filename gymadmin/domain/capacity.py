"""Participant and waitlist bookkeeping for a single class instance."""
from dataclasses import replace

from gymadmin.domain.class_lifecycle import can_register
from gymadmin.domain.entities import ClassInstance
from gymadmin.domain.errors import AlreadyRegistered, InvalidTransition, NotRegistered


def register(instance: ClassInstance, member_id: int) -> ClassInstance:
    """Add a member to participants, or to the waitlist when the class is full"""
    if not can_register(instance.status):
        raise InvalidTransition("register", instance.status.value)
    if member_id in instance.registered_participants or member_id in instance.waitlist:
        raise AlreadyRegistered(member_id)

    if len(instance.registered_participants) < instance.capacity:
        return replace(
            instance,
            registered_participants=instance.registered_participants + (member_id,)
        )
    return replace(instance, waitlist=instance.waitlist + (member_id,))


def unregister(instance: ClassInstance, member_id: int) -> ClassInstance:
    """
    Remove a member from whichever list holds them.
    A freed participant slot goes to the head of the waitlist (FIFO).
    """
    if member_id in instance.waitlist:
        return replace(
            instance,
            waitlist=tuple(m for m in instance.waitlist if m != member_id)
        )

    if member_id not in instance.registered_participants:
        raise NotRegistered(member_id)

    participants = tuple(m for m in instance.registered_participants if m != member_id)
    waitlist = instance.waitlist
    if waitlist and len(participants) < instance.capacity:
        participants = participants + (waitlist[0],)
        waitlist = waitlist[1:]

    return replace(instance, registered_participants=participants, waitlist=waitlist)


def waitlist_position(instance: ClassInstance, member_id: int) -> int:
    """1-based waitlist position, 0 when the member is not waitlisted"""
    try:
        return instance.waitlist.index(member_id) + 1
    except ValueError:
        return 0
