"""
GraphQL mutations for Class Instances
"""
import logging
from typing import Optional
import strawberry
from strawberry.types import Info

from gymadmin.crud.classInstanceCrud import (
    start_class_instance,
    end_class_instance,
    cancel_class_instance,
    register_participant,
    unregister_participant
)
from gymadmin.domain.outcome import Outcome
from .types import (
    ClassInstance,
    ClassInstanceResponse,
    EndClassInstanceInput,
    CancelClassInstanceInput,
    RegistrationInput
)

logger = logging.getLogger(__name__)


def _to_response(outcome: Optional[Outcome], success_message: str) -> ClassInstanceResponse:
    if outcome is None:
        return ClassInstanceResponse(
            success=False,
            instance=None,
            message="Class instance not found",
            error_code="not_found"
        )
    if not outcome.ok:
        return ClassInstanceResponse(
            success=False,
            instance=None,
            message=outcome.message,
            error_code=outcome.error_code
        )
    return ClassInstanceResponse(
        success=True,
        instance=ClassInstance.from_model(outcome.value),
        message=success_message
    )


def _error_response(action: str, error: Exception) -> ClassInstanceResponse:
    logger.error("Error %s class instance: %s", action, error)
    return ClassInstanceResponse(
        success=False,
        instance=None,
        message=f"Error {action} class instance: {str(error)}"
    )


@strawberry.type
class ClassInstanceMutations:
    """Class Instance mutations"""

    @strawberry.mutation
    async def start_class_instance(self, info: Info, instance_id: int) -> ClassInstanceResponse:
        """Move a scheduled class to ongoing"""
        db = info.context.db

        try:
            outcome = await start_class_instance(db, instance_id)
            return _to_response(outcome, "Class started successfully")
        except Exception as e:
            return _error_response("starting", e)

    @strawberry.mutation
    async def end_class_instance(self, info: Info, input: EndClassInstanceInput) -> ClassInstanceResponse:
        """Complete an ongoing class, recording its actual duration"""
        db = info.context.db

        try:
            outcome = await end_class_instance(db, input.instance_id, actual_duration=input.actual_duration)
            return _to_response(outcome, "Class ended successfully")
        except Exception as e:
            return _error_response("ending", e)

    @strawberry.mutation
    async def cancel_class_instance(self, info: Info, input: CancelClassInstanceInput) -> ClassInstanceResponse:
        """Cancel a class that has not started yet"""
        db = info.context.db

        try:
            outcome = await cancel_class_instance(db, input.instance_id, reason=input.reason)
            return _to_response(outcome, "Class cancelled successfully")
        except Exception as e:
            return _error_response("cancelling", e)

    @strawberry.mutation
    async def register_participant(self, info: Info, input: RegistrationInput) -> ClassInstanceResponse:
        """Register a member; full classes put the member on the waitlist"""
        db = info.context.db

        try:
            outcome = await register_participant(db, input.instance_id, input.member_id)
            if outcome is not None and outcome.ok and input.member_id in (outcome.value.waitlist or []):
                return _to_response(outcome, "Class is full, member added to the waitlist")
            return _to_response(outcome, "Member registered successfully")
        except Exception as e:
            return _error_response("registering on", e)

    @strawberry.mutation
    async def unregister_participant(self, info: Info, input: RegistrationInput) -> ClassInstanceResponse:
        """Remove a member from the participants or the waitlist"""
        db = info.context.db

        try:
            outcome = await unregister_participant(db, input.instance_id, input.member_id)
            return _to_response(outcome, "Member unregistered successfully")
        except Exception as e:
            return _error_response("unregistering from", e)
