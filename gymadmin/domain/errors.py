"""Typed failures raised by the scheduling and membership core."""


class GymAdminError(Exception):
    """Base class for expected business failures"""

    code = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInput(GymAdminError):
    code = "invalid_input"


class InvalidTransition(GymAdminError):
    code = "invalid_transition"

    def __init__(self, operation: str, status: str, message: str = None):
        super().__init__(message or f"Cannot {operation} from status '{status}'")
        self.operation = operation
        self.status = status


class CapacityConflict(GymAdminError):
    code = "capacity_conflict"


class AlreadyRegistered(CapacityConflict):
    def __init__(self, member_id: int):
        super().__init__(f"Member {member_id} is already registered or waitlisted")
        self.member_id = member_id


class NotRegistered(CapacityConflict):
    def __init__(self, member_id: int):
        super().__init__(f"Member {member_id} is not registered for this class")
        self.member_id = member_id


class DuplicateOccurrence(GymAdminError):
    code = "duplicate_occurrence"

    def __init__(self, schedule_id, occurrence_date):
        super().__init__(
            f"Schedule {schedule_id} already has more than one instance on {occurrence_date}"
        )
        self.schedule_id = schedule_id
        self.occurrence_date = occurrence_date
