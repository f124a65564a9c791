"""Errors raised by the journey engine and its collaborators.

Every error carries a stable ``code`` and a ``context`` dict so the calling
layer can render an actionable message without re-querying the store.
"""


class AssemblyError(Exception):
    """Base exception for assembly errors."""

    code = "ERROR"

    def __init__(self, message: str, **context):
        self.message = message
        self.context = context
        super().__init__(message)


class NotFound(AssemblyError):
    code = "NOT_FOUND"


class MemberNotFound(NotFound):
    code = "MEMBER_NOT_FOUND"

    def __init__(self, member_id):
        self.member_id = member_id
        super().__init__(f"Member '{member_id}' not found", member_id=member_id)


class JourneyNotFound(NotFound):
    code = "JOURNEY_NOT_FOUND"

    def __init__(self, control_number=None, member_id=None):
        self.control_number = control_number
        self.member_id = member_id
        if control_number is not None:
            message = f"No journey found for control number '{control_number}'"
        else:
            message = f"No journey found for member '{member_id}' today"
        super().__init__(message, control_number=control_number, member_id=member_id)


class Conflict(AssemblyError):
    code = "CONFLICT"


class AlreadyCheckedIn(Conflict):
    """Raised when the member already has an open journey today."""

    code = "ALREADY_CHECKED_IN"

    def __init__(self, journey):
        self.journey = journey
        super().__init__("Member is already checked in", journey=journey)


class AlreadyComplete(Conflict):
    """Raised when the journey has already gone through check-out."""

    code = "COMPLETE"

    def __init__(self, journey):
        self.journey = journey
        super().__init__("Member has already completed the full cycle", journey=journey)


class ControlNumberExists(Conflict):
    code = "CONTROL_NUMBER_EXISTS"

    def __init__(self, control_number):
        self.control_number = control_number
        super().__init__(
            f"Control number '{control_number}' already exists",
            control_number=control_number,
        )


class DuplicateControlNumber(ControlNumberExists):
    """Raised by the store when the unique constraint rejects an insert."""


class MemberExists(Conflict):
    code = "MEMBER_EXISTS"

    def __init__(self, cooperative_id):
        self.cooperative_id = cooperative_id
        super().__init__(
            f"Cooperative ID '{cooperative_id}' already exists",
            cooperative_id=cooperative_id,
        )


class MemberHasJourneys(Conflict):
    code = "MEMBER_HAS_JOURNEYS"

    def __init__(self, member_id, journey_count: int):
        self.member_id = member_id
        self.journey_count = journey_count
        super().__init__(
            "Cannot delete member with attendance records",
            member_id=member_id,
            journey_count=journey_count,
        )


class PreconditionFailed(AssemblyError):
    code = "PRECONDITION_FAILED"


class NotEligible(PreconditionFailed):
    code = "NOT_ELIGIBLE"

    def __init__(self, member):
        self.member = member
        self.eligibility = member.eligibility
        super().__init__(
            "Member is not eligible for check-in",
            member=member,
            eligibility=member.eligibility,
        )


class CheckoutDisabled(PreconditionFailed):
    code = "CHECKOUT_DISABLED"

    def __init__(self):
        super().__init__("Checkout is currently disabled by system settings")


class InvalidRequest(AssemblyError):
    code = "INVALID_REQUEST"


class InvalidOutcome(InvalidRequest):
    code = "INVALID_OUTCOME"
