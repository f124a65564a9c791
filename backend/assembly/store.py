"""Journey persistence.

The unique constraints on ``control_number`` and ``(member, check_in_date)``
are what make concurrent check-ins safe; this module turns their violations
into the same conflict errors the engine's pre-checks raise.
"""

from datetime import date

from django.db import IntegrityError, transaction
from django.utils import timezone

from .exceptions import AlreadyCheckedIn, AlreadyComplete, DuplicateControlNumber
from .models import Journey, JourneyStatus

CHECKOUT_FIELDS = (
    "check_out_time",
    "check_out_terminal",
    "claimed",
    "lost_stub",
    "incorrect_stub",
    "different_stub_number",
    "different_stub_value",
    "manual_form_signed",
    "override_reason",
    "staff_id",
)


class JourneyStore:
    def __init__(self, queryset=None):
        self._queryset = queryset

    @property
    def journeys(self):
        if self._queryset is not None:
            return self._queryset.all()
        return Journey.objects.select_related("member")

    def find_open_journey(self, member_id, day: date) -> Journey | None:
        """Return the member's journey checked in on ``day``, whatever its status."""
        return self.journeys.filter(member_id=member_id, check_in_date=day).first()

    def find_by_control_number(self, control_number: str) -> Journey | None:
        return self.journeys.filter(control_number=control_number).first()

    def create(self, **fields) -> Journey:
        """Insert a journey.

        Raises:
            DuplicateControlNumber: another journey holds the control number
            AlreadyCheckedIn / AlreadyComplete: the member already has a
                journey on the same operating day
        """
        try:
            with transaction.atomic():
                return Journey.objects.create(**fields)
        except IntegrityError:
            # same precedence as the engine: member-day before control number
            existing = self.find_open_journey(fields["member"].pk, fields["check_in_date"])
            if existing is not None:
                if existing.status == JourneyStatus.COMPLETE:
                    raise AlreadyComplete(existing) from None
                raise AlreadyCheckedIn(existing) from None
            if Journey.objects.filter(control_number=fields["control_number"]).exists():
                raise DuplicateControlNumber(fields["control_number"]) from None
            raise

    def complete(self, journey_id, patch: dict) -> bool:
        """Apply the check-out patch only if the journey is still open.

        Single conditional UPDATE, so readers never see a half-written
        check-out and two racing check-outs cannot both succeed.
        """
        unknown = set(patch) - set(CHECKOUT_FIELDS)
        if unknown:
            raise ValueError(f"Not check-out fields: {sorted(unknown)}")
        updated = Journey.objects.filter(
            pk=journey_id,
            status=JourneyStatus.CHECKED_IN,
        ).update(status=JourneyStatus.COMPLETE, updated_at=timezone.now(), **patch)
        return updated == 1

    def update(self, journey_id, patch: dict) -> int:
        return Journey.objects.filter(pk=journey_id).update(**patch)

    def delete_by_control_number(self, control_number: str) -> Journey | None:
        journey = self.find_by_control_number(control_number)
        if journey is not None:
            journey.delete()
        return journey

    def delete_by_member(self, member_id, day: date | None = None) -> list[Journey]:
        journeys = self.journeys.filter(member_id=member_id)
        if day is not None:
            journeys = journeys.filter(check_in_date=day)
        deleted = list(journeys)
        Journey.objects.filter(pk__in=[journey.pk for journey in deleted]).delete()
        return deleted

    def delete_all(self) -> int:
        deleted, _ = Journey.objects.all().delete()
        return deleted

    def filter(self, status=None, day: date | None = None, member_id=None, terminal=None):
        journeys = self.journeys
        if status:
            journeys = journeys.filter(status=status)
        if day is not None:
            journeys = journeys.filter(check_in_date=day)
        if member_id is not None:
            journeys = journeys.filter(member_id=member_id)
        if terminal:
            journeys = journeys.filter(check_in_terminal=terminal)
        return journeys.order_by("-check_in_time")
