"""Member journey engine.

Provides:
- check_in: open a member's journey for the day and issue stubs
- check_out: close a journey with a normal or anomalous claim outcome
- get_journey_by_member / get_journey_by_control_number / list_journeys
- get_stats: per-day journey counts
- reset_journey / reset_all_journeys: administrative overrides

Every precondition is checked before anything is written, and each
operation runs in one transaction together with its audit entry.
"""

import logging
from datetime import date

from django.db import transaction

from . import statistics
from .audit import AuditSink
from .clock import Clock, operating_date
from .exceptions import (
    AlreadyCheckedIn,
    AlreadyComplete,
    CheckoutDisabled,
    ControlNumberExists,
    InvalidRequest,
    JourneyNotFound,
    NotEligible,
)
from .flags import SettingsProvider
from .models import AuditAction, Journey, JourneyStatus
from .outcomes import CheckoutOutcome, Normal, resolve_outcome
from .registry import MemberRegistry
from .store import JourneyStore

logger = logging.getLogger(__name__)

JOURNEY_TABLE = "member_journey"


def journey_snapshot(journey: Journey) -> dict:
    return {
        "journey_id": str(journey.journey_id),
        "member_id": journey.member_id,
        "control_number": journey.control_number,
        "status": journey.status,
        "check_in_time": journey.check_in_time,
        "check_in_terminal": journey.check_in_terminal,
        "meal_stub_issued": journey.meal_stub_issued,
        "transportation_stub_issued": journey.transportation_stub_issued,
        "check_out_time": journey.check_out_time,
        "check_out_terminal": journey.check_out_terminal,
        "claimed": journey.claimed,
        "lost_stub": journey.lost_stub,
        "incorrect_stub": journey.incorrect_stub,
        "different_stub_number": journey.different_stub_number,
        "different_stub_value": journey.different_stub_value,
        "manual_form_signed": journey.manual_form_signed,
        "override_reason": journey.override_reason,
        "staff_id": journey.staff_id,
    }


class JourneyEngine:
    """Check-in/check-out state machine over the journey store.

    Collaborators are injected so tests can swap the settings provider or
    freeze the clock; the defaults read the database.
    """

    def __init__(
        self,
        registry: MemberRegistry | None = None,
        store: JourneyStore | None = None,
        settings: SettingsProvider | None = None,
        audit: AuditSink | None = None,
        clock: Clock | None = None,
    ):
        self.registry = registry or MemberRegistry()
        self.store = store or JourneyStore()
        self.settings = settings or SettingsProvider()
        self.audit = audit or AuditSink()
        self.clock = clock or Clock()

    def today(self) -> date:
        return self.clock.today()

    @transaction.atomic
    def check_in(
        self,
        member_id,
        control_number: str,
        terminal_id: str,
        meal_stub: bool = False,
        transportation_stub: bool = False,
        staff_id=None,
    ) -> Journey:
        """
        Open today's journey for a member.

        Raises:
            InvalidRequest: control number is blank
            MemberNotFound: no such member
            NotEligible: member eligibility is not "eligible"
            AlreadyCheckedIn / AlreadyComplete: member has a journey today
            ControlNumberExists: control number used by any journey, any day
        """
        control_number = (control_number or "").strip()
        if not control_number:
            raise InvalidRequest("control_number is required")

        member = self.registry.get_member(member_id)
        if not member.is_eligible:
            logger.warning("Check-in refused for member %s: %s", member.pk, member.eligibility)
            raise NotEligible(member)

        now = self.clock.now()
        day = operating_date(now, self.clock.tz)
        existing = self.store.find_open_journey(member.pk, day)
        if existing is not None:
            logger.warning("Check-in refused for member %s: journey %s is %s",
                           member.pk, existing.control_number, existing.status)
            if existing.status == JourneyStatus.COMPLETE:
                raise AlreadyComplete(existing)
            raise AlreadyCheckedIn(existing)

        if self.store.find_by_control_number(control_number) is not None:
            logger.warning("Check-in refused for member %s: control number %s in use",
                           member.pk, control_number)
            raise ControlNumberExists(control_number)

        journey = self.store.create(
            member=member,
            control_number=control_number,
            check_in_time=now,
            check_in_date=day,
            check_in_terminal=terminal_id or "UNKNOWN",
            meal_stub_issued=bool(meal_stub),
            transportation_stub_issued=bool(transportation_stub),
            status=JourneyStatus.CHECKED_IN,
        )
        self.audit.append(
            action=AuditAction.CHECKIN,
            table_name=JOURNEY_TABLE,
            record_id=journey.journey_id,
            new_values={
                "control_number": control_number,
                "member_id": member.pk,
                "meal_stub_issued": journey.meal_stub_issued,
                "transportation_stub_issued": journey.transportation_stub_issued,
            },
            staff_id=staff_id,
            terminal_id=journey.check_in_terminal,
        )
        logger.info("Member %s checked in with control number %s at %s",
                    member.pk, control_number, journey.check_in_terminal)
        return journey

    @transaction.atomic
    def check_out(
        self,
        control_number: str,
        terminal_id: str,
        staff_id,
        outcome: CheckoutOutcome | None = None,
    ) -> Journey:
        """
        Close a journey. A control number can be checked out once.

        Raises:
            CheckoutDisabled: the checkout_enabled setting is off
            JourneyNotFound: no journey holds the control number
            AlreadyComplete: the journey was already checked out
        """
        if not self.settings.checkout_enabled():
            logger.warning("Check-out refused for %s: checkout disabled", control_number)
            raise CheckoutDisabled()

        control_number = (control_number or "").strip()
        journey = self.store.find_by_control_number(control_number)
        if journey is None:
            raise JourneyNotFound(control_number=control_number)
        if journey.status != JourneyStatus.CHECKED_IN:
            logger.warning("Check-out refused for %s: already complete", control_number)
            raise AlreadyComplete(journey)

        patch = resolve_outcome(outcome or Normal())
        patch.update(
            check_out_time=self.clock.now(),
            check_out_terminal=terminal_id or "UNKNOWN",
            staff_id=str(staff_id) if staff_id is not None else None,
        )
        if not self.store.complete(journey.journey_id, patch):
            # lost the race to another terminal between the read and the update
            journey.refresh_from_db()
            logger.warning("Check-out refused for %s: completed concurrently", control_number)
            raise AlreadyComplete(journey)

        journey.refresh_from_db()
        self.audit.append(
            action=AuditAction.CHECKOUT,
            table_name=JOURNEY_TABLE,
            record_id=journey.journey_id,
            old_values={"status": JourneyStatus.CHECKED_IN},
            new_values={
                "control_number": control_number,
                "status": journey.status,
                "claimed": journey.claimed,
                "lost_stub": journey.lost_stub,
                "incorrect_stub": journey.incorrect_stub,
                "different_stub_number": journey.different_stub_number,
                "different_stub_value": journey.different_stub_value,
                "manual_form_signed": journey.manual_form_signed,
                "override_reason": journey.override_reason,
            },
            staff_id=staff_id,
            terminal_id=journey.check_out_terminal,
        )
        logger.info("Control number %s checked out at %s (%s)",
                    control_number, journey.check_out_terminal, journey.claim_status)
        return journey

    def get_journey_by_member(self, member_id, day: date | None = None) -> Journey:
        """Return the member's journey for ``day`` (default today), any status."""
        journey = self.store.find_open_journey(member_id, day or self.today())
        if journey is None:
            raise JourneyNotFound(member_id=member_id)
        return journey

    def get_journey_by_control_number(self, control_number: str) -> Journey:
        journey = self.store.find_by_control_number((control_number or "").strip())
        if journey is None:
            raise JourneyNotFound(control_number=control_number)
        return journey

    def list_journeys(
        self,
        status: str | None = None,
        day: date | None = None,
        member_id=None,
        terminal: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ):
        """Journeys checked in on ``day`` (default today), newest first."""
        if status and status not in JourneyStatus.values:
            raise InvalidRequest(f"Unknown journey status '{status}'")
        journeys = self.store.filter(
            status=status,
            day=day or self.today(),
            member_id=member_id,
            terminal=terminal,
        )
        return journeys[offset:offset + limit]

    def get_stats(self, day: date | None = None) -> dict:
        return statistics.journey_stats(day or self.today())

    @transaction.atomic
    def reset_journey(
        self,
        control_number: str | None = None,
        member_id=None,
        staff_id=None,
        terminal_id: str | None = None,
    ) -> list[Journey]:
        """
        Delete a journey so the member can check in again.

        Addressed either by control number or by member (today's journey).
        This is the only way a journey leaves the ``complete`` state.
        """
        if (control_number is None) == (member_id is None):
            raise InvalidRequest("Provide exactly one of control_number or member_id")

        if control_number is not None:
            journey = self.get_journey_by_control_number(control_number)
            snapshots = [journey_snapshot(journey)]
            self.store.delete_by_control_number(journey.control_number)
            removed = [journey]
        else:
            removed = self.store.delete_by_member(member_id, day=self.today())
            if not removed:
                raise JourneyNotFound(member_id=member_id)
            snapshots = [journey_snapshot(journey) for journey in removed]

        for snapshot in snapshots:
            self.audit.append(
                action=AuditAction.RESET_JOURNEY,
                table_name=JOURNEY_TABLE,
                record_id=snapshot["journey_id"],
                old_values=snapshot,
                staff_id=staff_id,
                terminal_id=terminal_id,
            )
            logger.info("Journey %s (control number %s) reset by staff %s",
                        snapshot["journey_id"], snapshot["control_number"], staff_id)
        return removed

    @transaction.atomic
    def reset_all_journeys(self, staff_id=None, terminal_id: str | None = None, confirm: bool = False) -> int:
        if not confirm:
            raise InvalidRequest("Confirmation required to reset journey data")
        deleted = self.store.delete_all()
        self.audit.append(
            action=AuditAction.RESET_ALL_JOURNEYS,
            table_name=JOURNEY_TABLE,
            new_values={"deleted": deleted},
            staff_id=staff_id,
            terminal_id=terminal_id,
        )
        logger.warning("All journeys reset by staff %s (%d deleted)", staff_id, deleted)
        return deleted


def get_engine() -> JourneyEngine:
    return JourneyEngine()
