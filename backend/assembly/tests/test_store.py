from datetime import date

from django.test import TestCase

from assembly.clock import FixedClock
from assembly.exceptions import AlreadyCheckedIn, AlreadyComplete, ControlNumberExists, DuplicateControlNumber
from assembly.models import Journey, JourneyStatus
from assembly.outcomes import Normal, resolve_outcome
from assembly.services import JourneyEngine
from assembly.store import JourneyStore

from .factories import MORNING, make_member


def _fields(member, control_number, day=date(2026, 10, 19)):
    return {
        "member": member,
        "control_number": control_number,
        "check_in_time": MORNING,
        "check_in_date": day,
        "check_in_terminal": "T1",
    }


class JourneyStoreConstraintTests(TestCase):
    """The store rejects duplicates even when no pre-check ran first."""

    def setUp(self):
        self.store = JourneyStore()
        self.member = make_member()
        self.other = make_member("COOP-0002")

    def test_duplicate_control_number_translated(self):
        self.store.create(**_fields(self.member, "CN-001"))

        with self.assertRaises(DuplicateControlNumber) as ctx:
            self.store.create(**_fields(self.other, "CN-001", day=date(2026, 10, 20)))

        self.assertIsInstance(ctx.exception, ControlNumberExists)
        self.assertEqual(ctx.exception.control_number, "CN-001")
        self.assertEqual(Journey.objects.count(), 1)

    def test_duplicate_member_day_translated(self):
        first = self.store.create(**_fields(self.member, "CN-001"))

        with self.assertRaises(AlreadyCheckedIn) as ctx:
            self.store.create(**_fields(self.member, "CN-002"))

        self.assertEqual(ctx.exception.journey.pk, first.pk)

    def test_both_constraints_violated_reports_member_day_first(self):
        first = self.store.create(**_fields(self.member, "CN-001"))

        with self.assertRaises(AlreadyCheckedIn) as ctx:
            self.store.create(**_fields(self.member, "CN-001"))

        self.assertEqual(ctx.exception.journey.pk, first.pk)
        self.assertEqual(Journey.objects.count(), 1)

    def test_duplicate_member_day_on_complete_journey(self):
        first = self.store.create(**_fields(self.member, "CN-001"))
        patch = resolve_outcome(Normal())
        patch.update(check_out_time=MORNING, check_out_terminal="T2", staff_id="7")
        self.store.complete(first.pk, patch)

        with self.assertRaises(AlreadyComplete):
            self.store.create(**_fields(self.member, "CN-002"))

    def test_complete_is_compare_and_swap(self):
        journey = self.store.create(**_fields(self.member, "CN-001"))
        patch = resolve_outcome(Normal())
        patch.update(check_out_time=MORNING, check_out_terminal="T2", staff_id="7")

        self.assertTrue(self.store.complete(journey.pk, patch))
        self.assertFalse(self.store.complete(journey.pk, dict(patch, check_out_terminal="T3")))

        journey.refresh_from_db()
        self.assertEqual(journey.status, JourneyStatus.COMPLETE)
        self.assertEqual(journey.check_out_terminal, "T2")

    def test_complete_rejects_non_checkout_fields(self):
        journey = self.store.create(**_fields(self.member, "CN-001"))
        with self.assertRaises(ValueError):
            self.store.complete(journey.pk, {"control_number": "CN-999"})

    def test_delete_by_member_all_days(self):
        self.store.create(**_fields(self.member, "CN-001"))
        self.store.create(**_fields(self.member, "CN-002", day=date(2026, 10, 20)))
        self.store.create(**_fields(self.other, "CN-003"))

        removed = self.store.delete_by_member(self.member.pk)

        self.assertEqual({j.control_number for j in removed}, {"CN-001", "CN-002"})
        self.assertEqual(list(Journey.objects.values_list("control_number", flat=True)), ["CN-003"])

    def test_delete_by_control_number_missing(self):
        self.assertIsNone(self.store.delete_by_control_number("CN-404"))


class EngineStoreBackstopTests(TestCase):
    """An engine whose pre-check misses a concurrent insert still sees a conflict."""

    def test_race_past_pre_check_reports_conflict(self):
        member = make_member()
        other = make_member("COOP-0002")
        store = JourneyStore()

        class BlindStore(JourneyStore):
            def find_by_control_number(self, control_number):
                return None

        engine = JourneyEngine(store=BlindStore(), clock=FixedClock(MORNING))
        store.create(**_fields(other, "CN-001"))

        with self.assertRaises(ControlNumberExists):
            engine.check_in(member.pk, "CN-001", "T1")
        self.assertFalse(member.journeys.exists())
