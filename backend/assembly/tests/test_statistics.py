from datetime import timedelta

from django.test import TestCase

from assembly.clock import FixedClock
from assembly.models import Eligibility, MemberType
from assembly.outcomes import LostStub
from assembly.services import JourneyEngine
from assembly.statistics import compute_statistics

from .factories import MORNING, make_member


class ComputeStatisticsTests(TestCase):
    def setUp(self):
        self.clock = FixedClock(MORNING)
        self.engine = JourneyEngine(clock=self.clock)
        self.regular_a = make_member("COOP-0001")
        self.regular_b = make_member("COOP-0002")
        self.associate = make_member("COOP-0003", member_type=MemberType.ASSOCIATE)
        make_member("COOP-0004", member_type=MemberType.ASSOCIATE, eligibility=Eligibility.NOT_ELIGIBLE)

    def test_empty_day(self):
        stats = compute_statistics(self.clock.today())
        self.assertEqual(stats["memberPopulation"], {"regular": 2, "associate": 2, "total": 4})
        self.assertEqual(stats["attendedAssembly"], {"regular": 0, "associate": 0, "total": 0})
        self.assertIn("lastUpdated", stats)

    def test_attended_counts_any_status(self):
        self.engine.check_in(self.regular_a.pk, "CN-001", "T1")
        self.engine.check_in(self.associate.pk, "CN-002", "T1")
        self.engine.check_out("CN-002", "T2", "7", LostStub())

        stats = compute_statistics(self.clock.today())

        self.assertEqual(stats["attendedAssembly"], {"regular": 1, "associate": 1, "total": 2})

    def test_other_days_not_counted(self):
        self.engine.check_in(self.regular_a.pk, "CN-001", "T1")
        self.clock.advance(days=1)
        self.engine.check_in(self.regular_b.pk, "CN-002", "T1")

        stats = compute_statistics(self.clock.today())
        self.assertEqual(stats["attendedAssembly"]["total"], 1)
        stats = compute_statistics(self.clock.today() - timedelta(days=1))
        self.assertEqual(stats["attendedAssembly"]["regular"], 1)
