from django.test import TestCase

from assembly import flags, registry
from assembly.clock import FixedClock
from assembly.exceptions import MemberExists, MemberHasJourneys, MemberNotFound
from assembly.models import AuditAction, AuditLog, Eligibility, Member, MemberType, Setting
from assembly.services import JourneyEngine

from .factories import MORNING, make_member


class MemberRegistryTests(TestCase):
    def test_get_member_missing(self):
        with self.assertRaises(MemberNotFound):
            registry.get_member(12345)

    def test_get_member_bad_id(self):
        with self.assertRaises(MemberNotFound):
            registry.get_member("abc")

    def test_full_name(self):
        member = make_member(first_name="Jose", middle_initial="P", last_name="Rizal")
        self.assertEqual(member.full_name, "Jose P. Rizal")
        member.middle_initial = ""
        self.assertEqual(member.full_name, "Jose Rizal")

    def test_search_members(self):
        make_member("COOP-0001", last_name="Santos")
        make_member("COOP-0002", last_name="Reyes", member_type=MemberType.ASSOCIATE)
        make_member("COOP-0003", last_name="Cruz", eligibility=Eligibility.NOT_ELIGIBLE)

        self.assertEqual(registry.search_members(query="reyes").count(), 1)
        self.assertEqual(registry.search_members(member_type=MemberType.ASSOCIATE).count(), 1)
        self.assertEqual(registry.search_members(eligibility=Eligibility.ELIGIBLE).count(), 2)
        self.assertEqual(registry.search_members(query="COOP-000").count(), 3)

    def test_delete_member_without_journeys(self):
        member = make_member()

        registry.delete_member(member.pk, staff_id="1", terminal_id="ADMIN")

        self.assertFalse(Member.objects.exists())
        entry = AuditLog.objects.get(action=AuditAction.DELETE_MEMBER)
        self.assertEqual(entry.old_values["cooperative_id"], "COOP-0001")

    def test_delete_member_with_journeys_refused(self):
        member = make_member()
        JourneyEngine(clock=FixedClock(MORNING)).check_in(member.pk, "CN-001", "T1")

        with self.assertRaises(MemberHasJourneys) as ctx:
            registry.delete_member(member.pk)

        self.assertEqual(ctx.exception.journey_count, 1)
        self.assertTrue(Member.objects.filter(pk=member.pk).exists())

    def test_create_member_audited(self):
        member = registry.create_member(
            {
                "cooperative_id": "COOP-0200",
                "first_name": "Gabriela",
                "last_name": "Silang",
                "member_type": MemberType.REGULAR,
                "status": "active",
                "eligibility": Eligibility.ELIGIBLE,
            },
            staff_id="3",
            terminal_id="ADMIN",
        )

        entry = AuditLog.objects.get(action=AuditAction.CREATE_MEMBER)
        self.assertEqual(entry.record_id, str(member.pk))
        self.assertIsNone(entry.old_values)
        self.assertEqual(entry.new_values["last_name"], "Silang")
        self.assertEqual(entry.terminal_id, "ADMIN")

    def test_create_member_duplicate_cooperative_id(self):
        make_member()

        with self.assertRaises(MemberExists):
            registry.create_member(
                {"cooperative_id": "COOP-0001", "first_name": "A", "last_name": "B", "member_type": MemberType.REGULAR}
            )

        self.assertEqual(Member.objects.count(), 1)
        self.assertFalse(AuditLog.objects.filter(action=AuditAction.CREATE_MEMBER).exists())

    def test_update_member_keeps_own_cooperative_id(self):
        member = make_member()

        updated = registry.update_member(member.pk, {"cooperative_id": "COOP-0001", "last_name": "Reyes"})

        self.assertEqual(updated.last_name, "Reyes")
        entry = AuditLog.objects.get(action=AuditAction.UPDATE_MEMBER)
        self.assertEqual(entry.old_values["last_name"], "Santos")
        self.assertEqual(entry.new_values["last_name"], "Reyes")

    def test_update_member_rejects_unknown_field(self):
        member = make_member()
        with self.assertRaises(ValueError):
            registry.update_member(member.pk, {"member_id": 99})


class SettingsTests(TestCase):
    def test_defaults_seeded(self):
        self.assertEqual(flags.get_setting(flags.CHECKOUT_ENABLED), "true")
        self.assertEqual(flags.get_setting(flags.SYSTEM_MAINTENANCE), "false")
        self.assertTrue(flags.is_checkout_enabled())

    def test_missing_checkout_setting_reads_enabled(self):
        Setting.objects.filter(key=flags.CHECKOUT_ENABLED).delete()
        self.assertTrue(flags.is_checkout_enabled())

    def test_get_setting_default(self):
        self.assertEqual(flags.get_setting("unknown", "fallback"), "fallback")

    def test_set_setting_updates_and_audits(self):
        flags.set_setting(flags.CHECKOUT_ENABLED, False, staff_id="1", terminal_id="ADMIN")

        self.assertFalse(flags.is_checkout_enabled())
        entry = AuditLog.objects.get(action=AuditAction.UPDATE_SETTING)
        self.assertEqual(entry.record_id, flags.CHECKOUT_ENABLED)
        self.assertEqual(entry.old_values["value"], "true")
        self.assertEqual(entry.new_values["value"], "false")

    def test_set_setting_creates_new_key(self):
        setting = flags.set_setting("welcome_banner", "Good morning", description="Banner text")

        self.assertEqual(setting.value, "Good morning")
        self.assertEqual(flags.get_setting("welcome_banner"), "Good morning")
        self.assertIsNone(AuditLog.objects.get(action=AuditAction.UPDATE_SETTING).old_values)

    def test_parse_bool(self):
        self.assertTrue(flags.parse_bool("TRUE"))
        self.assertTrue(flags.parse_bool(True))
        self.assertFalse(flags.parse_bool("false"))
        self.assertFalse(flags.parse_bool(""))
