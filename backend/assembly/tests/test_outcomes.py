from types import SimpleNamespace

from django.test import SimpleTestCase

from assembly.exceptions import InvalidOutcome
from assembly.outcomes import (
    DifferentStub,
    IncorrectStub,
    LostStub,
    Normal,
    claim_status_label,
    outcome_from_flags,
    resolve_outcome,
)


def _journey(**flags):
    fields = {
        "claimed": True,
        "lost_stub": False,
        "incorrect_stub": False,
        "different_stub_number": False,
    }
    fields.update(flags)
    return SimpleNamespace(**fields)


class ResolveOutcomeTests(SimpleTestCase):
    def test_normal_claim_sets_no_anomaly(self):
        fields = resolve_outcome(Normal())
        self.assertTrue(fields["claimed"])
        self.assertFalse(fields["lost_stub"])
        self.assertFalse(fields["incorrect_stub"])
        self.assertFalse(fields["different_stub_number"])
        self.assertFalse(fields["manual_form_signed"])
        self.assertIsNone(fields["override_reason"])

    def test_lost_stub_forces_manual_form_and_default_reason(self):
        fields = resolve_outcome(LostStub())
        self.assertTrue(fields["lost_stub"])
        self.assertTrue(fields["manual_form_signed"])
        self.assertEqual(fields["override_reason"], "Lost stub - manual form signed")

    def test_incorrect_stub_default_reason(self):
        fields = resolve_outcome(IncorrectStub())
        self.assertTrue(fields["incorrect_stub"])
        self.assertTrue(fields["manual_form_signed"])
        self.assertEqual(fields["override_reason"], "Incorrect stub - manual override")

    def test_different_stub_reason_mentions_value(self):
        fields = resolve_outcome(DifferentStub(value="CN-777"))
        self.assertTrue(fields["different_stub_number"])
        self.assertEqual(fields["different_stub_value"], "CN-777")
        self.assertTrue(fields["manual_form_signed"])
        self.assertEqual(
            fields["override_reason"],
            "Different stub number: CN-777 - manual form signed",
        )

    def test_explicit_reason_wins_over_default(self):
        fields = resolve_outcome(LostStub(override_reason="Stub fell in the river"))
        self.assertEqual(fields["override_reason"], "Stub fell in the river")
        self.assertTrue(fields["manual_form_signed"])

    def test_normal_claim_keeps_explicit_reason(self):
        fields = resolve_outcome(Normal(override_reason="Supervisor approved"))
        self.assertEqual(fields["override_reason"], "Supervisor approved")
        self.assertFalse(fields["manual_form_signed"])

    def test_unknown_outcome_rejected(self):
        with self.assertRaises(InvalidOutcome):
            resolve_outcome("lost")


class OutcomeFromFlagsTests(SimpleTestCase):
    def test_no_flags_is_normal(self):
        self.assertEqual(outcome_from_flags(), Normal())

    def test_blank_reason_is_dropped(self):
        self.assertEqual(outcome_from_flags(lost_stub=True, override_reason="  "), LostStub())

    def test_different_stub_requires_value(self):
        with self.assertRaises(InvalidOutcome):
            outcome_from_flags(different_stub_number=True, different_stub_value="")

    def test_contradictory_flags_rejected(self):
        with self.assertRaises(InvalidOutcome) as ctx:
            outcome_from_flags(lost_stub=True, incorrect_stub=True)
        self.assertEqual(ctx.exception.context["flags"], ["lost_stub", "incorrect_stub"])

    def test_different_stub_value_is_stripped(self):
        outcome = outcome_from_flags(different_stub_number=True, different_stub_value=" 42 ")
        self.assertEqual(outcome, DifferentStub(value="42"))


class ClaimStatusLabelTests(SimpleTestCase):
    def test_lost_stub_takes_precedence(self):
        label = claim_status_label(_journey(lost_stub=True, incorrect_stub=True))
        self.assertEqual(label, "Claimed without Stub")

    def test_incorrect_stub(self):
        self.assertEqual(claim_status_label(_journey(incorrect_stub=True)), "Claimed with Incorrect Stub")

    def test_different_stub(self):
        label = claim_status_label(_journey(different_stub_number=True))
        self.assertEqual(label, "Claimed with Different Stub")

    def test_plain_claim(self):
        self.assertEqual(claim_status_label(_journey()), "Claimed")

    def test_open_journey(self):
        self.assertEqual(claim_status_label(_journey(claimed=False)), "Not Claimed")
