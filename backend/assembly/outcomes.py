"""Check-out outcomes.

A check-out is exactly one of ``Normal``, ``LostStub``, ``IncorrectStub`` or
``DifferentStub``. ``resolve_outcome`` turns an outcome into the journey
fields it sets, so contradictory flag combinations cannot be stored.
"""

from dataclasses import dataclass

from .exceptions import InvalidOutcome

LOST_STUB_REASON = "Lost stub - manual form signed"
INCORRECT_STUB_REASON = "Incorrect stub - manual override"
DIFFERENT_STUB_REASON = "Different stub number: {value} - manual form signed"


@dataclass(frozen=True)
class Normal:
    override_reason: str | None = None


@dataclass(frozen=True)
class LostStub:
    override_reason: str | None = None


@dataclass(frozen=True)
class IncorrectStub:
    override_reason: str | None = None


@dataclass(frozen=True)
class DifferentStub:
    value: str
    override_reason: str | None = None


CheckoutOutcome = Normal | LostStub | IncorrectStub | DifferentStub


def resolve_outcome(outcome: CheckoutOutcome) -> dict:
    """Return the journey fields written by a check-out with ``outcome``."""
    fields = {
        "claimed": True,
        "lost_stub": False,
        "incorrect_stub": False,
        "different_stub_number": False,
        "different_stub_value": None,
        "manual_form_signed": False,
        "override_reason": None,
    }
    match outcome:
        case Normal():
            default_reason = None
        case LostStub():
            fields["lost_stub"] = True
            default_reason = LOST_STUB_REASON
        case IncorrectStub():
            fields["incorrect_stub"] = True
            default_reason = INCORRECT_STUB_REASON
        case DifferentStub(value=value):
            fields["different_stub_number"] = True
            fields["different_stub_value"] = value
            default_reason = DIFFERENT_STUB_REASON.format(value=value)
        case _:
            raise InvalidOutcome(f"Unknown check-out outcome: {outcome!r}")

    if default_reason is not None:
        fields["manual_form_signed"] = True
    fields["override_reason"] = outcome.override_reason or default_reason
    return fields


def outcome_from_flags(
    lost_stub: bool = False,
    incorrect_stub: bool = False,
    different_stub_number: bool = False,
    different_stub_value: str | None = None,
    override_reason: str | None = None,
) -> CheckoutOutcome:
    """Build an outcome from the flag-style payload terminals send.

    At most one anomaly flag may be set; a different stub number needs a value.
    """
    override_reason = (override_reason or "").strip() or None
    flagged = [name for name, on in (
        ("lost_stub", lost_stub),
        ("incorrect_stub", incorrect_stub),
        ("different_stub_number", different_stub_number),
    ) if on]
    if len(flagged) > 1:
        raise InvalidOutcome(
            "Only one of lost_stub, incorrect_stub, different_stub_number may be set",
            flags=flagged,
        )
    if lost_stub:
        return LostStub(override_reason=override_reason)
    if incorrect_stub:
        return IncorrectStub(override_reason=override_reason)
    if different_stub_number:
        value = (different_stub_value or "").strip()
        if not value:
            raise InvalidOutcome("different_stub_value is required for a different stub number")
        return DifferentStub(value=value, override_reason=override_reason)
    return Normal(override_reason=override_reason)


def claim_status_label(journey) -> str:
    if journey.lost_stub:
        return "Claimed without Stub"
    if journey.incorrect_stub:
        return "Claimed with Incorrect Stub"
    if journey.different_stub_number:
        return "Claimed with Different Stub"
    if journey.claimed:
        return "Claimed"
    return "Not Claimed"
