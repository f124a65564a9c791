"""Read-only attendance projections.

Computed on demand from the member and journey tables without locking;
a reader may see a journey before or after its check-out, never halfway.
"""

from datetime import date

from django.db.models import Count, F, Q
from django.utils import timezone

from .clock import operating_today
from .models import Journey, JourneyStatus, Member, MemberType


def _by_member_type(rows, count_key: str) -> dict:
    counts = {"regular": 0, "associate": 0, "total": 0}
    for row in rows:
        if row["member_type"] == MemberType.REGULAR:
            counts["regular"] = row[count_key]
        elif row["member_type"] == MemberType.ASSOCIATE:
            counts["associate"] = row[count_key]
        counts["total"] += row[count_key]
    return counts


def compute_statistics(day: date | None = None) -> dict:
    """Member population and assembly attendance for ``day``.

    A member counts as attended once checked in, before or after check-out.
    """
    day = day or operating_today()

    population = Member.objects.values("member_type").annotate(count=Count("member_id")).order_by()
    attended = (
        Journey.objects.filter(
            check_in_date=day,
            status__in=[JourneyStatus.CHECKED_IN, JourneyStatus.COMPLETE],
        )
        .values(member_type=F("member__member_type"))
        .annotate(attended=Count("member_id", distinct=True))
        .order_by()
    )

    return {
        "memberPopulation": _by_member_type(population, "count"),
        "attendedAssembly": _by_member_type(attended, "attended"),
        "lastUpdated": timezone.now().isoformat(),
    }


def journey_stats(day: date | None = None) -> dict:
    """Per-day journey counts for the operator dashboard."""
    day = day or operating_today()
    stats = Journey.objects.filter(check_in_date=day).aggregate(
        total_journeys=Count("journey_id"),
        checked_in=Count("journey_id", filter=Q(status=JourneyStatus.CHECKED_IN)),
        complete=Count("journey_id", filter=Q(status=JourneyStatus.COMPLETE)),
        meal_stubs_issued=Count("journey_id", filter=Q(meal_stub_issued=True)),
        transportation_stubs_issued=Count("journey_id", filter=Q(transportation_stub_issued=True)),
        claimed=Count("journey_id", filter=Q(claimed=True)),
        lost_stub=Count("journey_id", filter=Q(lost_stub=True)),
        incorrect_stub=Count("journey_id", filter=Q(incorrect_stub=True)),
        different_stub=Count("journey_id", filter=Q(different_stub_number=True)),
    )
    stats["date"] = day.isoformat()
    return stats
