"""Operating-day arithmetic.

All day boundaries are computed in an explicit operating timezone rather
than the process or database timezone.
"""

from datetime import date, datetime, time, timedelta, tzinfo

from django.utils import timezone

from .conf import get_operating_timezone


def operating_date(instant: datetime, tz: tzinfo | None = None) -> date:
    """Return the calendar date of ``instant`` in the operating timezone."""
    if timezone.is_naive(instant):
        raise ValueError("operating_date() requires an aware datetime")
    return instant.astimezone(tz or get_operating_timezone()).date()


def operating_today(tz: tzinfo | None = None) -> date:
    return operating_date(timezone.now(), tz)


def day_bounds(day: date, tz: tzinfo | None = None) -> tuple[datetime, datetime]:
    """Return the [start, end) instants of ``day`` in the operating timezone."""
    tz = tz or get_operating_timezone()
    start = datetime.combine(day, time.min, tzinfo=tz)
    return start, start + timedelta(days=1)


class Clock:
    """Injectable source of "now" for the journey engine."""

    def __init__(self, tz: tzinfo | None = None):
        self._tz = tz

    @property
    def tz(self) -> tzinfo:
        return self._tz or get_operating_timezone()

    def now(self) -> datetime:
        return timezone.now()

    def today(self) -> date:
        return operating_date(self.now(), self.tz)


class FixedClock(Clock):
    """Clock frozen at a given instant; used by tests and replays."""

    def __init__(self, instant: datetime, tz: tzinfo | None = None):
        super().__init__(tz)
        self.instant = instant

    def now(self) -> datetime:
        return self.instant

    def advance(self, **kwargs) -> None:
        self.instant = self.instant + timedelta(**kwargs)
