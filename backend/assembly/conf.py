"""Configuration for the assembly app."""

from zoneinfo import ZoneInfo

from django.conf import settings

DEFAULT_OPERATING_TIMEZONE = "Asia/Manila"


def get_operating_timezone() -> ZoneInfo:
    """Get the timezone used for every "today" boundary.

    Reads ASSEMBLY_OPERATING_TIMEZONE from Django settings (an IANA name).
    Defaults to Asia/Manila (UTC+8).
    """
    name = getattr(settings, "ASSEMBLY_OPERATING_TIMEZONE", None) or DEFAULT_OPERATING_TIMEZONE
    return ZoneInfo(name)
