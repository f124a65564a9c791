"""Key/value system settings.

Boolean settings are stored as the strings "true" / "false".
"""

import logging

from django.db import transaction

from . import audit
from .models import AuditAction, Setting

logger = logging.getLogger(__name__)

CHECKOUT_ENABLED = "checkout_enabled"
SYSTEM_MAINTENANCE = "system_maintenance"

DEFAULT_SETTINGS = {
    CHECKOUT_ENABLED: ("true", "Enable/disable checkout functionality"),
    SYSTEM_MAINTENANCE: ("false", "System maintenance mode"),
}


def parse_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


def get_setting(key: str, default: str | None = None) -> str | None:
    setting = Setting.objects.filter(key=key).only("value").first()
    if setting is None:
        return default
    return setting.value


def is_checkout_enabled() -> bool:
    # A missing row reads as enabled, matching the seeded default.
    return parse_bool(get_setting(CHECKOUT_ENABLED, DEFAULT_SETTINGS[CHECKOUT_ENABLED][0]))


@transaction.atomic
def set_setting(
    key: str,
    value,
    description: str | None = None,
    staff_id: str | None = None,
    terminal_id: str | None = None,
) -> Setting:
    """Create or update a setting and record the change in the audit log."""
    if isinstance(value, bool):
        value = "true" if value else "false"
    value = str(value)

    setting = Setting.objects.select_for_update().filter(key=key).first()
    old_values = None
    if setting is None:
        setting = Setting(key=key, value=value, description=description)
    else:
        old_values = {"value": setting.value, "description": setting.description}
        setting.value = value
        if description:
            setting.description = description
    setting.save()

    audit.append(
        AuditAction.UPDATE_SETTING,
        table_name="settings",
        record_id=key,
        old_values=old_values,
        new_values={"value": setting.value, "description": setting.description},
        staff_id=staff_id,
        terminal_id=terminal_id,
    )
    logger.info("Setting %s changed to %r by staff %s", key, value, staff_id)
    return setting


class SettingsProvider:
    """Settings accessor injected into the journey engine."""

    def get(self, key: str, default: str | None = None) -> str | None:
        return get_setting(key, default)

    def checkout_enabled(self) -> bool:
        return is_checkout_enabled()


class StaticSettings(SettingsProvider):
    """In-memory settings, for engines built without the settings table."""

    def __init__(self, **values):
        self.values = {key: str(value).lower() if isinstance(value, bool) else value
                       for key, value in values.items()}

    def get(self, key: str, default: str | None = None) -> str | None:
        return self.values.get(key, default)

    def checkout_enabled(self) -> bool:
        return parse_bool(self.get(CHECKOUT_ENABLED, DEFAULT_SETTINGS[CHECKOUT_ENABLED][0]))
