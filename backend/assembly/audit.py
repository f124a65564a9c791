"""Append-only audit trail of state-changing actions."""

import json

from django.core.serializers.json import DjangoJSONEncoder

from .clock import day_bounds
from .models import AuditLog


def _jsonable(values):
    if values is None:
        return None
    return json.loads(json.dumps(values, cls=DjangoJSONEncoder))


def append(
    action: str,
    table_name: str,
    record_id=None,
    old_values: dict | None = None,
    new_values: dict | None = None,
    staff_id: str | None = None,
    terminal_id: str | None = None,
) -> AuditLog:
    """Write one audit entry.

    The row is inserted in the caller's transaction, so it is durable exactly
    when the state change it describes is.
    """
    return AuditLog.objects.create(
        action=action,
        table_name=table_name,
        record_id=str(record_id) if record_id is not None else None,
        old_values=_jsonable(old_values),
        new_values=_jsonable(new_values),
        staff_id=str(staff_id) if staff_id is not None else None,
        terminal_id=terminal_id,
    )


def list_audit_logs(day=None, action: str | None = None, staff_id: str | None = None, limit: int = 100):
    entries = AuditLog.objects.all()
    if day is not None:
        start, end = day_bounds(day)
        entries = entries.filter(created_at__gte=start, created_at__lt=end)
    if action:
        entries = entries.filter(action=action)
    if staff_id:
        entries = entries.filter(staff_id=str(staff_id))
    return entries.order_by("-created_at", "-id")[:limit]


class AuditSink:
    """Audit writer injected into the journey engine."""

    def append(self, **entry) -> AuditLog:
        return append(**entry)
