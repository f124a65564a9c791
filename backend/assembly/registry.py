"""Member registry.

The journey engine only reads members. Creation, updates and deletion live
here with their audit entries; deletion must respect journeys that reference
the member.
"""

import logging

from django.db import IntegrityError, transaction
from django.db.models import ProtectedError, Q

from . import audit
from .exceptions import MemberExists, MemberHasJourneys, MemberNotFound
from .models import AuditAction, Member

logger = logging.getLogger(__name__)

MEMBER_TABLE = "members"
MEMBER_FIELDS = (
    "cooperative_id",
    "first_name",
    "middle_initial",
    "last_name",
    "work_email",
    "personal_email",
    "member_type",
    "status",
    "eligibility",
)


def _member_values(member: Member) -> dict:
    return {name: getattr(member, name) for name in MEMBER_FIELDS}


def _save(member: Member, **kwargs) -> None:
    try:
        with transaction.atomic():
            member.save(**kwargs)
    except IntegrityError:
        # cooperative_id taken by a concurrent write
        raise MemberExists(member.cooperative_id) from None


def _cooperative_id_taken(cooperative_id, exclude_pk=None) -> bool:
    members = Member.objects.filter(cooperative_id=cooperative_id)
    if exclude_pk is not None:
        members = members.exclude(pk=exclude_pk)
    return members.exists()


def get_member(member_id) -> Member:
    try:
        return Member.objects.get(pk=member_id)
    except (Member.DoesNotExist, ValueError, TypeError):
        raise MemberNotFound(member_id) from None


def search_members(query=None, member_type=None, status=None, eligibility=None):
    members = Member.objects.all()
    if query:
        query = query.strip()
        members = members.filter(
            Q(cooperative_id__icontains=query)
            | Q(first_name__icontains=query)
            | Q(last_name__icontains=query)
        )
    if member_type:
        members = members.filter(member_type=member_type)
    if status:
        members = members.filter(status=status)
    if eligibility:
        members = members.filter(eligibility=eligibility)
    return members


@transaction.atomic
def create_member(fields: dict, staff_id=None, terminal_id=None) -> Member:
    """
    Register a member.

    Raises:
        MemberExists: the cooperative ID is already registered
    """
    unknown = set(fields) - set(MEMBER_FIELDS)
    if unknown:
        raise ValueError(f"Not member fields: {sorted(unknown)}")
    if _cooperative_id_taken(fields["cooperative_id"]):
        raise MemberExists(fields["cooperative_id"])

    member = Member(**fields)
    _save(member, force_insert=True)
    audit.append(
        AuditAction.CREATE_MEMBER,
        table_name=MEMBER_TABLE,
        record_id=member.member_id,
        new_values=_member_values(member),
        staff_id=staff_id,
        terminal_id=terminal_id,
    )
    logger.info("Member %s (%s) created by staff %s", member.member_id, member.cooperative_id, staff_id)
    return member


@transaction.atomic
def update_member(member_id, fields: dict, staff_id=None, terminal_id=None) -> Member:
    """
    Change a member's details. Only the given fields are touched.

    Raises:
        MemberNotFound: no such member
        MemberExists: the new cooperative ID belongs to another member
    """
    unknown = set(fields) - set(MEMBER_FIELDS)
    if unknown:
        raise ValueError(f"Not member fields: {sorted(unknown)}")
    member = get_member(member_id)
    cooperative_id = fields.get("cooperative_id")
    if cooperative_id and _cooperative_id_taken(cooperative_id, exclude_pk=member.pk):
        raise MemberExists(cooperative_id)

    old_values = _member_values(member)
    for name, value in fields.items():
        setattr(member, name, value)
    _save(member)
    audit.append(
        AuditAction.UPDATE_MEMBER,
        table_name=MEMBER_TABLE,
        record_id=member.member_id,
        old_values=old_values,
        new_values=_member_values(member),
        staff_id=staff_id,
        terminal_id=terminal_id,
    )
    logger.info("Member %s updated by staff %s", member.member_id, staff_id)
    return member


@transaction.atomic
def delete_member(member_id, staff_id=None, terminal_id=None) -> None:
    member = get_member(member_id)
    journey_count = member.journeys.count()
    if journey_count:
        raise MemberHasJourneys(member.member_id, journey_count)

    old_values = _member_values(member)
    try:
        with transaction.atomic():
            member.delete()
    except ProtectedError:
        # a journey was created between the count and the delete
        raise MemberHasJourneys(member.member_id, member.journeys.count()) from None
    audit.append(
        AuditAction.DELETE_MEMBER,
        table_name=MEMBER_TABLE,
        record_id=member_id,
        old_values=old_values,
        staff_id=staff_id,
        terminal_id=terminal_id,
    )
    logger.info("Member %s deleted by staff %s", member_id, staff_id)


class MemberRegistry:
    """Member lookup injected into the journey engine."""

    def get_member(self, member_id) -> Member:
        return get_member(member_id)
