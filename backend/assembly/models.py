import uuid

from django.db import models
from django.db.models import Q

from .outcomes import claim_status_label


class TimeStampedModel(models.Model):
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class MemberType(models.TextChoices):
    REGULAR = "Regular", "Regular"
    ASSOCIATE = "Associate", "Associate"


class MemberStatus(models.TextChoices):
    ACTIVE = "active", "Active"
    DORMANT = "dormant", "Dormant"


class Eligibility(models.TextChoices):
    ELIGIBLE = "eligible", "Eligible"
    NOT_ELIGIBLE = "not_eligible", "Not Eligible"


class Member(TimeStampedModel):
    member_id = models.BigAutoField(primary_key=True)
    cooperative_id = models.CharField(max_length=50, unique=True)
    first_name = models.CharField(max_length=100)
    middle_initial = models.CharField(max_length=5, blank=True, default="")
    last_name = models.CharField(max_length=100)
    work_email = models.EmailField(blank=True, null=True)
    personal_email = models.EmailField(blank=True, null=True)
    member_type = models.CharField(max_length=20, choices=MemberType.choices)
    status = models.CharField(
        max_length=20,
        choices=MemberStatus.choices,
        default=MemberStatus.ACTIVE,
    )
    eligibility = models.CharField(
        max_length=20,
        choices=Eligibility.choices,
        default=Eligibility.ELIGIBLE,
    )

    class Meta:
        ordering = ["last_name", "first_name"]

    def __str__(self) -> str:
        return f"{self.full_name} ({self.cooperative_id})"

    @property
    def full_name(self) -> str:
        middle = f" {self.middle_initial}." if self.middle_initial else ""
        return f"{self.first_name}{middle} {self.last_name}"

    @property
    def is_eligible(self) -> bool:
        return self.eligibility == Eligibility.ELIGIBLE


class JourneyStatus(models.TextChoices):
    CHECKED_IN = "checked_in", "Checked In"
    COMPLETE = "complete", "Complete"


class Journey(TimeStampedModel):
    journey_id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    member = models.ForeignKey(Member, on_delete=models.PROTECT, related_name="journeys")
    control_number = models.CharField(max_length=50)

    check_in_time = models.DateTimeField()
    check_in_date = models.DateField()
    check_in_terminal = models.CharField(max_length=50)
    meal_stub_issued = models.BooleanField(default=False)
    transportation_stub_issued = models.BooleanField(default=False)

    check_out_time = models.DateTimeField(blank=True, null=True)
    check_out_terminal = models.CharField(max_length=50, blank=True, null=True)
    claimed = models.BooleanField(default=False)
    lost_stub = models.BooleanField(default=False)
    incorrect_stub = models.BooleanField(default=False)
    different_stub_number = models.BooleanField(default=False)
    different_stub_value = models.CharField(max_length=50, blank=True, null=True)
    manual_form_signed = models.BooleanField(default=False)
    override_reason = models.TextField(blank=True, null=True)
    staff_id = models.CharField(max_length=50, blank=True, null=True)

    status = models.CharField(
        max_length=20,
        choices=JourneyStatus.choices,
        default=JourneyStatus.CHECKED_IN,
    )

    class Meta:
        ordering = ["-check_in_time"]
        constraints = [
            models.UniqueConstraint(
                fields=["control_number"],
                name="unique_journey_control_number",
            ),
            models.UniqueConstraint(
                fields=["member", "check_in_date"],
                name="unique_journey_member_per_day",
            ),
            models.CheckConstraint(
                condition=(
                    Q(status=JourneyStatus.CHECKED_IN, check_out_time__isnull=True)
                    | Q(status=JourneyStatus.COMPLETE, check_out_time__isnull=False)
                ),
                name="journey_checkout_matches_status",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.control_number} - {self.member_id} ({self.status})"

    @property
    def is_complete(self) -> bool:
        return self.status == JourneyStatus.COMPLETE

    @property
    def claim_status(self) -> str:
        return claim_status_label(self)


class Setting(TimeStampedModel):
    key = models.CharField(max_length=100, unique=True)
    value = models.CharField(max_length=255)
    description = models.TextField(blank=True, null=True)

    class Meta:
        ordering = ["key"]

    def __str__(self) -> str:
        return f"{self.key}={self.value}"


class AuditAction(models.TextChoices):
    CHECKIN = "CHECKIN", "Check In"
    CHECKOUT = "CHECKOUT", "Check Out"
    RESET_JOURNEY = "RESET_JOURNEY", "Reset Journey"
    RESET_ALL_JOURNEYS = "RESET_ALL_JOURNEYS", "Reset All Journeys"
    UPDATE_SETTING = "UPDATE_SETTING", "Update Setting"
    CREATE_MEMBER = "CREATE_MEMBER", "Create Member"
    UPDATE_MEMBER = "UPDATE_MEMBER", "Update Member"
    DELETE_MEMBER = "DELETE_MEMBER", "Delete Member"


class AuditLog(models.Model):
    action = models.CharField(max_length=30, choices=AuditAction.choices)
    table_name = models.CharField(max_length=50)
    record_id = models.CharField(max_length=64, blank=True, null=True)
    old_values = models.JSONField(blank=True, null=True)
    new_values = models.JSONField(blank=True, null=True)
    staff_id = models.CharField(max_length=50, blank=True, null=True)
    terminal_id = models.CharField(max_length=50, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:
        return f"{self.action} {self.table_name}:{self.record_id} ({self.created_at})"
