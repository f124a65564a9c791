from rest_framework import serializers

from .models import AuditLog, Journey, Member, Setting
from .outcomes import outcome_from_flags


class MemberSerializer(serializers.ModelSerializer):
    full_name = serializers.CharField(read_only=True)

    class Meta:
        model = Member
        fields = [
            "member_id",
            "cooperative_id",
            "first_name",
            "middle_initial",
            "last_name",
            "full_name",
            "work_email",
            "personal_email",
            "member_type",
            "status",
            "eligibility",
        ]
        extra_kwargs = {
            # duplicate cooperative_id is a registry conflict (409)
            "cooperative_id": {"validators": []},
            "status": {"required": True},
            "eligibility": {"required": True},
        }


class JourneySerializer(serializers.ModelSerializer):
    member_id = serializers.IntegerField(read_only=True)
    cooperative_id = serializers.CharField(source="member.cooperative_id", read_only=True)
    first_name = serializers.CharField(source="member.first_name", read_only=True)
    middle_initial = serializers.CharField(source="member.middle_initial", read_only=True)
    last_name = serializers.CharField(source="member.last_name", read_only=True)
    member_type = serializers.CharField(source="member.member_type", read_only=True)
    claim_status = serializers.CharField(read_only=True)

    class Meta:
        model = Journey
        fields = [
            "journey_id",
            "member_id",
            "cooperative_id",
            "first_name",
            "middle_initial",
            "last_name",
            "member_type",
            "control_number",
            "status",
            "check_in_time",
            "check_in_terminal",
            "meal_stub_issued",
            "transportation_stub_issued",
            "check_out_time",
            "check_out_terminal",
            "claimed",
            "lost_stub",
            "incorrect_stub",
            "different_stub_number",
            "different_stub_value",
            "manual_form_signed",
            "override_reason",
            "staff_id",
            "claim_status",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class CheckInSerializer(serializers.Serializer):
    member_id = serializers.IntegerField()
    control_number = serializers.CharField(max_length=50)
    meal_stub = serializers.BooleanField(required=False, default=False)
    transportation_stub = serializers.BooleanField(required=False, default=False)

    def to_internal_value(self, data):
        # terminals send camelCase stub flags
        if hasattr(data, "copy"):
            data = data.copy()
        for camel, snake in (("mealStub", "meal_stub"), ("transportationStub", "transportation_stub")):
            if camel in data and snake not in data:
                data[snake] = data[camel]
        return super().to_internal_value(data)


class CheckOutSerializer(serializers.Serializer):
    control_number = serializers.CharField(max_length=50)
    lost_stub = serializers.BooleanField(required=False, default=False)
    incorrect_stub = serializers.BooleanField(required=False, default=False)
    different_stub_number = serializers.BooleanField(required=False, default=False)
    different_stub_value = serializers.CharField(required=False, max_length=50, allow_blank=True, allow_null=True)
    override_reason = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    def get_outcome(self):
        data = self.validated_data
        return outcome_from_flags(
            lost_stub=data["lost_stub"],
            incorrect_stub=data["incorrect_stub"],
            different_stub_number=data["different_stub_number"],
            different_stub_value=data.get("different_stub_value"),
            override_reason=data.get("override_reason"),
        )


class ResetJourneySerializer(serializers.Serializer):
    control_number = serializers.CharField(required=False, max_length=50)
    member_id = serializers.IntegerField(required=False)

    def validate(self, attrs):
        if ("control_number" in attrs) == ("member_id" in attrs):
            raise serializers.ValidationError("Provide exactly one of control_number or member_id")
        return attrs


class SettingSerializer(serializers.ModelSerializer):
    class Meta:
        model = Setting
        fields = ["key", "value", "description", "updated_at"]
        read_only_fields = ["key", "updated_at"]


class AuditLogSerializer(serializers.ModelSerializer):
    class Meta:
        model = AuditLog
        fields = [
            "id",
            "action",
            "table_name",
            "record_id",
            "old_values",
            "new_values",
            "staff_id",
            "terminal_id",
            "created_at",
        ]
        read_only_fields = fields
