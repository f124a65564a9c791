# Generated manually to capture initial assembly models
import uuid

from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Member",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("member_id", models.BigAutoField(primary_key=True, serialize=False)),
                ("cooperative_id", models.CharField(max_length=50, unique=True)),
                ("first_name", models.CharField(max_length=100)),
                ("middle_initial", models.CharField(blank=True, default="", max_length=5)),
                ("last_name", models.CharField(max_length=100)),
                ("work_email", models.EmailField(blank=True, max_length=254, null=True)),
                ("personal_email", models.EmailField(blank=True, max_length=254, null=True)),
                ("member_type", models.CharField(choices=[("Regular", "Regular"), ("Associate", "Associate")], max_length=20)),
                ("status", models.CharField(choices=[("active", "Active"), ("dormant", "Dormant")], default="active", max_length=20)),
                ("eligibility", models.CharField(choices=[("eligible", "Eligible"), ("not_eligible", "Not Eligible")], default="eligible", max_length=20)),
            ],
            options={"ordering": ["last_name", "first_name"]},
        ),
        migrations.CreateModel(
            name="Setting",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("key", models.CharField(max_length=100, unique=True)),
                ("value", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True, null=True)),
            ],
            options={"ordering": ["key"]},
        ),
        migrations.CreateModel(
            name="AuditLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("action", models.CharField(choices=[("CHECKIN", "Check In"), ("CHECKOUT", "Check Out"), ("RESET_JOURNEY", "Reset Journey"), ("RESET_ALL_JOURNEYS", "Reset All Journeys"), ("UPDATE_SETTING", "Update Setting"), ("DELETE_MEMBER", "Delete Member")], max_length=30)),
                ("table_name", models.CharField(max_length=50)),
                ("record_id", models.CharField(blank=True, max_length=64, null=True)),
                ("old_values", models.JSONField(blank=True, null=True)),
                ("new_values", models.JSONField(blank=True, null=True)),
                ("staff_id", models.CharField(blank=True, max_length=50, null=True)),
                ("terminal_id", models.CharField(blank=True, max_length=50, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={"ordering": ["-created_at", "-id"]},
        ),
        migrations.CreateModel(
            name="Journey",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("journey_id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("control_number", models.CharField(max_length=50)),
                ("check_in_time", models.DateTimeField()),
                ("check_in_date", models.DateField()),
                ("check_in_terminal", models.CharField(max_length=50)),
                ("meal_stub_issued", models.BooleanField(default=False)),
                ("transportation_stub_issued", models.BooleanField(default=False)),
                ("check_out_time", models.DateTimeField(blank=True, null=True)),
                ("check_out_terminal", models.CharField(blank=True, max_length=50, null=True)),
                ("claimed", models.BooleanField(default=False)),
                ("lost_stub", models.BooleanField(default=False)),
                ("incorrect_stub", models.BooleanField(default=False)),
                ("different_stub_number", models.BooleanField(default=False)),
                ("different_stub_value", models.CharField(blank=True, max_length=50, null=True)),
                ("manual_form_signed", models.BooleanField(default=False)),
                ("override_reason", models.TextField(blank=True, null=True)),
                ("staff_id", models.CharField(blank=True, max_length=50, null=True)),
                ("status", models.CharField(choices=[("checked_in", "Checked In"), ("complete", "Complete")], default="checked_in", max_length=20)),
                ("member", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="journeys", to="assembly.member")),
            ],
            options={
                "ordering": ["-check_in_time"],
                "constraints": [
                    models.UniqueConstraint(fields=("control_number",), name="unique_journey_control_number"),
                    models.UniqueConstraint(fields=("member", "check_in_date"), name="unique_journey_member_per_day"),
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(("check_out_time__isnull", True), ("status", "checked_in")),
                            models.Q(("check_out_time__isnull", False), ("status", "complete")),
                            _connector="OR",
                        ),
                        name="journey_checkout_matches_status",
                    ),
                ],
            },
        ),
    ]
