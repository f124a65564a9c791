from django.db import migrations, models


class Migration(migrations.Migration):
    dependencies = [
        ("assembly", "0002_seed_settings"),
    ]

    operations = [
        migrations.AlterField(
            model_name="auditlog",
            name="action",
            field=models.CharField(
                choices=[
                    ("CHECKIN", "Check In"),
                    ("CHECKOUT", "Check Out"),
                    ("RESET_JOURNEY", "Reset Journey"),
                    ("RESET_ALL_JOURNEYS", "Reset All Journeys"),
                    ("UPDATE_SETTING", "Update Setting"),
                    ("CREATE_MEMBER", "Create Member"),
                    ("UPDATE_MEMBER", "Update Member"),
                    ("DELETE_MEMBER", "Delete Member"),
                ],
                max_length=30,
            ),
        ),
    ]
