from django.db import migrations


def seed_settings(apps, schema_editor):
    Setting = apps.get_model("assembly", "Setting")
    Setting.objects.get_or_create(
        key="checkout_enabled",
        defaults={"value": "true", "description": "Enable/disable checkout functionality"},
    )
    Setting.objects.get_or_create(
        key="system_maintenance",
        defaults={"value": "false", "description": "System maintenance mode"},
    )


class Migration(migrations.Migration):
    dependencies = [
        ("assembly", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(seed_settings, migrations.RunPython.noop),
    ]
