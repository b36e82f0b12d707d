"""
Create the central warehouse, the default fulfillment location for
departments without a default of their own.
"""

from django.db import migrations


def create_central_location(apps, schema_editor):
    Location = apps.get_model('storeroom', 'Location')
    Location.objects.get_or_create(
        code='CENTRAL',
        defaults={
            'name': 'Central Store',
            'kind': 'warehouse',
            'department_id': None,
            'is_default': True,
        },
    )


def remove_central_location(apps, schema_editor):
    Location = apps.get_model('storeroom', 'Location')
    Location.objects.filter(code='CENTRAL', stock_records__isnull=True).delete()


class Migration(migrations.Migration):
    """Seed the CENTRAL warehouse."""

    dependencies = [
        ('storeroom', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(create_central_location, remove_central_location),
    ]
