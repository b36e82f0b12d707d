"""
Initial migration for Storeroom models.
"""

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    """Create Storeroom models: Location, StockRecord, StockMovement, Requisition*, DocumentSequence."""

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Location',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('code', models.CharField(help_text='Unique identifier, stored upper-case (e.g. CENTRAL, HR-01)', max_length=50, unique=True, verbose_name='Code')),
                ('name', models.CharField(max_length=100, verbose_name='Name')),
                ('kind', models.CharField(choices=[('warehouse', 'Warehouse'), ('department', 'Department store'), ('storage', 'Storage room')], default='warehouse', max_length=20, verbose_name='Kind')),
                ('department_id', models.PositiveIntegerField(blank=True, db_index=True, help_text='Owning department. Empty = shared by everyone.', null=True, verbose_name='Department')),
                ('is_default', models.BooleanField(default=False, help_text='Fulfills requisitions of its department (or of everyone, when no department).', verbose_name='Default location')),
                ('is_active', models.BooleanField(default=True, verbose_name='Active')),
                ('metadata', models.JSONField(blank=True, default=dict, verbose_name='Metadata')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Location',
                'verbose_name_plural': 'Locations',
                'ordering': ['code'],
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(('is_default', True)), fields=('department_id',), name='unique_default_location_per_department'),
                    models.UniqueConstraint(condition=models.Q(('department_id__isnull', True), ('is_default', True)), fields=('is_default',), name='unique_global_default_location'),
                ],
            },
        ),
        migrations.CreateModel(
            name='StockRecord',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('item_id', models.PositiveIntegerField(db_index=True, verbose_name='Item')),
                ('quantity', models.PositiveIntegerField(default=0, verbose_name='Quantity')),
                ('unit_cost', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True, verbose_name='Unit cost')),
                ('total_value', models.DecimalField(blank=True, decimal_places=2, help_text='quantity x unit cost, recomputed on every mutation', max_digits=14, null=True, verbose_name='Total value')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('location', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='stock_records', to='storeroom.location', verbose_name='Location')),
            ],
            options={
                'verbose_name': 'Stock record',
                'verbose_name_plural': 'Stock records',
                'ordering': ['item_id', 'location_id'],
                'permissions': [
                    ('adjust_stock', 'Can adjust stock quantities'),
                    ('transfer_stock', 'Can transfer stock between locations'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('item_id', 'location'), name='unique_stock_record_key'),
                    models.CheckConstraint(condition=models.Q(('quantity__gte', 0)), name='stock_record_quantity_non_negative'),
                    models.CheckConstraint(condition=models.Q(('unit_cost__isnull', True), ('unit_cost__gte', 0), _connector='OR'), name='stock_record_unit_cost_non_negative'),
                ],
            },
        ),
        migrations.CreateModel(
            name='StockMovement',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('item_id', models.PositiveIntegerField(db_index=True, verbose_name='Item')),
                ('kind', models.CharField(choices=[('add', 'Add'), ('remove', 'Remove'), ('set', 'Set'), ('transfer_out', 'Transfer out'), ('transfer_in', 'Transfer in')], max_length=20, verbose_name='Kind')),
                ('delta', models.IntegerField(help_text='Positive = in, negative = out', verbose_name='Delta')),
                ('resulting_quantity', models.PositiveIntegerField(verbose_name='Resulting quantity')),
                ('unit_cost', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True, verbose_name='Unit cost')),
                ('reason', models.CharField(blank=True, max_length=255, verbose_name='Reason')),
                ('reference', models.CharField(blank=True, db_index=True, help_text='Requisition number or transfer id', max_length=64, verbose_name='Reference')),
                ('metadata', models.JSONField(blank=True, default=dict, verbose_name='Metadata')),
                ('timestamp', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='Timestamp')),
                ('location', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='+', to='storeroom.location', verbose_name='Location')),
                ('record', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='movements', to='storeroom.stockrecord', verbose_name='Stock record')),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='User')),
            ],
            options={
                'verbose_name': 'Stock movement',
                'verbose_name_plural': 'Stock movements',
                'ordering': ['timestamp', 'id'],
                'indexes': [
                    models.Index(fields=['record', 'timestamp'], name='storeroom_move_record_ts_idx'),
                    models.Index(fields=['item_id', 'location'], name='storeroom_move_item_loc_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='DocumentSequence',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('prefix', models.CharField(max_length=10, verbose_name='Prefix')),
                ('year', models.PositiveSmallIntegerField(verbose_name='Year')),
                ('last_number', models.PositiveIntegerField(default=0, verbose_name='Last number')),
            ],
            options={
                'verbose_name': 'Document sequence',
                'verbose_name_plural': 'Document sequences',
                'constraints': [
                    models.UniqueConstraint(fields=('prefix', 'year'), name='unique_document_sequence'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Requisition',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('requisition_no', models.CharField(max_length=32, unique=True, verbose_name='Requisition number')),
                ('department_id', models.PositiveIntegerField(db_index=True, verbose_name='Department')),
                ('requested_for_type', models.CharField(choices=[('department', 'Department'), ('personal', 'Personal')], default='department', max_length=20, verbose_name='Requested for')),
                ('purpose', models.TextField(verbose_name='Purpose')),
                ('urgency', models.CharField(choices=[('low', 'Low'), ('normal', 'Normal'), ('high', 'High'), ('urgent', 'Urgent')], default='normal', max_length=10, verbose_name='Urgency')),
                ('comments', models.TextField(blank=True, default='', verbose_name='Comments')),
                ('status', models.CharField(choices=[('draft', 'Draft'), ('pending', 'Pending approval'), ('approved', 'Approved'), ('rejected', 'Rejected'), ('fulfilled', 'Fulfilled'), ('cancelled', 'Cancelled')], db_index=True, default='draft', max_length=20, verbose_name='Status')),
                ('approved_by_l1_at', models.DateTimeField(blank=True, null=True)),
                ('approved_by_l2_at', models.DateTimeField(blank=True, null=True)),
                ('rejected_at', models.DateTimeField(blank=True, null=True)),
                ('rejection_reason', models.TextField(blank=True, default='', verbose_name='Rejection reason')),
                ('submitted_at', models.DateTimeField(blank=True, null=True)),
                ('fulfilled_at', models.DateTimeField(blank=True, null=True)),
                ('cancelled_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('requested_by', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='storeroom_requisitions', to=settings.AUTH_USER_MODEL, verbose_name='Requested by')),
                ('requested_for', models.ForeignKey(blank=True, help_text='Required for personal requisitions', null=True, on_delete=django.db.models.deletion.PROTECT, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='Requested for user')),
                ('approved_by_l1', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='Level 1 approver')),
                ('approved_by_l2', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='Level 2 approver')),
                ('rejected_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='Rejected by')),
            ],
            options={
                'verbose_name': 'Requisition',
                'verbose_name_plural': 'Requisitions',
                'ordering': ['-created_at', '-id'],
                'permissions': [
                    ('approve_requisition', 'Can approve or reject any requisition'),
                ],
                'indexes': [
                    models.Index(fields=['department_id', 'status'], name='storeroom_req_dept_status_idx'),
                    models.Index(fields=['requested_by', 'status'], name='storeroom_req_user_status_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(('requested_for__isnull', False), ('requested_for_type', 'personal')),
                            models.Q(('requested_for__isnull', True), ('requested_for_type', 'department')),
                            _connector='OR',
                        ),
                        name='requisition_requested_for_matches_type',
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name='RequisitionItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('line_no', models.PositiveSmallIntegerField(verbose_name='Line')),
                ('item_id', models.PositiveIntegerField(db_index=True, verbose_name='Item')),
                ('quantity', models.PositiveIntegerField(verbose_name='Quantity requested')),
                ('estimated_unit_cost', models.DecimalField(blank=True, decimal_places=2, help_text='Snapshot taken at submit when not given', max_digits=12, null=True, verbose_name='Estimated unit cost')),
                ('requisition', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='storeroom.requisition', verbose_name='Requisition')),
                ('source_location', models.ForeignKey(blank=True, help_text="Empty = the department's default location", null=True, on_delete=django.db.models.deletion.PROTECT, related_name='+', to='storeroom.location', verbose_name='Source location')),
            ],
            options={
                'verbose_name': 'Requisition item',
                'verbose_name_plural': 'Requisition items',
                'ordering': ['requisition', 'line_no'],
                'constraints': [
                    models.UniqueConstraint(fields=('requisition', 'line_no'), name='unique_requisition_line'),
                    models.CheckConstraint(condition=models.Q(('quantity__gt', 0)), name='requisition_item_quantity_positive'),
                ],
            },
        ),
        migrations.CreateModel(
            name='RequisitionEvent',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('action', models.CharField(choices=[('created', 'Created'), ('updated', 'Updated'), ('submitted', 'Submitted'), ('approved', 'Approved'), ('fulfilled', 'Fulfilled'), ('rejected', 'Rejected'), ('cancelled', 'Cancelled')], max_length=20)),
                ('from_status', models.CharField(blank=True, choices=[('draft', 'Draft'), ('pending', 'Pending approval'), ('approved', 'Approved'), ('rejected', 'Rejected'), ('fulfilled', 'Fulfilled'), ('cancelled', 'Cancelled')], max_length=20)),
                ('to_status', models.CharField(choices=[('draft', 'Draft'), ('pending', 'Pending approval'), ('approved', 'Approved'), ('rejected', 'Rejected'), ('fulfilled', 'Fulfilled'), ('cancelled', 'Cancelled')], max_length=20)),
                ('level', models.PositiveSmallIntegerField(blank=True, null=True)),
                ('comment', models.TextField(blank=True, default='')),
                ('metadata', models.JSONField(blank=True, default=dict)),
                ('timestamp', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('actor', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('requisition', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='events', to='storeroom.requisition')),
            ],
            options={
                'verbose_name': 'Requisition event',
                'verbose_name_plural': 'Requisition events',
                'ordering': ['timestamp', 'id'],
            },
        ),
    ]
