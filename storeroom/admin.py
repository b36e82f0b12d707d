"""
Storeroom Admin.

Provides views for setup and production debugging:
- Location: list + edit
- StockRecord: read-only (item, location, quantity, cost, value)
- StockMovement: read-only audit trail
- Requisition: read-only with lines and event history
"""

from django.contrib import admin
from django.utils.translation import gettext_lazy as _

from storeroom.models import (
    Location,
    Requisition,
    RequisitionEvent,
    RequisitionItem,
    StockMovement,
    StockRecord,
)


class ReadOnlyAdminMixin:
    """Stock and requisitions only change through the storeroom services."""

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# =========================================================================
# LOCATION ADMIN
# =========================================================================

@admin.register(Location)
class LocationAdmin(admin.ModelAdmin):
    """Location admin: editable."""

    list_display = ['code', 'name', 'kind', 'department_id', 'is_default', 'is_active']
    list_filter = ['kind', 'is_default', 'is_active']
    search_fields = ['code', 'name']
    readonly_fields = ['created_at', 'updated_at']


# =========================================================================
# STOCK RECORD ADMIN (read-only)
# =========================================================================

@admin.register(StockRecord)
class StockRecordAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    """StockRecord admin: read-only. Quantities only change via the stock service."""

    list_display = ['item_id', 'location', 'quantity', 'unit_cost', 'total_value', 'updated_at']
    list_filter = ['location']
    search_fields = ['item_id']
    readonly_fields = ['item_id', 'location', 'quantity', 'unit_cost', 'total_value',
                       'ledger_display', 'created_at', 'updated_at']
    list_select_related = ['location']

    @admin.display(description=_('Ledger quantity'))
    def ledger_display(self, obj):
        return obj.ledger_quantity()


# =========================================================================
# MOVEMENT ADMIN (read-only audit trail)
# =========================================================================

@admin.register(StockMovement)
class StockMovementAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    """StockMovement admin: read-only. Immutable audit trail."""

    list_display = ['timestamp', 'item_id', 'location', 'kind', 'delta',
                    'resulting_quantity', 'reference', 'user']
    list_filter = ['kind', 'location', 'timestamp']
    search_fields = ['reference', 'reason', 'item_id']
    readonly_fields = ['record', 'item_id', 'location', 'kind', 'delta', 'resulting_quantity',
                       'unit_cost', 'reason', 'reference', 'metadata', 'timestamp', 'user']
    date_hierarchy = 'timestamp'
    list_select_related = ['location', 'user']


# =========================================================================
# REQUISITION ADMIN (read-only with lines and history)
# =========================================================================

class RequisitionItemInline(ReadOnlyAdminMixin, admin.TabularInline):
    model = RequisitionItem
    extra = 0
    fields = ['line_no', 'item_id', 'quantity', 'estimated_unit_cost', 'source_location']
    readonly_fields = fields


class RequisitionEventInline(ReadOnlyAdminMixin, admin.TabularInline):
    model = RequisitionEvent
    extra = 0
    fields = ['timestamp', 'action', 'from_status', 'to_status', 'level', 'actor', 'comment']
    readonly_fields = fields


@admin.register(Requisition)
class RequisitionAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    """Requisition admin: read-only. Transitions go through the workflow service."""

    list_display = ['requisition_no', 'department_id', 'requested_by', 'urgency',
                    'status', 'created_at', 'fulfilled_at']
    list_filter = ['status', 'urgency', 'department_id']
    search_fields = ['requisition_no', 'purpose']
    date_hierarchy = 'created_at'
    list_select_related = ['requested_by']
    inlines = [RequisitionItemInline, RequisitionEventInline]
    readonly_fields = [
        'requisition_no', 'department_id', 'requested_by', 'requested_for_type',
        'requested_for', 'purpose', 'urgency', 'comments', 'status',
        'approved_by_l1', 'approved_by_l1_at', 'approved_by_l2', 'approved_by_l2_at',
        'rejected_by', 'rejected_at', 'rejection_reason',
        'submitted_at', 'fulfilled_at', 'cancelled_at', 'created_at', 'updated_at',
        'total_display',
    ]

    @admin.display(description=_('Estimated total'))
    def total_display(self, obj):
        return obj.total_estimated_cost
