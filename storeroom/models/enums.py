"""
Enums for Storeroom models.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class LocationKind(models.TextChoices):
    """
    Type of storage location.

    WAREHOUSE:  Central store, usually the organisation-wide default.
    DEPARTMENT: Sub-store owned by a department.
    STORAGE:    Plain storage room (overflow, archive).
    """
    WAREHOUSE = 'warehouse', _('Warehouse')
    DEPARTMENT = 'department', _('Department store')
    STORAGE = 'storage', _('Storage room')


class AdjustmentType(models.TextChoices):
    """Adjustment semantics, mutually exclusive."""
    ADD = 'add', _('Add')          # current + quantity
    REMOVE = 'remove', _('Remove')  # current - quantity, never below zero
    SET = 'set', _('Set')          # absolute quantity


class MovementKind(models.TextChoices):
    """What produced a StockMovement."""
    ADD = 'add', _('Add')
    REMOVE = 'remove', _('Remove')
    SET = 'set', _('Set')
    TRANSFER_OUT = 'transfer_out', _('Transfer out')
    TRANSFER_IN = 'transfer_in', _('Transfer in')


class RequestedForType(models.TextChoices):
    DEPARTMENT = 'department', _('Department')
    PERSONAL = 'personal', _('Personal')


class Urgency(models.TextChoices):
    LOW = 'low', _('Low')
    NORMAL = 'normal', _('Normal')
    HIGH = 'high', _('High')
    URGENT = 'urgent', _('Urgent')


class RequisitionStatus(models.TextChoices):
    """
    Requisition lifecycle status.

    APPROVED is only ever visible inside the approval transaction: the
    engine fulfills immediately, so a committed requisition is either
    still PENDING or already FULFILLED.
    """
    DRAFT = 'draft', _('Draft')
    PENDING = 'pending', _('Pending approval')
    APPROVED = 'approved', _('Approved')
    REJECTED = 'rejected', _('Rejected')
    FULFILLED = 'fulfilled', _('Fulfilled')
    CANCELLED = 'cancelled', _('Cancelled')


class RequisitionAction(models.TextChoices):
    """Entries of the requisition event log."""
    CREATED = 'created', _('Created')
    UPDATED = 'updated', _('Updated')
    SUBMITTED = 'submitted', _('Submitted')
    APPROVED = 'approved', _('Approved')
    FULFILLED = 'fulfilled', _('Fulfilled')
    REJECTED = 'rejected', _('Rejected')
    CANCELLED = 'cancelled', _('Cancelled')


TERMINAL_STATUSES = frozenset({
    RequisitionStatus.FULFILLED,
    RequisitionStatus.REJECTED,
    RequisitionStatus.CANCELLED,
})

FROZEN_STATUSES = frozenset({
    RequisitionStatus.PENDING,
    RequisitionStatus.APPROVED,
    RequisitionStatus.FULFILLED,
})

# Allowed status transitions. Anything not listed is INVALID_STATE.
TRANSITIONS = {
    RequisitionStatus.DRAFT: frozenset({RequisitionStatus.PENDING, RequisitionStatus.CANCELLED}),
    RequisitionStatus.PENDING: frozenset({
        RequisitionStatus.APPROVED,
        RequisitionStatus.REJECTED,
        RequisitionStatus.CANCELLED,
    }),
    RequisitionStatus.APPROVED: frozenset({RequisitionStatus.FULFILLED, RequisitionStatus.CANCELLED}),
    RequisitionStatus.REJECTED: frozenset(),
    RequisitionStatus.FULFILLED: frozenset(),
    RequisitionStatus.CANCELLED: frozenset(),
}
