"""
Requisition models: request to withdraw items from stock.
"""

from decimal import Decimal

from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from storeroom.models.enums import (
    FROZEN_STATUSES,
    TERMINAL_STATUSES,
    RequestedForType,
    RequisitionAction,
    RequisitionStatus,
    Urgency,
)
from storeroom.models.record import CENTS


class Requisition(models.Model):
    """
    Staff request for stock, subject to approval before fulfillment.

    LIFECYCLE:

        draft ──submit──► pending ──approve (all levels)──► approved ──► fulfilled
          │                  │  │
          │ cancel           │  └──reject──► rejected
          ▼                  │
        cancelled ◄──cancel──┘

    Line items may only change while draft. From submit on they are the
    frozen copy that approvers saw, and the exact quantities fulfillment
    debits.
    """

    requisition_no = models.CharField(
        max_length=32,
        unique=True,
        verbose_name=_('Requisition number'),
    )
    department_id = models.PositiveIntegerField(
        db_index=True,
        verbose_name=_('Department'),
    )

    requested_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='storeroom_requisitions',
        verbose_name=_('Requested by'),
    )
    requested_for_type = models.CharField(
        max_length=20,
        choices=RequestedForType.choices,
        default=RequestedForType.DEPARTMENT,
        verbose_name=_('Requested for'),
    )
    requested_for = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Requested for user'),
        help_text=_('Required for personal requisitions'),
    )

    purpose = models.TextField(verbose_name=_('Purpose'))
    urgency = models.CharField(
        max_length=10,
        choices=Urgency.choices,
        default=Urgency.NORMAL,
        verbose_name=_('Urgency'),
    )
    comments = models.TextField(blank=True, default='', verbose_name=_('Comments'))

    status = models.CharField(
        max_length=20,
        choices=RequisitionStatus.choices,
        default=RequisitionStatus.DRAFT,
        db_index=True,
        verbose_name=_('Status'),
    )

    approved_by_l1 = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Level 1 approver'),
    )
    approved_by_l1_at = models.DateTimeField(null=True, blank=True)
    approved_by_l2 = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Level 2 approver'),
    )
    approved_by_l2_at = models.DateTimeField(null=True, blank=True)

    rejected_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Rejected by'),
    )
    rejected_at = models.DateTimeField(null=True, blank=True)
    rejection_reason = models.TextField(blank=True, default='', verbose_name=_('Rejection reason'))

    submitted_at = models.DateTimeField(null=True, blank=True)
    fulfilled_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _('Requisition')
        verbose_name_plural = _('Requisitions')
        ordering = ['-created_at', '-id']
        constraints = [
            models.CheckConstraint(
                condition=(
                    Q(requested_for_type=RequestedForType.PERSONAL, requested_for__isnull=False)
                    | Q(requested_for_type=RequestedForType.DEPARTMENT, requested_for__isnull=True)
                ),
                name='requisition_requested_for_matches_type',
            ),
        ]
        indexes = [
            models.Index(fields=['department_id', 'status'], name='storeroom_req_dept_status_idx'),
            models.Index(fields=['requested_by', 'status'], name='storeroom_req_user_status_idx'),
        ]
        permissions = [
            ('approve_requisition', _('Can approve or reject any requisition')),
        ]

    @property
    def is_terminal(self) -> bool:
        return RequisitionStatus(self.status) in TERMINAL_STATUSES

    @property
    def is_frozen(self) -> bool:
        """Line items are immutable once submitted."""
        return RequisitionStatus(self.status) in FROZEN_STATUSES

    @property
    def current_level(self) -> int:
        """Approval level the next approve() fills."""
        return 1 if self.approved_by_l1_id is None else 2

    @property
    def total_estimated_cost(self) -> Decimal:
        return sum((line.estimated_total for line in self.items.all()), Decimal('0.00'))

    def __str__(self) -> str:
        return f"{self.requisition_no} [{self.status}]"


class RequisitionItem(models.Model):
    """
    One line of a requisition.

    Editable only while the parent requisition is a draft.
    """

    requisition = models.ForeignKey(
        Requisition,
        on_delete=models.CASCADE,
        related_name='items',
        verbose_name=_('Requisition'),
    )
    line_no = models.PositiveSmallIntegerField(verbose_name=_('Line'))
    item_id = models.PositiveIntegerField(db_index=True, verbose_name=_('Item'))
    quantity = models.PositiveIntegerField(verbose_name=_('Quantity requested'))
    estimated_unit_cost = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        verbose_name=_('Estimated unit cost'),
        help_text=_('Snapshot taken at submit when not given'),
    )
    source_location = models.ForeignKey(
        'storeroom.Location',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Source location'),
        help_text=_("Empty = the department's default location"),
    )

    class Meta:
        verbose_name = _('Requisition item')
        verbose_name_plural = _('Requisition items')
        ordering = ['requisition', 'line_no']
        constraints = [
            models.UniqueConstraint(
                fields=['requisition', 'line_no'],
                name='unique_requisition_line',
            ),
            models.CheckConstraint(
                condition=Q(quantity__gt=0),
                name='requisition_item_quantity_positive',
            ),
        ]

    @property
    def estimated_total(self) -> Decimal:
        if self.estimated_unit_cost is None:
            return Decimal('0.00')
        return (self.estimated_unit_cost * self.quantity).quantize(CENTS)

    def _check_editable(self):
        status = Requisition.objects.filter(pk=self.requisition_id).values_list('status', flat=True).first()
        if status is not None and status != RequisitionStatus.DRAFT:
            raise ValueError(
                f"Line items of {self.requisition_id} are frozen (status={status})."
            )

    def save(self, *args, **kwargs):
        self._check_editable()
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        self._check_editable()
        return super().delete(*args, **kwargs)

    def __str__(self) -> str:
        return f"#{self.line_no} item {self.item_id} x{self.quantity}"


class RequisitionEvent(models.Model):
    """Append-only log of requisition transitions."""

    requisition = models.ForeignKey(
        Requisition,
        on_delete=models.CASCADE,
        related_name='events',
    )
    action = models.CharField(max_length=20, choices=RequisitionAction.choices)
    from_status = models.CharField(max_length=20, choices=RequisitionStatus.choices, blank=True)
    to_status = models.CharField(max_length=20, choices=RequisitionStatus.choices)
    level = models.PositiveSmallIntegerField(null=True, blank=True)
    actor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
    )
    comment = models.TextField(blank=True, default='')
    metadata = models.JSONField(default=dict, blank=True)
    timestamp = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        verbose_name = _('Requisition event')
        verbose_name_plural = _('Requisition events')
        ordering = ['timestamp', 'id']

    def save(self, *args, **kwargs):
        if self.pk:
            raise ValueError("Requisition events are immutable.")
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.action}: {self.from_status or '-'} -> {self.to_status}"
