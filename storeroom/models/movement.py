"""
StockMovement model: Immutable audit ledger of quantity changes.
"""

from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from storeroom.models.enums import MovementKind


class StockMovement(models.Model):
    """
    Immutable record of one quantity change on one StockRecord.

    Rules:
    - NEVER update() or delete()
    - Corrections are new adjustments
    - delta = resulting_quantity - previous quantity
    """

    record = models.ForeignKey(
        'storeroom.StockRecord',
        on_delete=models.PROTECT,
        related_name='movements',
        verbose_name=_('Stock record'),
    )

    # Denormalised key, for audit queries without joins
    item_id = models.PositiveIntegerField(db_index=True, verbose_name=_('Item'))
    location = models.ForeignKey(
        'storeroom.Location',
        on_delete=models.PROTECT,
        related_name='+',
        verbose_name=_('Location'),
    )

    kind = models.CharField(
        max_length=20,
        choices=MovementKind.choices,
        verbose_name=_('Kind'),
    )
    delta = models.IntegerField(
        verbose_name=_('Delta'),
        help_text=_('Positive = in, negative = out'),
    )
    resulting_quantity = models.PositiveIntegerField(
        verbose_name=_('Resulting quantity'),
    )
    unit_cost = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        verbose_name=_('Unit cost'),
    )

    reason = models.CharField(max_length=255, blank=True, verbose_name=_('Reason'))
    reference = models.CharField(
        max_length=64,
        blank=True,
        db_index=True,
        verbose_name=_('Reference'),
        help_text=_('Requisition number or transfer id'),
    )
    metadata = models.JSONField(default=dict, blank=True, verbose_name=_('Metadata'))

    timestamp = models.DateTimeField(default=timezone.now, db_index=True, verbose_name=_('Timestamp'))
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('User'),
    )

    class Meta:
        verbose_name = _('Stock movement')
        verbose_name_plural = _('Stock movements')
        ordering = ['timestamp', 'id']
        indexes = [
            models.Index(fields=['record', 'timestamp'], name='storeroom_move_record_ts_idx'),
            models.Index(fields=['item_id', 'location'], name='storeroom_move_item_loc_idx'),
        ]

    def save(self, *args, **kwargs):
        if self.pk:
            raise ValueError(
                "Stock movements are immutable. "
                "Post a new adjustment to correct a quantity."
            )
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValueError("Stock movements are immutable and cannot be deleted.")

    def __str__(self) -> str:
        signal = '+' if self.delta > 0 else ''
        return f"{signal}{self.delta} -> {self.resulting_quantity} | {self.kind} {self.reason}".rstrip()
