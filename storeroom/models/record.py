"""
StockRecord model: Quantity of one item at one location.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from django.db import models
from django.db.models import Q, Sum
from django.db.models.functions import Coalesce
from django.utils.translation import gettext_lazy as _


CENTS = Decimal('0.01')
# Cost columns are max_digits=12, decimal_places=2
MAX_MONEY = Decimal('10000000000')


def compute_total_value(quantity: int, unit_cost: Decimal | None) -> Decimal | None:
    """quantity * unit_cost rounded to cents, None when the cost is unknown."""
    if unit_cost is None:
        return None
    return (Decimal(quantity) * unit_cost).quantize(CENTS, rounding=ROUND_HALF_UP)


def parse_money(value) -> Decimal | None:
    """
    Non-negative amount that fits a cost column exactly, or None.

    Sub-cent amounts are refused rather than rounded, so the stored cost
    is always the one the caller gave.
    """
    if isinstance(value, bool):
        return None
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    if not amount.is_finite() or amount < 0 or amount >= MAX_MONEY:
        return None
    if amount != amount.quantize(CENTS):
        return None
    return amount.quantize(CENTS)


class StockRecordQuerySet(models.QuerySet):

    def for_item(self, item_id):
        return self.filter(item_id=item_id)

    def at_location(self, location):
        return self.filter(location=location)

    def non_empty(self):
        return self.filter(quantity__gt=0)

    def total_quantity(self) -> int:
        return self.aggregate(t=Coalesce(Sum('quantity'), 0, output_field=models.IntegerField()))['t']


class StockRecord(models.Model):
    """
    Quantity, unit cost and value of an item at a location.

    Key: (item_id, location). Created with quantity 0 the first time a
    mutation touches the key; never deleted, only driven to zero.

    IMPORTANT: quantity is written exclusively by StockMovements
    (storeroom.services.movements), under a row lock. Every write appends a
    StockMovement, so the ledger sum always equals quantity.
    """

    item_id = models.PositiveIntegerField(
        db_index=True,
        verbose_name=_('Item'),
    )
    location = models.ForeignKey(
        'storeroom.Location',
        on_delete=models.PROTECT,
        related_name='stock_records',
        verbose_name=_('Location'),
    )

    quantity = models.PositiveIntegerField(
        default=0,
        verbose_name=_('Quantity'),
    )
    unit_cost = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        verbose_name=_('Unit cost'),
    )
    total_value = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        null=True,
        blank=True,
        verbose_name=_('Total value'),
        help_text=_('quantity x unit cost, recomputed on every mutation'),
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = StockRecordQuerySet.as_manager()

    class Meta:
        verbose_name = _('Stock record')
        verbose_name_plural = _('Stock records')
        ordering = ['item_id', 'location_id']
        constraints = [
            models.UniqueConstraint(
                fields=['item_id', 'location'],
                name='unique_stock_record_key',
            ),
            models.CheckConstraint(
                condition=Q(quantity__gte=0),
                name='stock_record_quantity_non_negative',
            ),
            models.CheckConstraint(
                condition=Q(unit_cost__isnull=True) | Q(unit_cost__gte=0),
                name='stock_record_unit_cost_non_negative',
            ),
        ]
        permissions = [
            ('adjust_stock', _('Can adjust stock quantities')),
            ('transfer_stock', _('Can transfer stock between locations')),
        ]

    @property
    def key(self) -> tuple[int, int]:
        return (self.item_id, self.location_id)

    def apply(self, quantity: int, unit_cost: Decimal | None = None) -> None:
        """
        Set quantity (and optionally unit cost) and recompute total value.

        Caller must hold the row lock and save afterwards.
        """
        if unit_cost is not None:
            self.unit_cost = unit_cost
        self.quantity = quantity
        self.total_value = compute_total_value(quantity, self.unit_cost)

    def ledger_quantity(self) -> int:
        """Quantity according to the movement ledger (sum of deltas)."""
        return self.movements.aggregate(t=Coalesce(Sum('delta'), 0, output_field=models.IntegerField()))['t']

    def __str__(self) -> str:
        return f"item {self.item_id} @ {self.location.code}: {self.quantity}"
