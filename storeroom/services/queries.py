"""
Stock queries: read-only operations.

All methods are classmethod on Stock and use no locking.
"""

from dataclasses import dataclass
from decimal import Decimal

from django.db.models import Count, DecimalField, Sum
from django.db.models.functions import Coalesce

from storeroom.adapters import get_item_catalog
from storeroom.models.location import Location
from storeroom.models.movement import StockMovement
from storeroom.models.record import StockRecord
from storeroom.protocols.catalog import ItemInfo


@dataclass(frozen=True)
class LowStockItem:
    """An item whose total across locations is below its reorder level."""

    item: ItemInfo
    total_quantity: int

    @property
    def shortfall(self) -> int:
        return self.item.reorder_level - self.total_quantity


class StockQueries:
    """Read-only stock query methods."""

    @classmethod
    def get_record(cls, item_id: int, location) -> StockRecord | None:
        """Record for one key, or None when the key was never touched."""
        return StockRecord.objects.filter(item_id=item_id, location=location).first()

    @classmethod
    def quantity(cls, item_id: int, location=None) -> int:
        """
        On-hand quantity.

        Args:
            item_id: Catalog item id
            location: Location or id (None = total across all locations)
        """
        qs = StockRecord.objects.for_item(item_id)
        if location is not None:
            qs = qs.at_location(location)
        return qs.total_quantity()

    @classmethod
    def list_records(cls, item_id: int | None = None, location=None,
                     include_empty: bool = False):
        """List stock records with filters."""
        qs = StockRecord.objects.select_related('location')

        if item_id is not None:
            qs = qs.for_item(item_id)

        if location is not None:
            qs = qs.at_location(location)

        if not include_empty:
            qs = qs.non_empty()

        return qs

    @classmethod
    def totals_by_item(cls) -> dict[int, int]:
        """Quantity per item, summed over every location."""
        rows = StockRecord.objects.values('item_id').annotate(total=Sum('quantity'))
        return {row['item_id']: row['total'] or 0 for row in rows}

    @classmethod
    def low_stock(cls) -> list[LowStockItem]:
        """
        Items below their reorder level.

        Only items with a positive reorder level in the catalog are
        considered. Items never stocked anywhere have no records and are
        not reported.
        """
        totals = cls.totals_by_item()
        if not totals:
            return []

        items = get_item_catalog().get_items(sorted(totals))
        result = [
            LowStockItem(item=info, total_quantity=totals.get(item_id, 0))
            for item_id, info in items.items()
            if info.reorder_level > 0 and totals.get(item_id, 0) < info.reorder_level
        ]
        return sorted(result, key=lambda low: (-low.shortfall, low.item.item_id))

    @classmethod
    def inventory_value(cls, location=None) -> Decimal:
        """Sum of total_value (records without a unit cost count as 0)."""
        qs = StockRecord.objects.all()
        if location is not None:
            qs = qs.at_location(location)
        return qs.aggregate(
            t=Coalesce(Sum('total_value'), Decimal('0.00'), output_field=DecimalField(max_digits=16, decimal_places=2))
        )['t']

    @classmethod
    def value_by_location(cls):
        """Active locations annotated with record count and stock value."""
        return Location.objects.active().annotate(
            record_count=Count('stock_records'),
            stock_value=Coalesce(
                Sum('stock_records__total_value'),
                Decimal('0.00'),
                output_field=DecimalField(max_digits=16, decimal_places=2),
            ),
        )

    @classmethod
    def movements(cls, item_id: int | None = None, location=None, reference: str = ''):
        """Movement history, oldest first, filtered by key and/or reference."""
        qs = StockMovement.objects.select_related('location', 'user')

        if item_id is not None:
            qs = qs.filter(item_id=item_id)

        if location is not None:
            qs = qs.filter(location=location)

        if reference:
            qs = qs.filter(reference=reference)

        return qs
