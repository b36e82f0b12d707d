"""
Stock movements: the only writer of StockRecord.quantity (adjust, transfer).

Every method validates its input before opening a transaction, then runs
the read-modify-write inside locked_transaction() with select_for_update()
on each participating record. Multi-key operations lock in ascending
location id so two opposite transfers cannot deadlock.
"""

import logging
import uuid
from decimal import Decimal

from storeroom.adapters import get_item_catalog
from storeroom.conf import storeroom_settings
from storeroom.exceptions import StockError
from storeroom.models.enums import AdjustmentType, MovementKind
from storeroom.models.location import Location
from storeroom.models.movement import StockMovement
from storeroom.models.record import StockRecord, parse_money
from storeroom.services.locking import locked_transaction

logger = logging.getLogger('storeroom')


def _coerce_adjustment_type(value) -> AdjustmentType:
    try:
        return AdjustmentType(value)
    except ValueError:
        raise StockError('INVALID_ADJUSTMENT_TYPE', adjustment_type=str(value)) from None


def _validate_quantity(quantity, allow_zero: bool = False) -> int:
    """Quantities are plain integers: no bools, floats or strings."""
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise StockError('INVALID_QUANTITY', requested=quantity)
    if quantity < 0 or (quantity == 0 and not allow_zero):
        raise StockError('INVALID_QUANTITY', requested=quantity)
    return quantity


def _validate_unit_cost(unit_cost) -> Decimal | None:
    """Costs are stored in cents: sub-cent or oversized values are refused."""
    if unit_cost is None:
        return None
    value = parse_money(unit_cost)
    if value is None:
        raise StockError('INVALID_UNIT_COST', unit_cost=str(unit_cost))
    return value


def _validate_item(item_id) -> int:
    if isinstance(item_id, bool) or not isinstance(item_id, int) or item_id <= 0:
        raise StockError('ITEM_NOT_FOUND', item_id=item_id)
    if storeroom_settings.VALIDATE_ITEMS and get_item_catalog().get_item(item_id) is None:
        raise StockError('ITEM_NOT_FOUND', item_id=item_id)
    return item_id


def _get_location(location_id) -> Location:
    try:
        location = Location.objects.active().filter(pk=location_id).first() if location_id else None
    except (ValueError, TypeError):
        # pk lookups reject ids that cannot be cast to int
        location = None
    if location is None:
        raise StockError('LOCATION_NOT_FOUND', location_id=location_id)
    return location


def _lock_record(item_id: int, location: Location) -> tuple[StockRecord, bool]:
    """Upsert the record for the key and lock it. Caller is inside a transaction."""
    record, created = StockRecord.objects.get_or_create(item_id=item_id, location=location)
    locked = StockRecord.objects.select_for_update().get(pk=record.pk)
    return locked, created


def _write(record: StockRecord, new_quantity: int, kind: str, *, unit_cost=None,
           reason='', user=None, reference='', metadata=None) -> StockMovement:
    """Apply the new quantity to a locked record and append its movement."""
    delta = new_quantity - record.quantity
    record.apply(new_quantity, unit_cost)
    record.save(update_fields=['quantity', 'unit_cost', 'total_value', 'updated_at'])

    return StockMovement.objects.create(
        record=record,
        item_id=record.item_id,
        location_id=record.location_id,
        kind=kind,
        delta=delta,
        resulting_quantity=new_quantity,
        unit_cost=record.unit_cost,
        reason=reason or '',
        reference=reference or '',
        user=user if getattr(user, 'pk', None) else None,
        metadata=metadata or {},
    )


class StockMovements:
    """State-changing stock methods."""

    @classmethod
    def adjust(cls, item_id, location_id, quantity, adjustment_type,
               unit_cost=None, reason='', user=None, reference=''):
        """
        Single-location quantity change.

        - add: current + quantity
        - remove: current - quantity (never below zero)
        - set: quantity (absolute, 0 allowed)

        The record is created at quantity 0 when the key is new. When
        unit_cost is given it replaces the record's cost; total_value is
        recomputed either way.

        Returns:
            The updated StockRecord

        Raises:
            StockError('INVALID_ADJUSTMENT_TYPE'): type not add/remove/set
            StockError('INVALID_QUANTITY'): not an integer, negative, or 0 for add/remove
            StockError('INVALID_UNIT_COST'): negative or not a number
            StockError('ITEM_NOT_FOUND') / StockError('LOCATION_NOT_FOUND')
            StockError('INSUFFICIENT_STOCK'): remove exceeds current quantity
            StockError('CONTENTION'): lock timeout or deadlock, retry

        Concurrency:
            - Runs under locked_transaction()
            - Uses select_for_update() on the StockRecord
        """
        adjustment_type = _coerce_adjustment_type(adjustment_type)
        quantity = _validate_quantity(quantity, allow_zero=adjustment_type == AdjustmentType.SET)
        unit_cost = _validate_unit_cost(unit_cost)
        item_id = _validate_item(item_id)
        location = _get_location(location_id)

        with locked_transaction(item_id=item_id, location_id=location.pk):
            record, _ = _lock_record(item_id, location)
            current = record.quantity

            if adjustment_type == AdjustmentType.ADD:
                new_quantity = current + quantity
            elif adjustment_type == AdjustmentType.REMOVE:
                if current < quantity:
                    raise StockError(
                        'INSUFFICIENT_STOCK',
                        item_id=item_id,
                        location_id=location.pk,
                        available=current,
                        requested=quantity,
                    )
                new_quantity = current - quantity
            else:
                new_quantity = quantity

            movement = _write(
                record,
                new_quantity,
                MovementKind(adjustment_type.value),
                unit_cost=unit_cost,
                reason=reason,
                user=user,
                reference=reference,
            )

        logger.info(
            "stock.adjust",
            extra={
                "item_id": item_id,
                "location_id": location.pk,
                "adjustment_type": adjustment_type.value,
                "delta": movement.delta,
                "quantity": new_quantity,
                "reason": reason,
                "reference": reference,
            },
        )
        return record

    @classmethod
    def transfer(cls, item_id, from_location_id, to_location_id, quantity,
                 reason='', user=None, reference=''):
        """
        Move quantity between two locations, all or nothing.

        Total quantity of the item across locations is unchanged. Unit costs
        of existing records are left alone; a destination record created by
        the transfer starts with the source's unit cost.

        Returns:
            (source StockRecord, destination StockRecord)

        Raises:
            StockError('INVALID_TRANSFER'): source == destination
            StockError('INVALID_QUANTITY'): not a positive integer
            StockError('ITEM_NOT_FOUND') / StockError('LOCATION_NOT_FOUND')
            StockError('INSUFFICIENT_STOCK'): source holds less than quantity
            StockError('CONTENTION'): lock timeout or deadlock, retry

        Concurrency:
            - Runs under locked_transaction()
            - Locks both records in ascending location id
        """
        if from_location_id == to_location_id:
            raise StockError(
                'INVALID_TRANSFER',
                from_location_id=from_location_id,
                to_location_id=to_location_id,
            )
        quantity = _validate_quantity(quantity)
        item_id = _validate_item(item_id)
        source = _get_location(from_location_id)
        destination = _get_location(to_location_id)
        if source.pk == destination.pk:
            raise StockError(
                'INVALID_TRANSFER',
                from_location_id=source.pk,
                to_location_id=destination.pk,
            )
        reference = reference or f"transfer:{uuid.uuid4().hex[:12]}"

        with locked_transaction(item_id=item_id, location_id=source.pk):
            locked = {}
            for location in sorted((source, destination), key=lambda loc: loc.pk):
                locked[location.pk] = _lock_record(item_id, location)

            src, _ = locked[source.pk]
            dst, dst_created = locked[destination.pk]

            if src.quantity < quantity:
                raise StockError(
                    'INSUFFICIENT_STOCK',
                    item_id=item_id,
                    location_id=source.pk,
                    available=src.quantity,
                    requested=quantity,
                )

            _write(
                src,
                src.quantity - quantity,
                MovementKind.TRANSFER_OUT,
                reason=reason,
                user=user,
                reference=reference,
                metadata={'to_location_id': destination.pk},
            )
            _write(
                dst,
                dst.quantity + quantity,
                MovementKind.TRANSFER_IN,
                unit_cost=src.unit_cost if dst_created and dst.unit_cost is None else None,
                reason=reason,
                user=user,
                reference=reference,
                metadata={'from_location_id': source.pk},
            )

        logger.info(
            "stock.transfer",
            extra={
                "item_id": item_id,
                "from_location_id": source.pk,
                "to_location_id": destination.pk,
                "qty": quantity,
                "reference": reference,
            },
        )
        return src, dst
