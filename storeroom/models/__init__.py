"""
Storeroom Models.

Core models:
- Location: Where stock is kept
- StockRecord: Quantity/value of an item at a location
- StockMovement: Immutable ledger of quantity changes
- Requisition / RequisitionItem / RequisitionEvent: approval workflow
- DocumentSequence: requisition numbering
"""

from storeroom.models.enums import (
    AdjustmentType,
    LocationKind,
    MovementKind,
    RequestedForType,
    RequisitionAction,
    RequisitionStatus,
    Urgency,
)
from storeroom.models.location import Location
from storeroom.models.movement import StockMovement
from storeroom.models.record import StockRecord
from storeroom.models.requisition import Requisition, RequisitionEvent, RequisitionItem
from storeroom.models.sequence import DocumentSequence

__all__ = [
    'AdjustmentType',
    'LocationKind',
    'MovementKind',
    'RequestedForType',
    'RequisitionAction',
    'RequisitionStatus',
    'Urgency',
    'Location',
    'StockRecord',
    'StockMovement',
    'Requisition',
    'RequisitionItem',
    'RequisitionEvent',
    'DocumentSequence',
]
