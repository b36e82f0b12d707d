"""
Django Storeroom: Inventory and requisition approval engine.

Usage:
    from storeroom import stock, requisitions, StockError

    stock.adjust(7, central.pk, 50, 'add')
    stock.quantity(7, central)  # 50
    requisitions.approve('REQ-2026-0001', approver)
"""


def __getattr__(name):
    """Lazy import to avoid circular imports during app loading."""
    if name == 'stock':
        from storeroom.service import Stock
        return Stock
    elif name == 'requisitions':
        from storeroom.service import Requisitions
        return Requisitions
    elif name == 'StockError':
        from storeroom.exceptions import StockError
        return StockError
    elif name == 'RequisitionError':
        from storeroom.exceptions import RequisitionError
        return RequisitionError
    elif name == 'Location':
        from storeroom.models.location import Location
        return Location
    elif name == 'StockRecord':
        from storeroom.models.record import StockRecord
        return StockRecord
    elif name == 'StockMovement':
        from storeroom.models.movement import StockMovement
        return StockMovement
    elif name == 'Requisition':
        from storeroom.models.requisition import Requisition
        return Requisition
    elif name == 'RequisitionStatus':
        from storeroom.models.enums import RequisitionStatus
        return RequisitionStatus
    elif name == 'AdjustmentType':
        from storeroom.models.enums import AdjustmentType
        return AdjustmentType
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    'stock',
    'requisitions',
    'StockError',
    'RequisitionError',
    'Location',
    'StockRecord',
    'StockMovement',
    'Requisition',
    'RequisitionStatus',
    'AdjustmentType',
]

__version__ = '0.1.0'
