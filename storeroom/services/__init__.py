"""
Storeroom services: modular organization of stock and requisition operations.

    from storeroom.services import StockQueries, StockMovements
    from storeroom.services import RequisitionQueries, RequisitionWorkflow
"""

from storeroom.services.movements import StockMovements
from storeroom.services.queries import LowStockItem, StockQueries
from storeroom.services.requisitions import RequisitionQueries, RequisitionWorkflow

__all__ = [
    'StockQueries',
    'StockMovements',
    'LowStockItem',
    'RequisitionQueries',
    'RequisitionWorkflow',
]
