"""
Storeroom Service: The public interface for stock and requisitions.

Usage:
    from storeroom import stock, requisitions, StockError

    stock.adjust(7, central.pk, 100, 'add', unit_cost='2.50')
    stock.transfer(7, central.pk, hr_cabinet.pk, 10)
    stock.quantity(7)  # 100

    req = requisitions.create(alice, 3, 'Printer paper', [{'item_id': 7, 'quantity': 5}])
    requisitions.submit(req, alice)
    requisitions.approve(req, bob)  # fulfilled once every level has approved
"""

from storeroom.services.movements import StockMovements
from storeroom.services.queries import StockQueries
from storeroom.services.requisitions import RequisitionQueries, RequisitionWorkflow


class Stock(StockQueries, StockMovements):
    """
    Single interface for stock records.

    IMPORTANT: All state-changing methods run in one transaction with the
    affected records locked. See each method's docstring.
    """


class Requisitions(RequisitionQueries, RequisitionWorkflow):
    """Single interface for the requisition workflow."""
