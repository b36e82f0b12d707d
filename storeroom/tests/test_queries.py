"""
Tests for read-only stock and requisition queries.
"""

from decimal import Decimal

import pytest

from storeroom import requisitions, stock
from storeroom.models import RequisitionStatus
from storeroom.tests.catalog import PAPER, PENS, TONER


pytestmark = pytest.mark.django_db


class TestStockQueries:

    def test_quantity_total_and_per_location(self, central, dept_store):
        stock.adjust(PAPER, central.pk, 30, 'set')
        stock.adjust(PAPER, dept_store.pk, 12, 'set')

        assert stock.quantity(PAPER) == 42
        assert stock.quantity(PAPER, central) == 30
        assert stock.quantity(PAPER, dept_store.pk) == 12
        assert stock.quantity(PENS) == 0

    def test_get_record(self, central):
        assert stock.get_record(PAPER, central) is None

        stock.adjust(PAPER, central.pk, 3, 'add')
        assert stock.get_record(PAPER, central).quantity == 3

    def test_list_records_hides_empty(self, central, dept_store):
        stock.adjust(PAPER, central.pk, 5, 'set')
        stock.adjust(PENS, central.pk, 0, 'set')
        stock.adjust(PAPER, dept_store.pk, 1, 'set')

        assert stock.list_records().count() == 2
        assert stock.list_records(include_empty=True).count() == 3
        assert stock.list_records(item_id=PAPER, location=central).get().quantity == 5

    def test_low_stock(self, central, dept_store):
        stock.adjust(PAPER, central.pk, 6, 'set')      # reorder level 10
        stock.adjust(PAPER, dept_store.pk, 2, 'set')
        stock.adjust(PENS, central.pk, 5, 'set')       # reorder level 5: not below
        stock.adjust(TONER, central.pk, 0, 'set')      # no reorder level

        low = stock.low_stock()

        assert [entry.item.item_id for entry in low] == [PAPER]
        assert low[0].total_quantity == 8
        assert low[0].shortfall == 2

    def test_low_stock_orders_by_shortfall(self, central):
        stock.adjust(PAPER, central.pk, 9, 'set')      # short 1
        stock.adjust(PENS, central.pk, 0, 'set')       # short 5

        assert [entry.item.item_id for entry in stock.low_stock()] == [PENS, PAPER]

    def test_inventory_value(self, central, dept_store):
        assert stock.inventory_value() == Decimal('0.00')

        stock.adjust(PAPER, central.pk, 10, 'set', unit_cost='4.50')
        stock.adjust(PENS, dept_store.pk, 2, 'set', unit_cost='3.20')
        stock.adjust(TONER, central.pk, 4, 'set')

        assert stock.inventory_value() == Decimal('51.40')
        assert stock.inventory_value(central) == Decimal('45.00')

    def test_value_by_location(self, central, dept_store):
        stock.adjust(PAPER, central.pk, 10, 'set', unit_cost='4.50')

        values = {loc.code: (loc.record_count, loc.stock_value) for loc in stock.value_by_location()}
        assert values['CENTRAL'] == (1, Decimal('45.00'))
        assert values['HR-01'] == (0, Decimal('0.00'))

    def test_movements_by_reference(self, central, dept_store):
        stock.adjust(PAPER, central.pk, 10, 'set')
        stock.adjust(PAPER, central.pk, 1, 'remove', reference='REQ-2026-0099')
        stock.transfer(PAPER, central.pk, dept_store.pk, 2)

        assert stock.movements(reference='REQ-2026-0099').get().delta == -1
        assert stock.movements(item_id=PAPER, location=central).count() == 3
        assert stock.movements(location=dept_store).get().delta == 2


class TestRequisitionQueries:

    def test_get(self, make_requisition):
        req = make_requisition(submit=False)

        assert requisitions.get(req.requisition_no) == req

    def test_get_missing(self):
        from storeroom import RequisitionError

        with pytest.raises(RequisitionError) as exc:
            requisitions.get('REQ-1999-0404')

        assert exc.value.code == 'REQUISITION_NOT_FOUND'

    def test_list_filters(self, make_requisition, requester, outsider):
        draft = make_requisition(submit=False)
        pending = make_requisition()

        assert list(requisitions.list_requisitions(status=RequisitionStatus.DRAFT)) == [draft]
        assert set(requisitions.list_requisitions(requested_by=requester)) == {draft, pending}
        assert not requisitions.list_requisitions(requested_by=outsider).exists()
        assert requisitions.list_requisitions(department_id=3).count() == 2

    def test_awaiting_approval(self, two_levels, stocked, make_requisition, approver_l1, approver_l2, outsider):
        first = make_requisition()
        second = make_requisition()
        make_requisition(submit=False)
        requisitions.approve(second, approver_l1)

        assert requisitions.awaiting_approval(approver_l1) == [first]
        assert requisitions.awaiting_approval(approver_l2) == [second]
        assert requisitions.awaiting_approval(outsider) == []
