"""
Tests for the REST API.
"""

import pytest
from django.urls import reverse

from storeroom import stock
from storeroom.models import Requisition, RequisitionStatus
from storeroom.tests.catalog import DEPT, PAPER, PENS


pytestmark = pytest.mark.django_db


def url(name, *args):
    return reverse(f'storeroom:{name}', args=args)


class TestStockEndpoints:

    def test_requires_authentication(self, api_client):
        response = api_client.get(url('stock_list'))
        assert response.status_code == 403

    def test_adjust(self, api_client, clerk, central):
        api_client.force_authenticate(clerk)

        response = api_client.post(url('stock_adjust'), {
            'item_id': PAPER,
            'location_id': central.pk,
            'quantity': 10,
            'adjustment_type': 'add',
            'unit_cost': '4.50',
        }, format='json')

        assert response.status_code == 200
        assert response.data['quantity'] == 10
        assert response.data['unit_cost'] == '4.50'
        assert response.data['total_value'] == '45.00'
        assert response.data['location_code'] == 'CENTRAL'

    def test_adjust_requires_permission(self, api_client, requester, central):
        api_client.force_authenticate(requester)

        response = api_client.post(url('stock_adjust'), {
            'item_id': PAPER, 'location_id': central.pk, 'quantity': 1, 'adjustment_type': 'add',
        }, format='json')

        assert response.status_code == 403
        assert stock.quantity(PAPER) == 0

    def test_adjust_invalid_type(self, api_client, clerk, central):
        api_client.force_authenticate(clerk)

        response = api_client.post(url('stock_adjust'), {
            'item_id': PAPER, 'location_id': central.pk, 'quantity': 1, 'adjustment_type': 'grow',
        }, format='json')

        assert response.status_code == 400
        assert response.data['code'] == 'INVALID_ADJUSTMENT_TYPE'
        assert response.data['kind'] == 'validation'

    def test_adjust_insufficient(self, api_client, clerk, central):
        stock.adjust(PAPER, central.pk, 3, 'set')
        api_client.force_authenticate(clerk)

        response = api_client.post(url('stock_adjust'), {
            'item_id': PAPER, 'location_id': central.pk, 'quantity': 5, 'adjustment_type': 'remove',
        }, format='json')

        assert response.status_code == 409
        assert response.data['code'] == 'INSUFFICIENT_STOCK'
        assert response.data['data']['available'] == 3
        assert stock.quantity(PAPER) == 3

    def test_adjust_malformed_body(self, api_client, clerk, central):
        api_client.force_authenticate(clerk)

        response = api_client.post(url('stock_adjust'), {
            'item_id': PAPER, 'location_id': central.pk, 'quantity': 'lots', 'adjustment_type': 'add',
        }, format='json')

        assert response.status_code == 400
        assert 'quantity' in response.data
        assert 'code' not in response.data

    def test_transfer(self, api_client, clerk, central, dept_store):
        stock.adjust(PAPER, central.pk, 40, 'set')
        api_client.force_authenticate(clerk)

        response = api_client.post(url('stock_transfer'), {
            'item_id': PAPER,
            'from_location_id': central.pk,
            'to_location_id': dept_store.pk,
            'quantity': 20,
        }, format='json')

        assert response.status_code == 200
        assert response.data['source']['quantity'] == 20
        assert response.data['destination']['quantity'] == 20

    def test_transfer_same_location(self, api_client, clerk, central):
        api_client.force_authenticate(clerk)

        response = api_client.post(url('stock_transfer'), {
            'item_id': PAPER, 'from_location_id': central.pk, 'to_location_id': central.pk, 'quantity': 1,
        }, format='json')

        assert response.status_code == 400
        assert response.data['code'] == 'INVALID_TRANSFER'

    def test_list_and_reads(self, api_client, requester, central, dept_store):
        stock.adjust(PAPER, central.pk, 4, 'set')
        stock.adjust(PAPER, dept_store.pk, 2, 'set')
        api_client.force_authenticate(requester)

        records = api_client.get(url('stock_list'), {'item_id': PAPER}).data
        assert sorted(r['quantity'] for r in records) == [2, 4]

        assert api_client.get(url('stock_item_total', PAPER)).data == {'item_id': PAPER, 'quantity': 6}

        low = api_client.get(url('stock_low')).data
        assert low[0]['code'] == 'PAPER-A4'
        assert low[0]['shortfall'] == 4

        movements = api_client.get(url('stock_movements'), {'location_id': central.pk}).data
        assert [m['delta'] for m in movements] == [4]

        locations = {loc['code'] for loc in api_client.get(url('location_list')).data}
        assert {'CENTRAL', 'HR-01'} <= locations

    def test_bad_query_param(self, api_client, requester):
        api_client.force_authenticate(requester)

        response = api_client.get(url('stock_list'), {'item_id': 'seven'})
        assert response.status_code == 400


class TestRequisitionEndpoints:

    @pytest.fixture
    def created(self, api_client, requester):
        api_client.force_authenticate(requester)
        response = api_client.post(url('requisition_list'), {
            'department_id': DEPT,
            'purpose': 'Office supplies',
            'items': [
                {'item_id': PAPER, 'quantity': 5},
                {'item_id': PENS, 'quantity': 3},
            ],
        }, format='json')
        assert response.status_code == 201
        return response.data

    def test_create(self, created, requester):
        assert created['status'] == 'draft'
        assert created['requested_by'] == requester.pk
        assert created['requested_by_username'] == 'alice'
        assert created['urgency'] == 'normal'
        assert [line['quantity'] for line in created['items']] == [5, 3]

    def test_create_empty(self, api_client, requester):
        api_client.force_authenticate(requester)

        response = api_client.post(url('requisition_list'), {
            'department_id': DEPT, 'purpose': 'Nothing', 'items': [],
        }, format='json')

        assert response.status_code == 400
        assert response.data['code'] == 'EMPTY_REQUISITION'

    def test_create_personal(self, api_client, requester, outsider):
        api_client.force_authenticate(requester)

        response = api_client.post(url('requisition_list'), {
            'department_id': DEPT,
            'purpose': 'Headset',
            'requested_for_type': 'personal',
            'requested_for_id': outsider.pk,
            'items': [{'item_id': PENS, 'quantity': 1}],
        }, format='json')

        assert response.status_code == 201
        assert response.data['requested_for'] == outsider.pk

    def test_edit_draft(self, api_client, created):
        response = api_client.patch(url('requisition_detail', created['requisition_no']), {
            'urgency': 'high',
            'items': [{'item_id': PENS, 'quantity': 2}],
        }, format='json')

        assert response.status_code == 200
        assert response.data['urgency'] == 'high'
        assert [(line['item_id'], line['quantity']) for line in response.data['items']] == [(PENS, 2)]

    def test_full_workflow(self, api_client, created, single_level, stocked, approver_l1):
        number = created['requisition_no']

        response = api_client.post(url('requisition_submit', number))
        assert response.status_code == 200
        assert response.data['status'] == 'pending'

        api_client.force_authenticate(approver_l1)
        awaiting = api_client.get(url('requisition_list'), {'awaiting': '1'}).data
        assert [r['requisition_no'] for r in awaiting] == [number]

        response = api_client.post(url('requisition_approve', number), {'comment': 'Fine'}, format='json')
        assert response.status_code == 200
        assert response.data['status'] == 'fulfilled'
        assert stock.quantity(PAPER, stocked) == 35

        history = api_client.get(url('requisition_history', number)).data
        assert [event['action'] for event in history] == ['created', 'submitted', 'approved', 'fulfilled']

        response = api_client.post(url('requisition_approve', number))
        assert response.status_code == 409
        assert response.data['code'] == 'INVALID_STATE'

    def test_approve_insufficient(self, api_client, created, single_level, dept_store, approver_l1):
        number = created['requisition_no']
        api_client.post(url('requisition_submit', number))
        stock.adjust(PAPER, dept_store.pk, 40, 'set')
        stock.adjust(PENS, dept_store.pk, 2, 'set')

        api_client.force_authenticate(approver_l1)
        response = api_client.post(url('requisition_approve', number))

        assert response.status_code == 409
        assert response.data['code'] == 'INSUFFICIENT_STOCK'
        assert response.data['data']['item_id'] == PENS
        assert response.data['data']['line_no'] == 2
        assert Requisition.objects.get(requisition_no=number).status == RequisitionStatus.PENDING
        assert stock.quantity(PAPER, dept_store) == 40

    def test_approve_unauthorized(self, api_client, created, single_level, outsider):
        number = created['requisition_no']
        api_client.post(url('requisition_submit', number))

        api_client.force_authenticate(outsider)
        response = api_client.post(url('requisition_approve', number))

        assert response.status_code == 403
        assert response.data['code'] == 'UNAUTHORIZED'

    def test_reject(self, api_client, created, single_level, approver_l1):
        number = created['requisition_no']
        api_client.post(url('requisition_submit', number))

        api_client.force_authenticate(approver_l1)
        response = api_client.post(url('requisition_reject', number), {'reason': 'Not needed'}, format='json')

        assert response.status_code == 200
        assert response.data['status'] == 'rejected'
        assert response.data['rejection_reason'] == 'Not needed'

    def test_cancel(self, api_client, created):
        response = api_client.post(url('requisition_cancel', created['requisition_no']))

        assert response.status_code == 200
        assert response.data['status'] == 'cancelled'

    def test_not_found(self, api_client, requester):
        api_client.force_authenticate(requester)

        response = api_client.post(url('requisition_submit', 'REQ-1999-0001'))

        assert response.status_code == 404
        assert response.data['code'] == 'REQUISITION_NOT_FOUND'

    def test_list_mine(self, api_client, created, outsider):
        mine = api_client.get(url('requisition_list'), {'mine': '1'}).data
        assert [r['requisition_no'] for r in mine] == [created['requisition_no']]

        api_client.force_authenticate(outsider)
        assert api_client.get(url('requisition_list'), {'mine': '1'}).data == []
