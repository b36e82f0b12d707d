"""
Pytest fixtures for Storeroom tests.
"""

from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from django.contrib.auth.models import Permission
from rest_framework.test import APIClient

from storeroom.adapters import get_notifier, reset_adapters
from storeroom.models import Location, LocationKind
from storeroom.tests.catalog import DEPT, PAPER, PENS


User = get_user_model()


@pytest.fixture(autouse=True)
def _fresh_adapters():
    """Adapters are cached per process; start every test clean."""
    reset_adapters()
    yield
    reset_adapters()


def _grant(user, *codenames):
    user.user_permissions.add(*Permission.objects.filter(
        content_type__app_label='storeroom', codename__in=codenames,
    ))
    # has_perm() caches permissions on the instance
    return User.objects.get(pk=user.pk)


@pytest.fixture
def requester(db):
    return User.objects.create_user(username='alice', password='testpass123')


@pytest.fixture
def approver_l1(db):
    return User.objects.create_user(username='bob', password='testpass123')


@pytest.fixture
def approver_l2(db):
    return User.objects.create_user(username='carol', password='testpass123')


@pytest.fixture
def outsider(db):
    return User.objects.create_user(username='mallory', password='testpass123')


@pytest.fixture
def supervisor(db):
    """User holding storeroom.approve_requisition, outside any chain."""
    user = User.objects.create_user(username='dave', password='testpass123')
    return _grant(user, 'approve_requisition')


@pytest.fixture
def clerk(db):
    """Storekeeper allowed to adjust and transfer."""
    user = User.objects.create_user(username='erin', password='testpass123')
    return _grant(user, 'adjust_stock', 'transfer_stock')


@pytest.fixture
def central(db):
    """Global default warehouse (seeded by migration)."""
    location, _ = Location.objects.get_or_create(
        code='CENTRAL',
        defaults={'name': 'Central Store', 'kind': LocationKind.WAREHOUSE, 'is_default': True},
    )
    return location


@pytest.fixture
def dept_store(db):
    """Default location of DEPT."""
    return Location.objects.create(
        code='HR-01',
        name='HR cabinet',
        kind=LocationKind.DEPARTMENT,
        department_id=DEPT,
        is_default=True,
    )


@pytest.fixture
def back_room(db):
    return Location.objects.create(code='STORE-B', name='Back room', kind=LocationKind.STORAGE)


@pytest.fixture
def single_level(settings, approver_l1):
    """DEPT approved by approver_l1 alone."""
    settings.STOREROOM = {**settings.STOREROOM, 'APPROVAL_CHAINS': {DEPT: [[approver_l1.pk]]}}


@pytest.fixture
def two_levels(settings, approver_l1, approver_l2):
    """DEPT approved by approver_l1 then approver_l2."""
    settings.STOREROOM = {
        **settings.STOREROOM,
        'APPROVAL_CHAINS': {DEPT: [[approver_l1.pk], [approver_l2.pk]]},
    }


@pytest.fixture
def notifier():
    sent = get_notifier()
    sent.sent.clear()
    return sent


@pytest.fixture
def stocked(dept_store, central):
    """40 reams of paper and 10 boxes of pens in the department store."""
    from storeroom import stock

    stock.adjust(PAPER, dept_store.pk, 40, 'set', unit_cost=Decimal('4.50'))
    stock.adjust(PENS, dept_store.pk, 10, 'set', unit_cost=Decimal('3.20'))
    return dept_store


@pytest.fixture
def make_requisition(requester):
    """Create (and optionally submit) a requisition for DEPT."""
    from storeroom import requisitions

    def _make(lines=None, submit=True, **kwargs):
        kwargs.setdefault('purpose', 'Office supplies')
        req = requisitions.create(
            requester,
            DEPT,
            items=lines or [{'item_id': PAPER, 'quantity': 5}, {'item_id': PENS, 'quantity': 3}],
            **kwargs,
        )
        if submit:
            req = requisitions.submit(req, requester)
        return req

    return _make


@pytest.fixture
def api_client():
    return APIClient()
