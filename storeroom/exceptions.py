"""
Exceptions for Storeroom.

All errors carry a structured code for programmatic handling. Codes are
grouped in three kinds:

- validation: bad input, rejected before any transaction opens
- business: rule violated inside the transaction (rolled back)
- contention: lock timeout or deadlock, safe to retry the whole operation

Anything else (database down, bugs) is not a Storeroom error and propagates
unchanged.
"""

from decimal import Decimal
from typing import Any


VALIDATION = 'validation'
BUSINESS = 'business'
CONTENTION = 'contention'


class BaseError(Exception):
    """
    Base structured exception.

    Attributes:
        code: Error code for programmatic handling
        message: Human-readable message
        data: Additional context data (offending item, location, state...)
    """

    _default_messages: dict[str, str] = {}
    _kinds: dict[str, str] = {}

    def __init__(self, code: str, message: str | None = None, **data):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.data = data
        super().__init__(f"[{code}] {self.message}")

    @property
    def kind(self) -> str:
        return self._kinds.get(self.code, BUSINESS)

    @property
    def retryable(self) -> bool:
        """Only contention errors may be retried as-is."""
        return self.kind == CONTENTION

    def as_dict(self) -> dict[str, Any]:
        """Serialize to dict (useful for APIs)."""
        return {
            'code': self.code,
            'kind': self.kind,
            'message': self.message,
            'data': {
                k: str(v) if isinstance(v, Decimal) else v
                for k, v in self.data.items()
            }
        }


_SHARED_MESSAGES = {
    'INVALID_QUANTITY': 'Invalid quantity',
    'ITEM_NOT_FOUND': 'Item not found in catalog',
    'LOCATION_NOT_FOUND': 'Location not found or inactive',
    'CONTENTION': 'Concurrent modification, retry the operation',
}

_SHARED_KINDS = {
    'INVALID_QUANTITY': VALIDATION,
    'ITEM_NOT_FOUND': VALIDATION,
    'LOCATION_NOT_FOUND': VALIDATION,
    'CONTENTION': CONTENTION,
}


class StockError(BaseError):
    """
    Structured exception for stock mutations.

    Usage:
        try:
            stock.adjust(7, 1, 5, 'remove')
        except StockError as e:
            if e.code == 'INSUFFICIENT_STOCK':
                print(f"Only {e.available} left at location {e.data['location_id']}")
    """

    _default_messages = {
        **_SHARED_MESSAGES,
        'INVALID_ADJUSTMENT_TYPE': 'Adjustment type must be add, remove or set',
        'INVALID_UNIT_COST': 'Unit cost must be a non-negative decimal',
        'INVALID_TRANSFER': 'Source and destination locations must be different',
        'INSUFFICIENT_STOCK': 'Insufficient stock',
    }

    _kinds = {
        **_SHARED_KINDS,
        'INVALID_ADJUSTMENT_TYPE': VALIDATION,
        'INVALID_UNIT_COST': VALIDATION,
        'INVALID_TRANSFER': VALIDATION,
        'INSUFFICIENT_STOCK': BUSINESS,
    }

    @property
    def available(self) -> int:
        """Shortcut for data['available']."""
        return self.data.get('available', 0)

    @property
    def requested(self) -> int:
        """Shortcut for data['requested']."""
        return self.data.get('requested', 0)


class RequisitionError(BaseError):
    """Structured exception for requisition workflow transitions."""

    _default_messages = {
        **_SHARED_MESSAGES,
        'INVALID_REQUISITION': 'Invalid requisition data',
        'EMPTY_REQUISITION': 'Requisition has no valid line items',
        'REQUISITION_NOT_FOUND': 'Requisition not found',
        'INVALID_STATE': 'Transition not allowed in the current status',
        'UNAUTHORIZED': 'Actor is not allowed to perform this transition',
        'NO_FULFILLMENT_LOCATION': 'No location configured to fulfill this requisition',
    }

    _kinds = {
        **_SHARED_KINDS,
        'INVALID_REQUISITION': VALIDATION,
        'EMPTY_REQUISITION': VALIDATION,
        'REQUISITION_NOT_FOUND': BUSINESS,
        'INVALID_STATE': BUSINESS,
        'UNAUTHORIZED': BUSINESS,
        'NO_FULFILLMENT_LOCATION': BUSINESS,
    }
