"""
Notification Protocol: fire-and-forget messages on requisition transitions.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from storeroom.models import Requisition


@runtime_checkable
class RequisitionNotifier(Protocol):
    """
    Receives requisition events after the transaction commits.

    Exceptions raised here are logged and dropped; a notification can never
    undo a stock or requisition mutation.
    """

    def notify(self, event: str, requisition: Requisition) -> None:
        """
        Args:
            event: RequisitionAction value ('submitted', 'fulfilled', ...)
            requisition: The requisition, as committed
        """
        ...
