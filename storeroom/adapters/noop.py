"""
Noop adapters: Stub collaborators for development and testing.

- NoopItemCatalog: every item id exists, with placeholder data
- NoopNotifier: logs events and sends nothing

Usage in settings.py:
    STOREROOM = {
        "ITEM_CATALOG": "storeroom.adapters.noop.NoopItemCatalog",
        "NOTIFIER": "storeroom.adapters.noop.NoopNotifier",
    }

WARNING: Do NOT use NoopItemCatalog in production. It performs no real
validation and will accept any item id, including nonexistent ones.
"""

from __future__ import annotations

import logging

from storeroom.protocols.catalog import ItemInfo

logger = logging.getLogger('storeroom')


class NoopItemCatalog:
    """
    No-operation item catalog.

    Every lookup returns minimal defaults. Implements the ``ItemCatalog``
    protocol without any external dependencies, making it suitable for
    local development and CI pipelines without a catalog service.
    """

    def get_item(self, item_id: int) -> ItemInfo | None:
        """Always returns a placeholder ItemInfo (uom='pieces', reorder_level=0)."""
        return ItemInfo(
            item_id=item_id,
            code=f"ITEM-{item_id}",
            name=f"Item {item_id}",
        )

    def get_items(self, item_ids: list[int]) -> dict[int, ItemInfo]:
        return {item_id: self.get_item(item_id) for item_id in item_ids}


class NoopNotifier:
    """Notifier that only logs."""

    def notify(self, event: str, requisition) -> None:
        logger.debug(
            "requisition.notify.noop",
            extra={"event": event, "requisition_no": requisition.requisition_no},
        )
