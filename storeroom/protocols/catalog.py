"""
Item Catalog Protocol: Interface for item lookup.

Storeroom defines this protocol, the host project's catalog implements it.
Storeroom only needs to know that an item exists, its unit of measure and
its reorder level (for low-stock classification).
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class ItemInfo:
    """Basic item information."""

    item_id: int
    code: str
    name: str
    uom: str = "pieces"  # "pieces", "box", "ream", ...
    reorder_level: int = 0
    unit_cost: Decimal | None = None
    is_active: bool = True


@runtime_checkable
class ItemCatalog(Protocol):
    """
    Protocol for item lookup.

    Implementations should provide methods to:
    - Get one item by id
    - Get many items at once (for listings and line validation)
    """

    def get_item(self, item_id: int) -> ItemInfo | None:
        """
        Get item information.

        Args:
            item_id: Catalog item id

        Returns:
            ItemInfo or None if not found
        """
        ...

    def get_items(self, item_ids: list[int]) -> dict[int, ItemInfo]:
        """
        Get several items at once.

        Args:
            item_ids: Catalog item ids

        Returns:
            Dict[item_id, ItemInfo]; unknown ids are absent
        """
        ...
