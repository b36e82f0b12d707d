"""
Storeroom Adapters.

Implementations of protocols for external systems, and the registry that
loads the configured ones.
"""

from storeroom.adapters.registry import (
    get_approval_directory,
    get_approval_policy,
    get_item_catalog,
    get_notifier,
    reset_adapters,
)

__all__ = [
    "get_approval_directory",
    "get_approval_policy",
    "get_item_catalog",
    "get_notifier",
    "reset_adapters",
]
