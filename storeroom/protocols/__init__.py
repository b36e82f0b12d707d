"""
Storeroom Protocols.

Defines interfaces for external system integration.
"""

from storeroom.protocols.approval import (
    ApprovalChain,
    ApprovalDirectory,
    ApprovalPolicy,
)
from storeroom.protocols.catalog import (
    ItemCatalog,
    ItemInfo,
)
from storeroom.protocols.notification import RequisitionNotifier

__all__ = [
    "ApprovalChain",
    "ApprovalDirectory",
    "ApprovalPolicy",
    "ItemCatalog",
    "ItemInfo",
    "RequisitionNotifier",
]
