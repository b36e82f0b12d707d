"""
Storeroom configuration.

Usage in settings.py:
    STOREROOM = {
        "ITEM_CATALOG": "catalog.adapters.CatalogItemLookup",
        "APPROVAL_CHAINS": {
            12: [[4, 5], [9]],   # department 12: L1 = users 4 or 5, L2 = user 9
            "default": [[1]],
        },
        "SINGLE_LEVEL_URGENCIES": ["urgent"],
        "LOCK_TIMEOUT_MS": 5000,
    }
"""

from dataclasses import dataclass, field
from typing import Any

from django.conf import settings


@dataclass
class StoreroomSettings:
    """Storeroom configuration settings."""

    # Collaborator backends (dotted paths)
    ITEM_CATALOG: str = "storeroom.adapters.noop.NoopItemCatalog"
    APPROVAL_DIRECTORY: str = "storeroom.adapters.directory.SettingsApprovalDirectory"
    APPROVAL_POLICY: str = "storeroom.approval.ChainApprovalPolicy"
    NOTIFIER: str = "storeroom.adapters.noop.NoopNotifier"

    # department_id -> [[L1 user ids], [L2 user ids]], read by SettingsApprovalDirectory
    APPROVAL_CHAINS: dict = field(default_factory=dict)

    # Urgencies that only need one approval level even when the chain has two
    SINGLE_LEVEL_URGENCIES: tuple = ()

    # Requisition numbering: REQ-2026-0001
    REQUISITION_PREFIX: str = "REQ"
    REQUISITION_NUMBER_WIDTH: int = 4

    # PostgreSQL lock_timeout applied to each mutation transaction (0 = server default)
    LOCK_TIMEOUT_MS: int = 0

    # Check item ids against ITEM_CATALOG before mutating
    VALIDATE_ITEMS: bool = True


def get_storeroom_settings() -> StoreroomSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "STOREROOM", {})
    return StoreroomSettings(**{
        k: v for k, v in user_settings.items()
        if k in StoreroomSettings.__dataclass_fields__
    })


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_storeroom_settings(), name)


storeroom_settings = _LazySettings()
