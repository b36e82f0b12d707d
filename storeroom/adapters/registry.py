"""
Adapter registry: loads the collaborator backends configured in settings.

Usage:
    from storeroom.adapters import get_item_catalog, get_approval_policy

    catalog = get_item_catalog()
    info = catalog.get_item(7)

Settings:
    STOREROOM = {
        "ITEM_CATALOG": "catalog.adapters.CatalogItemLookup",
        "APPROVAL_POLICY": "storeroom.approval.ChainApprovalPolicy",
        "APPROVAL_DIRECTORY": "storeroom.adapters.directory.SettingsApprovalDirectory",
        "NOTIFIER": "notifications.adapters.EmailRequisitionNotifier",
    }

Instances are cached per dotted path, so swapping a setting (e.g. in tests)
loads the new backend on next access.
"""

from __future__ import annotations

import logging
import threading
from typing import Any

from django.core.exceptions import ImproperlyConfigured
from django.utils.module_loading import import_string

from storeroom.conf import storeroom_settings
from storeroom.protocols.approval import ApprovalDirectory, ApprovalPolicy
from storeroom.protocols.catalog import ItemCatalog
from storeroom.protocols.notification import RequisitionNotifier

logger = logging.getLogger(__name__)


_lock = threading.Lock()
_instances: dict[str, Any] = {}


def _load(setting_name: str) -> Any:
    """
    Return the backend configured under STOREROOM[setting_name].

    Raises:
        ImproperlyConfigured: If the setting is empty or import fails
    """
    path = getattr(storeroom_settings, setting_name)
    if not path:
        raise ImproperlyConfigured(f"STOREROOM['{setting_name}'] must be configured.")

    instance = _instances.get(path)
    if instance is None:
        with _lock:
            instance = _instances.get(path)
            if instance is None:  # double-checked
                try:
                    backend_class = import_string(path)
                except ImportError as e:
                    raise ImproperlyConfigured(
                        f"Failed to import {setting_name} '{path}': {e}"
                    ) from e
                instance = backend_class()
                _instances[path] = instance
                logger.debug("Loaded %s: %s", setting_name, path)
    return instance


def get_item_catalog() -> ItemCatalog:
    return _load('ITEM_CATALOG')


def get_approval_directory() -> ApprovalDirectory:
    return _load('APPROVAL_DIRECTORY')


def get_approval_policy() -> ApprovalPolicy:
    return _load('APPROVAL_POLICY')


def get_notifier() -> RequisitionNotifier:
    return _load('NOTIFIER')


def reset_adapters() -> None:
    """Drop cached backends. Useful for testing."""
    with _lock:
        _instances.clear()
