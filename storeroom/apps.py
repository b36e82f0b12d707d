"""Django app configuration for Storeroom."""

from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class StoreroomConfig(AppConfig):
    """Configuration for Storeroom app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "storeroom"
    verbose_name = _("Storeroom")
