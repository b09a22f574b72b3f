"""Django app configuration for catalog."""

from django.apps import AppConfig


class CatalogConfig(AppConfig):
    """Flowers and their replenishment attributes."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "catalog"
