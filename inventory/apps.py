"""Django app configuration for inventory."""

from django.apps import AppConfig


class InventoryConfig(AppConfig):
    """Batches, inspection and the append-only stock ledger."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "inventory"
