"""Django app configuration for analytics."""

from django.apps import AppConfig


class AnalyticsConfig(AppConfig):
    """Replenishment analytics over the inventory ledger. Owns no models."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "analytics"
