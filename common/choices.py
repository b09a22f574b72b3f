"""Shared enumerations and choices used across apps."""

from django.db import models


class FlowerCategory(models.TextChoices):
    RESIDENT = "resident", "Resident"
    RELIGIOUS = "religious", "Religious"
    SEASONAL = "seasonal", "Seasonal"
    POPULAR = "popular", "Popular"
    SPECIAL = "special", "Special"


class AbcClass(models.TextChoices):
    A = "A", "A"
    B = "B", "B"
    C = "C", "C"


class BatchState(models.TextChoices):
    """Lifecycle: received -> inspected -> active -> expired | discarded."""

    RECEIVED = "received", "Received"
    INSPECTED = "inspected", "Inspected"
    ACTIVE = "active", "Active"
    EXPIRED = "expired", "Expired"
    DISCARDED = "discarded", "Discarded"


class LedgerKind(models.TextChoices):
    INBOUND = "in", "Inbound"
    OUTBOUND = "out", "Outbound"
    ADJUST = "adjust", "Adjust"


class RecommendationLevel(models.TextChoices):
    NONE = "none", "No replenishment needed"
    SUGGESTED = "suggested", "Replenishment suggested"
    URGENT = "urgent", "Urgent replenishment"
    CRITICAL = "critical", "Out of stock"
    ERROR = "error", "Calculation error"


class StockStatus(models.TextChoices):
    NORMAL = "normal", "Normal"
    LOW_STOCK = "low_stock", "Low stock"
    OUT_OF_STOCK = "out_of_stock", "Out of stock"
    OVERSTOCK = "overstock", "Overstock"


class DemandPattern(models.TextChoices):
    LOW = "low", "Low demand"
    MEDIUM = "medium", "Medium demand"
    HIGH = "high", "High demand"


class VariabilityLevel(models.TextChoices):
    STABLE = "stable", "Stable"
    MEDIUM = "medium", "Medium"
    HIGH = "high", "Highly variable"
