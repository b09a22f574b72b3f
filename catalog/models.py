"""Catalog app models.

The catalog owns the perishable items (flowers) and the attributes the
replenishment analytics read: price, lead time, seasonality and the
observed inspection pass rate.
"""

from decimal import Decimal

from common.choices import AbcClass, FlowerCategory
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


class TimeStampedModel(models.Model):
    """Abstract base model adding created/updated timestamps."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class Flower(TimeStampedModel):
    """A stocked item. ``abc_class`` is an informational tag; the classifier recomputes it."""

    CATEGORY_CHOICES = FlowerCategory.choices
    ABC_CHOICES = AbcClass.choices

    name = models.CharField(max_length=120, unique=True)
    variety = models.CharField(max_length=120, blank=True)
    category = models.CharField(max_length=16, choices=CATEGORY_CHOICES, default=FlowerCategory.RESIDENT)
    abc_class = models.CharField(max_length=1, choices=ABC_CHOICES, default=AbcClass.B)
    shelf_life_days = models.PositiveIntegerField(
        default=30, validators=[MinValueValidator(1), MaxValueValidator(365)]
    )
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00")), MaxValueValidator(Decimal("10000.00"))],
    )
    seasonal_factor = models.DecimalField(
        max_digits=4,
        decimal_places=2,
        default=Decimal("1.00"),
        validators=[MinValueValidator(Decimal("0.10")), MaxValueValidator(Decimal("3.00"))],
    )
    # Updated from the most recent inspection; 0 is possible when a whole batch fails.
    inspection_pass_rate = models.DecimalField(
        max_digits=3,
        decimal_places=2,
        default=Decimal("0.80"),
        validators=[MinValueValidator(Decimal("0.00")), MaxValueValidator(Decimal("1.00"))],
    )
    lead_time_days = models.PositiveIntegerField(default=7, validators=[MinValueValidator(1), MaxValueValidator(90)])
    review_cycle_weeks = models.PositiveIntegerField(
        default=1, validators=[MinValueValidator(1), MaxValueValidator(4)]
    )

    class Meta:
        ordering = ["name", "id"]
        constraints = [
            models.CheckConstraint(name="flower_price_non_negative", condition=models.Q(price__gte=0)),
            models.CheckConstraint(
                name="flower_pass_rate_between_0_and_1",
                condition=models.Q(inspection_pass_rate__gte=0) & models.Q(inspection_pass_rate__lte=1),
            ),
        ]
        indexes = [
            models.Index(fields=["abc_class"], name="flower_abc_class_idx"),
            models.Index(fields=["category"], name="flower_category_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return self.name if not self.variety else f"{self.name} ({self.variety})"


# EOF
