"""Selectors for the catalog domain.

Read-only query helpers that keep views thin. Stock figures come from the
inventory ledger sum, never from a stored counter.
"""

from typing import Optional

from django.db.models import QuerySet
from inventory.selectors import annotate_net_ledger_quantity

from .models import Flower


def list_flowers(*, category: Optional[str] = None, abc_class: Optional[str] = None) -> QuerySet[Flower]:
    """Flowers ordered by name, annotated with ``net_ledger_quantity``."""

    qs = Flower.objects.all()
    if category:
        qs = qs.filter(category=category)
    if abc_class:
        qs = qs.filter(abc_class=abc_class)
    return annotate_net_ledger_quantity(qs).order_by("name", "id")

