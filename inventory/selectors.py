"""Selectors for inventory domain (single-location).

Read-only query helpers over the ledger and batches. Every stock figure in
the project comes from ``net_ledger_quantity``.
"""

import datetime as dt
from typing import Optional

from django.db.models import IntegerField, OuterRef, QuerySet, Subquery, Sum
from django.db.models.functions import Coalesce
from django.utils import timezone

from .models import Batch, LedgerEntry


def net_ledger_quantity(flower_id: int) -> int:
    """Signed sum of every ledger delta for the flower (may be negative)."""

    total = LedgerEntry.objects.filter(flower_id=flower_id).aggregate(total=Sum("delta_qty"))["total"]
    return int(total or 0)


def current_stock_for_flower(flower_id: int) -> int:
    return max(0, net_ledger_quantity(flower_id))


def annotate_net_ledger_quantity(qs: QuerySet) -> QuerySet:
    """Annotate a flower queryset with ``net_ledger_quantity`` computed by the same ledger sum."""

    totals = (
        LedgerEntry.objects.filter(flower_id=OuterRef("pk"))
        .order_by()
        .values("flower_id")
        .annotate(total=Sum("delta_qty"))
        .values("total")
    )
    return qs.annotate(net_ledger_quantity=Coalesce(Subquery(totals, output_field=IntegerField()), 0))


def list_ledger_entries(
    flower_id: int, *, since: Optional[dt.datetime] = None, kind: Optional[str] = None
) -> QuerySet[LedgerEntry]:
    qs = LedgerEntry.objects.filter(flower_id=flower_id)
    if since is not None:
        qs = qs.filter(occurred_at__gte=since)
    if kind:
        qs = qs.filter(kind=kind)
    return qs.order_by("occurred_at", "id")


def list_active_batches(flower_id: int) -> QuerySet[Batch]:
    """Batches on the shelf: inspected or active with a passed quantity."""

    return Batch.objects.filter(
        flower_id=flower_id,
        state__in=Batch.SHELF_STATES,
        quantity_passed__gt=0,
    ).order_by("expiry_date", "id")


def list_expiring_batches(*, within_days: int, flower_id: Optional[int] = None, today=None) -> QuerySet[Batch]:
    """Shelf batches whose expiry date falls in ``[today, today + within_days]``."""

    today = today or timezone.localdate()
    qs = Batch.objects.filter(state__in=Batch.SHELF_STATES, quantity_passed__gt=0)
    if flower_id is not None:
        qs = qs.filter(flower_id=flower_id)
    return (
        qs.filter(expiry_date__gte=today, expiry_date__lte=today + dt.timedelta(days=within_days))
        .select_related("flower")
        .order_by("expiry_date", "id")
    )


# EOF
