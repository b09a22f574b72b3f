"""Stock, weekly demand and demand variability estimators.

Demand is read from outbound ledger entries inside a fixed lookback window
that starts at the beginning of ``as_of``'s UTC day. Entries are bucketed
into weeks counted from the window start; weeks with no outbound quantity
are dropped, so sparse history degrades to the per-class defaults rather
than dragging the estimate towards zero.
"""

import datetime as dt
import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

import numpy as np
from common.choices import LedgerKind
from django.utils import timezone
from inventory.exceptions import InventoryError

from .policy import ReplenishmentPolicy, default_weekly_demand, demand_cv, get_policy
from .readers import LedgerReader, LedgerRow

logger = logging.getLogger("florastock.analytics")

_LOOKUP = object()


@dataclass(frozen=True)
class DemandEstimate:
    value: float
    weeks_observed: int
    # True when a class default replaced the statistic
    degraded: bool = False


def window_start(as_of: Optional[dt.datetime] = None, *, lookback_days: int = 84) -> dt.datetime:
    as_of = as_of or timezone.now()
    if timezone.is_naive(as_of):
        as_of = timezone.make_aware(as_of, dt.timezone.utc)
    day_start = as_of.astimezone(dt.timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)
    return day_start - dt.timedelta(days=lookback_days)


def bucket_weekly_demand(entries: Iterable[LedgerRow], since: dt.datetime) -> list[float]:
    """Absolute outbound quantity per week since ``since``, non-empty weeks only, in week order."""

    buckets: dict[int, float] = {}
    for row in entries:
        if row.kind != LedgerKind.OUTBOUND:
            continue
        week = (row.occurred_at - since).days // 7
        buckets[week] = buckets.get(week, 0.0) + abs(row.delta_qty)
    return [buckets[week] for week in sorted(buckets) if buckets[week] > 0]


def robust_weekly_demand(weekly: Sequence[float], *, median_weight: float = 0.6) -> float:
    """Blend of the median and a trimmed mean.

    ``max(1, n // 4)`` weeks are trimmed from each end of the sorted values;
    when nothing survives the trim the median stands in for the mean.
    """

    ordered = np.sort(np.asarray(weekly, dtype=float))
    trim = max(1, ordered.size // 4)
    kept = ordered[trim : ordered.size - trim]
    median = float(np.median(ordered))
    trimmed_mean = float(np.mean(kept)) if kept.size else median
    return median_weight * median + (1 - median_weight) * trimmed_mean


def floored_std_dev(weekly: Sequence[float], *, floor_ratio: float = 0.1) -> float:
    """Sample standard deviation, never below ``floor_ratio`` of the mean."""

    values = np.asarray(weekly, dtype=float)
    spread = float(np.std(values, ddof=1)) if values.size > 1 else 0.0
    return max(spread, float(np.mean(values)) * floor_ratio)


def demand_from_weeks(
    weekly: Sequence[float], abc_class: Optional[str], policy: Optional[ReplenishmentPolicy] = None
) -> DemandEstimate:
    policy = policy or get_policy()
    if len(weekly) < policy.min_weeks_for_demand:
        return DemandEstimate(default_weekly_demand(abc_class), len(weekly), degraded=True)
    value = robust_weekly_demand(weekly, median_weight=policy.median_weight)
    return DemandEstimate(max(0.0, value), len(weekly))


def std_dev_from_weeks(
    weekly: Sequence[float], abc_class: Optional[str], policy: Optional[ReplenishmentPolicy] = None
) -> DemandEstimate:
    policy = policy or get_policy()
    if len(weekly) < policy.min_weeks_for_std_dev:
        fallback = default_weekly_demand(abc_class) * demand_cv(abc_class)
        return DemandEstimate(fallback, len(weekly), degraded=True)
    value = floored_std_dev(weekly, floor_ratio=policy.std_dev_floor_ratio)
    return DemandEstimate(max(0.0, value), len(weekly))


def current_stock(item_id: int, *, reader: LedgerReader) -> int:
    """Clamped ledger sum. Read failures are logged and count as empty stock."""

    try:
        return max(0, int(reader.net_ledger_quantity(item_id)))
    except InventoryError as exc:
        logger.warning(
            "analytics.stock_read_failed",
            extra={"event": "analytics.stock_read_failed", "item_id": item_id, "error": str(exc)},
        )
        return 0


def outbound_weeks(
    item_id: int,
    *,
    reader: LedgerReader,
    as_of: Optional[dt.datetime] = None,
    policy: Optional[ReplenishmentPolicy] = None,
) -> list[float]:
    policy = policy or get_policy()
    since = window_start(as_of, lookback_days=policy.lookback_days)
    entries = reader.list_ledger_entries(item_id, since=since, kind=LedgerKind.OUTBOUND)
    return bucket_weekly_demand(entries, since)


def _lookup_abc_class(item_id: int, reader: LedgerReader) -> Optional[str]:
    try:
        return reader.get_item(item_id).abc_class
    except InventoryError:
        return None


def _estimate(item_id, reader, as_of, policy, abc_class, from_weeks, metric: str) -> DemandEstimate:
    policy = policy or get_policy()
    if abc_class is _LOOKUP:
        abc_class = _lookup_abc_class(item_id, reader)
    try:
        weekly = outbound_weeks(item_id, reader=reader, as_of=as_of, policy=policy)
    except InventoryError as exc:
        logger.warning(
            "analytics.demand_read_failed",
            extra={"event": "analytics.demand_read_failed", "item_id": item_id, "metric": metric, "error": str(exc)},
        )
        weekly = []
    return from_weeks(weekly, abc_class, policy)


def estimate_weekly_demand(
    item_id: int,
    *,
    reader: LedgerReader,
    as_of: Optional[dt.datetime] = None,
    policy: Optional[ReplenishmentPolicy] = None,
    abc_class=_LOOKUP,
) -> DemandEstimate:
    return _estimate(item_id, reader, as_of, policy, abc_class, demand_from_weeks, "demand")


def estimate_weekly_demand_std_dev(
    item_id: int,
    *,
    reader: LedgerReader,
    as_of: Optional[dt.datetime] = None,
    policy: Optional[ReplenishmentPolicy] = None,
    abc_class=_LOOKUP,
) -> DemandEstimate:
    return _estimate(item_id, reader, as_of, policy, abc_class, std_dev_from_weeks, "std_dev")


def weekly_demand(item_id: int, *, reader: LedgerReader, as_of: Optional[dt.datetime] = None, **kwargs) -> float:
    return estimate_weekly_demand(item_id, reader=reader, as_of=as_of, **kwargs).value


def weekly_demand_std_dev(
    item_id: int, *, reader: LedgerReader, as_of: Optional[dt.datetime] = None, **kwargs
) -> float:
    return estimate_weekly_demand_std_dev(item_id, reader=reader, as_of=as_of, **kwargs).value


# EOF
