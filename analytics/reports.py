"""Derived views over a snapshot: demand analysis and the inventory report."""

import datetime as dt
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional

from common.choices import RecommendationLevel, StockStatus

from .policy import ReplenishmentPolicy, demand_pattern, get_policy, review_days, variability_level
from .snapshot import InventorySnapshot, SnapshotRow


@dataclass(frozen=True)
class DemandAnalysis:
    item_id: int
    item_name: str
    abc_class: Optional[str]
    average_weekly_demand: float
    std_dev: float
    coefficient_of_variation: float
    safety_stock: float
    reorder_point: float
    demand_pattern: str
    variability_level: str
    service_level: float
    review_frequency_days: int
    weeks_observed: int
    degraded: bool = False


@dataclass(frozen=True)
class InventoryReport:
    as_of: dt.datetime
    generated_at: dt.datetime
    total_flowers: int
    total_units: int
    total_value: Decimal
    low_stock_count: int
    out_of_stock_count: int
    expiring_batch_count: int
    critical_count: int
    service_level: float
    replenishment_list: tuple
    rows: tuple


def analyse_demand(row: SnapshotRow, policy: Optional[ReplenishmentPolicy] = None) -> DemandAnalysis:
    policy = policy or get_policy()
    cv = row.weekly_demand_std_dev / max(row.weekly_demand, 0.1)
    return DemandAnalysis(
        item_id=row.item_id,
        item_name=row.item_name,
        abc_class=row.abc_class,
        average_weekly_demand=row.weekly_demand,
        std_dev=row.weekly_demand_std_dev,
        coefficient_of_variation=cv,
        safety_stock=row.safety_stock,
        reorder_point=row.safety_stock + row.weekly_demand,
        demand_pattern=demand_pattern(row.weekly_demand),
        variability_level=variability_level(cv),
        service_level=policy.service_level,
        review_frequency_days=review_days(row.abc_class),
        weeks_observed=row.weeks_observed,
        degraded=row.degraded,
    )


def demand_analysis(rows: Iterable[SnapshotRow], policy: Optional[ReplenishmentPolicy] = None) -> list[DemandAnalysis]:
    policy = policy or get_policy()
    return [analyse_demand(row, policy) for row in rows]


def build_inventory_report(snapshot: InventorySnapshot) -> InventoryReport:
    """Inventory-wide totals plus the replenishment list, most urgent first.

    Service level here is the share of items currently in stock.
    """

    rows = snapshot.rows
    total = len(rows)
    out_of_stock = sum(1 for row in rows if row.stock_status == StockStatus.OUT_OF_STOCK)
    replenishment = sorted(
        (row.recommendation for row in rows if row.recommendation.need_replenishment),
        key=lambda rec: (rec.priority, -rec.shortage, rec.item_id),
    )
    return InventoryReport(
        as_of=snapshot.as_of,
        generated_at=snapshot.generated_at,
        total_flowers=total,
        total_units=sum(row.current_stock for row in rows),
        total_value=sum((row.total_value for row in rows), Decimal("0")),
        low_stock_count=sum(1 for row in rows if row.stock_status == StockStatus.LOW_STOCK),
        out_of_stock_count=out_of_stock,
        expiring_batch_count=sum(len(row.expiring_batches) for row in rows),
        critical_count=sum(1 for row in rows if row.recommendation.level == RecommendationLevel.CRITICAL),
        service_level=(total - out_of_stock) / total if total else 1.0,
        replenishment_list=tuple(replenishment),
        rows=rows,
    )


# EOF
