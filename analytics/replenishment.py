"""Replenishment engine: tiered recommendation from stock, demand and safety stock.

``build_recommendation`` holds the decision logic and is pure;
``evaluate_item`` wires the estimators for one item through a reader and is
shared by single-item recommendations and the snapshot pass.
"""

import datetime as dt
import logging
import math
from dataclasses import dataclass
from typing import Optional

from common.choices import RecommendationLevel
from inventory.exceptions import InventoryError

from .estimators import DemandEstimate, current_stock, demand_from_weeks, outbound_weeks, std_dev_from_weeks
from .policy import ReplenishmentPolicy, default_weekly_demand, get_policy
from .readers import ItemProfile, LedgerReader
from .safety_stock import compute_safety_stock

logger = logging.getLogger("florastock.analytics")

LEVEL_PRIORITY = {
    RecommendationLevel.CRITICAL: 1,
    RecommendationLevel.URGENT: 2,
    RecommendationLevel.SUGGESTED: 3,
    RecommendationLevel.NONE: 4,
    RecommendationLevel.ERROR: 5,
}


@dataclass(frozen=True)
class Recommendation:
    item_id: int
    item_name: str = ""
    current_stock: int = 0
    safety_stock: float = 0.0
    weekly_demand: float = 0.0
    need_replenishment: bool = False
    level: str = RecommendationLevel.NONE
    reason: str = ""
    suggested_order_qty: int = 0
    expected_pass_qty: int = 0
    shortage: int = 0
    stock_coverage_days: float = 0.0
    success: bool = True
    error_message: str = ""
    error_code: Optional[str] = None
    degraded: bool = False

    @property
    def priority(self) -> int:
        return LEVEL_PRIORITY.get(self.level, 99)

    @property
    def level_label(self) -> str:
        return RecommendationLevel(self.level).label


@dataclass(frozen=True)
class ItemEvaluation:
    item: ItemProfile
    current_stock: int
    demand: DemandEstimate
    std_dev: DemandEstimate
    safety_stock: float
    recommendation: Recommendation


def error_recommendation(item_id: int, message: str, code: Optional[str] = None) -> Recommendation:
    return Recommendation(
        item_id=item_id,
        item_name="Calculation error",
        level=RecommendationLevel.ERROR,
        reason=message,
        success=False,
        error_message=message,
        error_code=code,
    )


def _urgency(*, current_stock: int, shortage: int, weekly_demand: float, coverage_days: float, policy):
    if current_stock == 0:
        return RecommendationLevel.CRITICAL, "Out of stock: current stock is zero"
    if shortage > weekly_demand * policy.urgent_shortage_weeks or coverage_days < policy.urgent_coverage_days:
        return RecommendationLevel.URGENT, f"Urgent: stock covers only {coverage_days:.1f} days"
    if shortage > weekly_demand * policy.suggested_shortage_weeks or coverage_days < policy.suggested_coverage_days:
        return RecommendationLevel.SUGGESTED, f"Suggested: stock {current_stock} is below safety stock"
    return RecommendationLevel.NONE, "Stock adequate"


def build_recommendation(
    *,
    item_id: int,
    current_stock: int,
    safety_stock: float,
    weekly_demand: float,
    pass_rate: float,
    item_name: str = "",
    degraded: bool = False,
    policy: Optional[ReplenishmentPolicy] = None,
) -> Recommendation:
    """Decide whether and how much to reorder.

    Replenishment triggers when stock is below ``ceil(safety_stock)``. The
    order covers the shortage grossed up for inspection loss plus
    ``buffer_weeks`` of demand.
    """

    policy = policy or get_policy()
    target = math.ceil(safety_stock)
    coverage_days = current_stock / weekly_demand * 7 if weekly_demand > 0 else 0.0
    common = dict(
        item_id=item_id,
        item_name=item_name,
        current_stock=current_stock,
        safety_stock=safety_stock,
        weekly_demand=weekly_demand,
        stock_coverage_days=coverage_days,
        degraded=degraded,
    )
    if current_stock >= target:
        return Recommendation(
            need_replenishment=False, level=RecommendationLevel.NONE, reason="Stock adequate", **common
        )

    shortage = target - current_stock
    rate = policy.clamp_pass_rate(pass_rate)
    order_qty = math.ceil(max(1.0, shortage / rate + weekly_demand * policy.buffer_weeks))
    level, reason = _urgency(
        current_stock=current_stock,
        shortage=shortage,
        weekly_demand=weekly_demand,
        coverage_days=coverage_days,
        policy=policy,
    )
    return Recommendation(
        need_replenishment=True,
        level=level,
        reason=reason,
        suggested_order_qty=order_qty,
        expected_pass_qty=math.floor(order_qty * rate),
        shortage=shortage,
        **common,
    )


def evaluate_item(
    item: ItemProfile,
    *,
    reader: LedgerReader,
    as_of: Optional[dt.datetime] = None,
    policy: Optional[ReplenishmentPolicy] = None,
) -> ItemEvaluation:
    """Run stock, demand, variability, safety stock and the decision for one item.

    The outbound history is read once and shared by both estimators.
    """

    policy = policy or get_policy()
    stock = current_stock(item.item_id, reader=reader)
    try:
        weekly = outbound_weeks(item.item_id, reader=reader, as_of=as_of, policy=policy)
    except InventoryError as exc:
        logger.warning(
            "analytics.demand_read_failed",
            extra={"event": "analytics.demand_read_failed", "item_id": item.item_id, "error": str(exc)},
        )
        weekly = []
    demand = demand_from_weeks(weekly, item.abc_class, policy)
    std_dev = std_dev_from_weeks(weekly, item.abc_class, policy)
    try:
        ss = compute_safety_stock(
            sigma=std_dev.value,
            lead_time_days=item.lead_time_days,
            seasonal_factor=item.seasonal_factor,
            pass_rate=item.pass_rate,
            policy=policy,
        )
    except (ArithmeticError, ValueError) as exc:
        logger.warning(
            "analytics.safety_stock_fallback",
            extra={"event": "analytics.safety_stock_fallback", "item_id": item.item_id, "error": str(exc)},
        )
        ss = default_weekly_demand(item.abc_class)
    recommendation = build_recommendation(
        item_id=item.item_id,
        item_name=item.name,
        current_stock=stock,
        safety_stock=ss,
        weekly_demand=demand.value,
        pass_rate=item.pass_rate,
        degraded=demand.degraded or std_dev.degraded,
        policy=policy,
    )
    return ItemEvaluation(
        item=item,
        current_stock=stock,
        demand=demand,
        std_dev=std_dev,
        safety_stock=ss,
        recommendation=recommendation,
    )


def recommend(
    item_id: int,
    *,
    reader: LedgerReader,
    as_of: Optional[dt.datetime] = None,
    policy: Optional[ReplenishmentPolicy] = None,
) -> Recommendation:
    """Recommendation for one item. Failures come back as an ERROR-level recommendation."""

    try:
        item = reader.get_item(item_id)
        return evaluate_item(item, reader=reader, as_of=as_of, policy=policy).recommendation
    except InventoryError as exc:
        logger.warning(
            "analytics.recommendation_failed",
            extra={"event": "analytics.recommendation_failed", "item_id": item_id, "error_code": exc.code},
        )
        return error_recommendation(item_id, exc.message or str(exc), exc.code)


# EOF
