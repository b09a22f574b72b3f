"""Safety stock: buffer above expected lead-time demand at the target service level."""

import datetime as dt
import logging
import math
from typing import Optional, Union

from inventory.exceptions import InventoryError

from .estimators import estimate_weekly_demand_std_dev
from .policy import ReplenishmentPolicy, default_weekly_demand, get_policy, z_value
from .readers import ItemProfile, LedgerReader

logger = logging.getLogger("florastock.analytics")


def lead_time_weeks(lead_time_days: int, policy: Optional[ReplenishmentPolicy] = None) -> float:
    policy = policy or get_policy()
    days = min(max(int(lead_time_days), policy.min_lead_time_days), policy.max_lead_time_days)
    return max(1, days) / 7


def compute_safety_stock(
    *,
    sigma: float,
    lead_time_days: int,
    seasonal_factor: float,
    pass_rate: float,
    policy: Optional[ReplenishmentPolicy] = None,
) -> float:
    """``ceil(max(1, Z * sqrt(LT weeks) * sigma * seasonal / pass_rate))``.

    Seasonal factor and pass rate are clamped to the policy bounds, so a zero
    observed pass rate sizes the buffer as if one in ten units passed.
    """

    policy = policy or get_policy()
    seasonal = min(max(float(seasonal_factor), policy.min_seasonal_factor), policy.max_seasonal_factor)
    rate = policy.clamp_pass_rate(pass_rate)
    raw = z_value(policy.service_level) * math.sqrt(lead_time_weeks(lead_time_days, policy)) * sigma * seasonal / rate
    return float(math.ceil(max(1.0, raw)))


def safety_stock(
    item: Union[int, ItemProfile],
    *,
    reader: LedgerReader,
    as_of: Optional[dt.datetime] = None,
    policy: Optional[ReplenishmentPolicy] = None,
) -> float:
    """Safety stock for one item; any failure yields the class default demand."""

    policy = policy or get_policy()
    abc_class = item.abc_class if isinstance(item, ItemProfile) else None
    item_id = item.item_id if isinstance(item, ItemProfile) else item
    try:
        profile = item if isinstance(item, ItemProfile) else reader.get_item(item)
        abc_class = profile.abc_class
        sigma = estimate_weekly_demand_std_dev(
            profile.item_id, reader=reader, as_of=as_of, policy=policy, abc_class=abc_class
        )
        return compute_safety_stock(
            sigma=sigma.value,
            lead_time_days=profile.lead_time_days,
            seasonal_factor=profile.seasonal_factor,
            pass_rate=profile.pass_rate,
            policy=policy,
        )
    except (InventoryError, ArithmeticError, ValueError) as exc:
        logger.warning(
            "analytics.safety_stock_fallback",
            extra={"event": "analytics.safety_stock_fallback", "item_id": item_id, "error": str(exc)},
        )
        return default_weekly_demand(abc_class)


# EOF
