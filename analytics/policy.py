"""Replenishment policy: lookup tables and tunable thresholds.

The urgency thresholds below are business policy carried over unchanged
from the legacy system, not derived values. Override them per deployment
through ``settings.ANALYTICS_POLICY``.
"""

import dataclasses
from bisect import bisect_left
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Sequence

from common.choices import AbcClass, DemandPattern, VariabilityLevel
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

# (service level, Z-score), ordered by service level
Z_TABLE: tuple[tuple[float, float], ...] = (
    (0.80, 0.84),
    (0.85, 1.04),
    (0.90, 1.28),
    (0.95, 1.65),
    (0.975, 1.96),
    (0.99, 2.33),
)

DEFAULT_WEEKLY_DEMAND = {AbcClass.A: 25.0, AbcClass.B: 15.0, AbcClass.C: 8.0}
UNKNOWN_CLASS_WEEKLY_DEMAND = 10.0

DEMAND_CV = {AbcClass.A: 0.4, AbcClass.B: 0.3, AbcClass.C: 0.2}
UNKNOWN_CLASS_CV = 0.4

REVIEW_DAYS = {AbcClass.A: 7, AbcClass.B: 14, AbcClass.C: 30}
UNKNOWN_CLASS_REVIEW_DAYS = 14

MANAGEMENT_STRATEGY = {
    AbcClass.A: "Tight control, high service level, frequent review",
    AbcClass.B: "Standard control, moderate service level, periodic review",
    AbcClass.C: "Simple control, basic service level, occasional review",
}
UNKNOWN_CLASS_STRATEGY = "Standard management"

# Cumulative value share (percent) up to which an item is class A / class B
CLASS_A_CUMULATIVE_PCT = Decimal("80")
CLASS_B_CUMULATIVE_PCT = Decimal("95")

LOW_DEMAND_THRESHOLD = 15.0
MEDIUM_DEMAND_THRESHOLD = 30.0
LOW_VARIABILITY_CV = 0.3
MEDIUM_VARIABILITY_CV = 0.6


def z_value(service_level: float, table: Sequence[tuple[float, float]] = Z_TABLE) -> float:
    """Z-score for a service level, linearly interpolated within ``table``.

    Levels outside the table are clamped to its nearest endpoint.
    """

    levels = [level for level, _ in table]
    if service_level <= levels[0]:
        return table[0][1]
    if service_level >= levels[-1]:
        return table[-1][1]
    idx = bisect_left(levels, service_level)
    upper_level, upper_z = table[idx]
    if upper_level == service_level:
        return upper_z
    lower_level, lower_z = table[idx - 1]
    return lower_z + (upper_z - lower_z) * (service_level - lower_level) / (upper_level - lower_level)


def default_weekly_demand(abc_class: Optional[str]) -> float:
    return DEFAULT_WEEKLY_DEMAND.get(abc_class, UNKNOWN_CLASS_WEEKLY_DEMAND)


def demand_cv(abc_class: Optional[str]) -> float:
    return DEMAND_CV.get(abc_class, UNKNOWN_CLASS_CV)


def review_days(abc_class: Optional[str]) -> int:
    return REVIEW_DAYS.get(abc_class, UNKNOWN_CLASS_REVIEW_DAYS)


def management_strategy(abc_class: Optional[str]) -> str:
    return MANAGEMENT_STRATEGY.get(abc_class, UNKNOWN_CLASS_STRATEGY)


def classify_cumulative_share(cumulative_pct: Decimal) -> str:
    if cumulative_pct <= CLASS_A_CUMULATIVE_PCT:
        return AbcClass.A
    if cumulative_pct <= CLASS_B_CUMULATIVE_PCT:
        return AbcClass.B
    return AbcClass.C


def demand_pattern(weekly_demand: float) -> str:
    if weekly_demand < LOW_DEMAND_THRESHOLD:
        return DemandPattern.LOW
    if weekly_demand < MEDIUM_DEMAND_THRESHOLD:
        return DemandPattern.MEDIUM
    return DemandPattern.HIGH


def variability_level(cv: float) -> str:
    if cv < LOW_VARIABILITY_CV:
        return VariabilityLevel.STABLE
    if cv < MEDIUM_VARIABILITY_CV:
        return VariabilityLevel.MEDIUM
    return VariabilityLevel.HIGH


@dataclass(frozen=True)
class ReplenishmentPolicy:
    service_level: float = 0.95
    lookback_weeks: int = 12
    min_weeks_for_demand: int = 4
    min_weeks_for_std_dev: int = 2
    median_weight: float = 0.6
    std_dev_floor_ratio: float = 0.1
    min_lead_time_days: int = 1
    max_lead_time_days: int = 30
    min_seasonal_factor: float = 0.1
    max_seasonal_factor: float = 3.0
    min_pass_rate: float = 0.1
    max_pass_rate: float = 1.0
    buffer_weeks: float = 1.0
    urgent_shortage_weeks: float = 2.0
    urgent_coverage_days: float = 3.0
    suggested_shortage_weeks: float = 1.0
    suggested_coverage_days: float = 7.0
    overstock_weeks: float = 8.0

    @property
    def lookback_days(self) -> int:
        return self.lookback_weeks * 7

    def clamp_pass_rate(self, pass_rate: float) -> float:
        return min(max(float(pass_rate), self.min_pass_rate), self.max_pass_rate)

    @classmethod
    def from_settings(cls) -> "ReplenishmentPolicy":
        overrides = dict(getattr(settings, "ANALYTICS_POLICY", None) or {})
        overrides.setdefault("service_level", getattr(settings, "ANALYTICS_SERVICE_LEVEL", cls.service_level))
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = set(overrides) - known
        if unknown:
            raise ImproperlyConfigured(f"Unknown ANALYTICS_POLICY keys: {', '.join(sorted(unknown))}")
        return cls(**overrides)


def get_policy() -> ReplenishmentPolicy:
    return ReplenishmentPolicy.from_settings()


# EOF
