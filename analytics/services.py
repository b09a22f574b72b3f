"""Analytics entry points used by views, inventory services and commands.

Inventory-wide views (snapshot, demand analysis, ABC, report) are derived
from the cached snapshot. Single-item recommendations are always computed
fresh from the ledger.
"""

from typing import Optional

from django.conf import settings

from .classification import AbcReport, classify_abc
from .readers import LedgerReader, OrmLedgerReader
from .replenishment import Recommendation, recommend
from .reports import DemandAnalysis, InventoryReport, build_inventory_report, demand_analysis
from .snapshot import SnapshotRow, get_snapshot


def get_inventory_snapshot() -> list[SnapshotRow]:
    return list(get_snapshot().rows)


def get_recommendation(item_id: int, *, reader: Optional[LedgerReader] = None) -> Recommendation:
    return recommend(item_id, reader=reader or OrmLedgerReader())


def get_demand_analysis() -> list[DemandAnalysis]:
    return demand_analysis(get_snapshot().rows)


def get_abc_report() -> AbcReport:
    return classify_abc(get_snapshot().rows)


def get_inventory_report() -> InventoryReport:
    return build_inventory_report(get_snapshot())


def list_expiring(*, within_days: Optional[int] = None):
    from inventory.selectors import list_expiring_batches

    if within_days is None:
        within_days = int(getattr(settings, "ANALYTICS_EXPIRY_WINDOW_DAYS", 7))
    return list_expiring_batches(within_days=within_days)


# EOF
