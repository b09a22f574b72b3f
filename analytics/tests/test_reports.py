import pytest
from analytics.policy import ReplenishmentPolicy
from analytics.reports import build_inventory_report, demand_analysis
from analytics.snapshot import compute_snapshot
from analytics.tests.fakes import AS_OF, InMemoryLedgerStore
from common.choices import DemandPattern, RecommendationLevel, StockStatus, VariabilityLevel

POLICY = ReplenishmentPolicy()


@pytest.fixture
def snapshot():
    store = InMemoryLedgerStore()
    for item_id, received in ((1, 60), (2, 200), (3, 61)):
        store.add_item(item_id)
        store.receive(item_id, received)
        store.ship_weekly(item_id, [10] * 6)
    return compute_snapshot(reader_factory=store.reader, as_of=AS_OF, policy=POLICY)


def test_inventory_report_totals(snapshot):
    report = build_inventory_report(snapshot)
    assert report.total_flowers == 3
    assert report.total_units == 141
    assert report.out_of_stock_count == 1
    assert report.low_stock_count == 1
    assert report.critical_count == 1
    assert report.service_level == pytest.approx(2 / 3)
    assert [row.stock_status for row in report.rows] == [
        StockStatus.OUT_OF_STOCK,
        StockStatus.OVERSTOCK,
        StockStatus.LOW_STOCK,
    ]


def test_replenishment_list_is_most_urgent_first(snapshot):
    report = build_inventory_report(snapshot)
    assert [(rec.item_id, rec.level) for rec in report.replenishment_list] == [
        (1, RecommendationLevel.CRITICAL),
        (3, RecommendationLevel.URGENT),
    ]


def test_empty_inventory_report():
    store = InMemoryLedgerStore()
    report = build_inventory_report(compute_snapshot(reader_factory=store.reader, as_of=AS_OF))
    assert report.total_flowers == 0
    assert report.service_level == 1.0
    assert report.replenishment_list == ()


def test_demand_analysis(snapshot):
    analysis = demand_analysis(snapshot.rows, POLICY)
    first = analysis[0]
    assert first.average_weekly_demand == pytest.approx(10.0)
    assert first.coefficient_of_variation == pytest.approx(0.1)
    assert first.variability_level == VariabilityLevel.STABLE
    assert first.demand_pattern == DemandPattern.LOW
    assert first.reorder_point == pytest.approx(first.safety_stock + 10.0)
    assert first.review_frequency_days == 14
    assert first.service_level == 0.95
