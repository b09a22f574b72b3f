import datetime as dt

import pytest
from analytics.estimators import (
    bucket_weekly_demand,
    current_stock,
    estimate_weekly_demand,
    estimate_weekly_demand_std_dev,
    floored_std_dev,
    robust_weekly_demand,
    weekly_demand,
    window_start,
)
from analytics.policy import ReplenishmentPolicy
from analytics.readers import LedgerRow
from analytics.tests.fakes import AS_OF, InMemoryLedgerStore
from common.choices import AbcClass, LedgerKind

POLICY = ReplenishmentPolicy()


def test_window_starts_at_utc_day_boundary():
    since = window_start(AS_OF, lookback_days=84)
    assert since == dt.datetime(2025, 1, 6, tzinfo=dt.timezone.utc)


def test_bucket_weekly_demand_sums_outbound_per_week_and_skips_empty_weeks():
    since = dt.datetime(2025, 1, 6, tzinfo=dt.timezone.utc)
    entries = [
        LedgerRow(-5, LedgerKind.OUTBOUND, since + dt.timedelta(days=1)),
        LedgerRow(-7, LedgerKind.OUTBOUND, since + dt.timedelta(days=6)),
        LedgerRow(100, LedgerKind.INBOUND, since + dt.timedelta(days=2)),
        LedgerRow(-3, LedgerKind.ADJUST, since + dt.timedelta(days=3)),
        LedgerRow(-4, LedgerKind.OUTBOUND, since + dt.timedelta(days=22)),
    ]
    assert bucket_weekly_demand(entries, since) == [12.0, 4.0]


def test_robust_weekly_demand_blends_median_and_trimmed_mean():
    assert robust_weekly_demand([10, 20, 30, 40]) == pytest.approx(25.0)
    # A single spike barely moves the estimate
    assert robust_weekly_demand([5, 10, 10, 10, 100]) == pytest.approx(10.0)
    # Nothing survives the trim: the median stands in
    assert robust_weekly_demand([4, 8], median_weight=0.6) == pytest.approx(6.0)


def test_std_dev_is_floored_at_ten_percent_of_mean():
    assert floored_std_dev([10, 10, 10]) == pytest.approx(1.0)
    assert floored_std_dev([0, 20]) == pytest.approx(14.142, rel=1e-3)
    # One week has no spread; only the floor remains
    assert floored_std_dev([40]) == pytest.approx(4.0)


def test_estimators_return_plain_floats():
    assert type(robust_weekly_demand([3, 7, 9, 12])) is float
    assert type(floored_std_dev([3, 7, 9, 12])) is float


def test_sparse_history_falls_back_to_class_default():
    store = InMemoryLedgerStore()
    store.add_item(1, abc_class=AbcClass.A)
    store.ship_weekly(1, [30, 30, 30])

    demand = estimate_weekly_demand(1, reader=store.reader(), as_of=AS_OF, policy=POLICY)
    assert demand.value == 25.0
    assert demand.weeks_observed == 3
    assert demand.degraded is True


def test_std_dev_fallback_uses_class_cv():
    store = InMemoryLedgerStore()
    store.add_item(1, abc_class=AbcClass.A)
    store.ship_weekly(1, [30])
    sigma = estimate_weekly_demand_std_dev(1, reader=store.reader(), as_of=AS_OF, policy=POLICY)
    assert sigma.value == pytest.approx(10.0)
    assert sigma.degraded is True


def test_demand_from_full_history_ignores_entries_outside_window():
    store = InMemoryLedgerStore()
    store.add_item(1, abc_class=AbcClass.C)
    store.ship_weekly(1, [12] * 12)
    store.ship(1, 500, AS_OF - dt.timedelta(weeks=13))

    demand = estimate_weekly_demand(1, reader=store.reader(), as_of=AS_OF, policy=POLICY)
    assert demand.value == pytest.approx(12.0)
    assert demand.weeks_observed == 12
    assert demand.degraded is False


def test_unknown_item_demand_uses_unknown_class_default():
    store = InMemoryLedgerStore()
    assert weekly_demand(99, reader=store.reader(), as_of=AS_OF, policy=POLICY) == 10.0


def test_current_stock_is_clamped_and_survives_read_failures():
    store = InMemoryLedgerStore()
    store.add_item(1)
    store.receive(1, 5)
    store.adjust(1, -9)
    assert current_stock(1, reader=store.reader()) == 0

    store.add_item(2)
    store.receive(2, 5)
    store.broken_items.add(2)
    assert current_stock(2, reader=store.reader()) == 0
