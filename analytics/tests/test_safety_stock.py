import pytest
from analytics.policy import ReplenishmentPolicy
from analytics.safety_stock import compute_safety_stock, lead_time_weeks, safety_stock
from analytics.tests.fakes import AS_OF, InMemoryLedgerStore
from common.choices import AbcClass

POLICY = ReplenishmentPolicy()


def ss(**overrides):
    values = dict(sigma=10.0, lead_time_days=7, seasonal_factor=1.0, pass_rate=0.8, policy=POLICY)
    values.update(overrides)
    return compute_safety_stock(**values)


def test_safety_stock_formula():
    # 1.65 * sqrt(1) * 10 * 1.0 / 0.8 = 20.625
    assert ss() == 21.0


def test_safety_stock_is_at_least_one():
    assert ss(sigma=0.0) == 1.0


def test_zero_pass_rate_is_clamped():
    assert ss(sigma=1.0, pass_rate=0.0) == 17.0


def test_lead_time_is_clamped_to_policy_bounds():
    assert lead_time_weeks(0, POLICY) == pytest.approx(1 / 7)
    assert lead_time_weeks(90, POLICY) == pytest.approx(30 / 7)


def test_safety_stock_monotone_in_lead_time_sigma_and_service_level():
    by_lead_time = [ss(lead_time_days=days) for days in range(1, 45)]
    assert by_lead_time == sorted(by_lead_time)

    by_sigma = [ss(sigma=sigma) for sigma in (0, 0.5, 1, 5, 10, 50)]
    assert by_sigma == sorted(by_sigma)

    levels = (0.5, 0.8, 0.85, 0.9, 0.92, 0.95, 0.975, 0.99, 0.999)
    by_level = [ss(policy=ReplenishmentPolicy(service_level=level)) for level in levels]
    assert by_level == sorted(by_level)


def test_safety_stock_for_item_reads_through_reader():
    store = InMemoryLedgerStore()
    store.add_item(1, abc_class=AbcClass.B, pass_rate=1.0)
    store.ship_weekly(1, [10] * 6)
    # Flat demand: sigma floored at 1.0
    assert safety_stock(1, reader=store.reader(), as_of=AS_OF, policy=POLICY) == 2.0


def test_safety_stock_falls_back_to_default_demand_on_failure():
    store = InMemoryLedgerStore()
    store.add_item(1, abc_class=AbcClass.A)
    store.broken_items.add(1)
    assert safety_stock(1, reader=store.reader(), as_of=AS_OF, policy=POLICY) == 10.0
    profile = store.items[1]
    assert safety_stock(profile, reader=store.reader(), as_of=AS_OF, policy=POLICY) >= 1.0
