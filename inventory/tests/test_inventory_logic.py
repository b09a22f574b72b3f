import datetime as dt
from decimal import Decimal

import pytest
from catalog.tests.factories import FlowerFactory
from common.choices import RecommendationLevel
from inventory.exceptions import InvalidInputError, NotFoundError
from inventory.models import Batch, LedgerEntry
from inventory.selectors import current_stock_for_flower, net_ledger_quantity
from inventory.services import (
    activate_batch,
    adjust_stock,
    append_ledger_entry,
    inspect_batch,
    receive_batch,
    record_inspection,
    record_shipment,
    record_stock_adjustment,
)
from inventory.tests.factories import BatchFactory, LedgerEntryFactory


@pytest.mark.django_db
def test_receive_batch_defaults_expiry_and_batch_number():
    flower = FlowerFactory(shelf_life_days=10)
    batch = receive_batch(flower_id=flower.id, quantity_received=50, received_date=dt.date(2025, 1, 1))
    assert batch.state == Batch.STATE_RECEIVED
    assert batch.quantity_passed == 0
    assert batch.expiry_date == dt.date(2025, 1, 11)
    assert batch.batch_no == f"F{flower.id:04d}-20250101-001"
    second = receive_batch(flower_id=flower.id, quantity_received=5, received_date=dt.date(2025, 1, 1))
    assert second.batch_no.endswith("-002")
    # Receipt alone never moves stock
    assert current_stock_for_flower(flower.id) == 0


@pytest.mark.django_db
@pytest.mark.parametrize("qty", [0, -1, 10001])
def test_receive_batch_rejects_out_of_range_quantity(qty):
    flower = FlowerFactory()
    with pytest.raises(InvalidInputError) as exc:
        receive_batch(flower_id=flower.id, quantity_received=qty)
    assert exc.value.field == "quantity_received"


@pytest.mark.django_db
def test_receive_batch_unknown_flower():
    with pytest.raises(NotFoundError):
        receive_batch(flower_id=999999, quantity_received=5)


@pytest.mark.django_db
def test_inspection_round_trip_adds_passed_quantity_to_stock():
    flower = FlowerFactory(inspection_pass_rate=Decimal("0.50"))
    LedgerEntryFactory(flower=flower, delta_qty=7)
    batch = receive_batch(flower_id=flower.id, quantity_received=50)
    before = current_stock_for_flower(flower.id)

    result = record_inspection(batch_id=batch.id, passed_qty=40, note="stems bruised")

    assert result.success is True
    assert result.passed_qty == 40
    assert result.failed_qty == 10
    assert result.pass_rate == Decimal("0.8000")
    assert current_stock_for_flower(flower.id) == before + 40
    flower.refresh_from_db()
    assert flower.inspection_pass_rate == Decimal("0.80")
    batch.refresh_from_db()
    assert batch.state == Batch.STATE_INSPECTED
    entry = LedgerEntry.objects.get(batch=batch)
    assert entry.kind == LedgerEntry.KIND_INBOUND
    assert entry.delta_qty == 40


@pytest.mark.django_db
def test_inspection_passed_above_received_is_invalid_and_writes_nothing():
    batch = BatchFactory(quantity_received=50)
    result = record_inspection(batch_id=batch.id, passed_qty=60, note="count error")
    assert result.success is False
    assert result.error_code == "invalid_input"
    assert result.field == "passed_qty"
    assert LedgerEntry.objects.count() == 0
    batch.refresh_from_db()
    assert batch.state == Batch.STATE_RECEIVED


@pytest.mark.django_db
def test_inspection_requires_note():
    batch = BatchFactory()
    result = record_inspection(batch_id=batch.id, passed_qty=10, note="   ")
    assert result.success is False
    assert result.error_code == "invalid_input"
    assert result.field == "note"


@pytest.mark.django_db
def test_inspection_unknown_batch_is_not_found():
    result = record_inspection(batch_id=424242, passed_qty=1, note="x")
    assert result.success is False
    assert result.error_code == "not_found"


@pytest.mark.django_db
def test_batch_cannot_be_inspected_twice():
    batch = BatchFactory(quantity_received=20)
    inspect_batch(batch_id=batch.id, passed_qty=20, note="ok")
    with pytest.raises(InvalidInputError):
        inspect_batch(batch_id=batch.id, passed_qty=20, note="again")
    assert net_ledger_quantity(batch.flower_id) == 20


@pytest.mark.django_db
def test_zero_pass_inspection_records_rate_without_ledger_entry():
    batch = BatchFactory(quantity_received=20)
    inspect_batch(batch_id=batch.id, passed_qty=0, note="all wilted")
    batch.flower.refresh_from_db()
    assert batch.flower.inspection_pass_rate == Decimal("0.00")
    assert LedgerEntry.objects.count() == 0


@pytest.mark.django_db
def test_activate_requires_inspected_batch():
    batch = BatchFactory(quantity_received=10)
    with pytest.raises(InvalidInputError):
        activate_batch(batch_id=batch.id)
    inspect_batch(batch_id=batch.id, passed_qty=10, note="ok")
    assert activate_batch(batch_id=batch.id).state == Batch.STATE_ACTIVE


@pytest.mark.django_db
def test_stock_adjustment_reports_old_and_new_stock():
    flower = FlowerFactory()
    LedgerEntryFactory(flower=flower, delta_qty=30)
    result = record_stock_adjustment(flower_id=flower.id, delta_qty=-4, reason="stocktake")
    assert result.success is True
    assert (result.old_stock, result.new_stock) == (30, 26)
    entry = LedgerEntry.objects.filter(kind=LedgerEntry.KIND_ADJUST).get()
    assert entry.delta_qty == -4
    assert "stocktake" in entry.reason


@pytest.mark.django_db
@pytest.mark.parametrize(
    "delta,reason,field",
    [(0, "stocktake", "delta_qty"), (5, "", "reason")],
)
def test_stock_adjustment_validation(delta, reason, field):
    flower = FlowerFactory()
    result = record_stock_adjustment(flower_id=flower.id, delta_qty=delta, reason=reason)
    assert result.success is False
    assert result.error_code == "invalid_input"
    assert result.field == field
    assert LedgerEntry.objects.count() == 0


@pytest.mark.django_db
def test_negative_net_ledger_is_reported_as_zero_stock():
    flower = FlowerFactory()
    LedgerEntryFactory(flower=flower, delta_qty=3)
    _, old, new = adjust_stock(flower_id=flower.id, delta_qty=-10, reason="loss")
    assert (old, new) == (3, 0)
    assert net_ledger_quantity(flower.id) == -7
    assert current_stock_for_flower(flower.id) == 0


@pytest.mark.django_db
def test_shipment_with_insufficient_stock_is_rejected():
    flower = FlowerFactory()
    LedgerEntryFactory(flower=flower, delta_qty=5)
    result = record_shipment(flower_id=flower.id, quantity=6)
    assert result.success is False
    assert result.error_code == "invalid_input"
    assert result.field == "quantity"
    assert current_stock_for_flower(flower.id) == 5


@pytest.mark.django_db
def test_shipment_appends_outbound_entry_and_returns_recommendation():
    flower = FlowerFactory(name="Rose")
    LedgerEntryFactory(flower=flower, delta_qty=12)
    result = record_shipment(flower_id=flower.id, quantity=12, customer_name="Bloom & Co")

    assert result.success is True
    assert result.remaining_stock == 0
    entry = LedgerEntry.objects.filter(kind=LedgerEntry.KIND_OUTBOUND).get()
    assert entry.delta_qty == -12
    assert "Bloom & Co" in entry.reason
    assert result.recommendation is not None
    assert result.recommendation.item_id == flower.id
    assert result.recommendation.level == RecommendationLevel.CRITICAL


@pytest.mark.django_db
def test_shipment_unknown_flower_is_not_found():
    result = record_shipment(flower_id=999999, quantity=1)
    assert result.success is False
    assert result.error_code == "not_found"


@pytest.mark.django_db
@pytest.mark.parametrize(
    "kind,delta",
    [(LedgerEntry.KIND_INBOUND, -1), (LedgerEntry.KIND_OUTBOUND, 1), (LedgerEntry.KIND_ADJUST, 0), ("move", 1)],
)
def test_append_ledger_entry_enforces_sign_by_kind(kind, delta):
    flower = FlowerFactory()
    with pytest.raises(InvalidInputError):
        append_ledger_entry(flower_id=flower.id, kind=kind, delta_qty=delta)


# EOF
