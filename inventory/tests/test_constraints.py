import pytest
from django.db import IntegrityError
from inventory.exceptions import LedgerImmutableError
from inventory.models import LedgerEntry
from inventory.tests.factories import BatchFactory, LedgerEntryFactory


@pytest.mark.django_db
def test_batch_passed_cannot_exceed_received():
    with pytest.raises(IntegrityError):
        BatchFactory(quantity_received=10, quantity_passed=11)


@pytest.mark.django_db
def test_batch_received_must_be_positive():
    with pytest.raises(IntegrityError):
        BatchFactory(quantity_received=0)


@pytest.mark.django_db
@pytest.mark.parametrize(
    "kind,delta",
    [(LedgerEntry.KIND_INBOUND, -5), (LedgerEntry.KIND_OUTBOUND, 5), (LedgerEntry.KIND_ADJUST, 0)],
)
def test_ledger_sign_must_match_kind(kind, delta):
    with pytest.raises(IntegrityError):
        LedgerEntryFactory(kind=kind, delta_qty=delta)


@pytest.mark.django_db
def test_ledger_entries_are_immutable():
    entry = LedgerEntryFactory(delta_qty=10)
    entry.delta_qty = 20
    with pytest.raises(LedgerImmutableError):
        entry.save()
    with pytest.raises(LedgerImmutableError):
        entry.delete()
    entry.refresh_from_db()
    assert entry.delta_qty == 10
