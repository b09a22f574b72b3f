import datetime as dt
from io import StringIO

import pytest
from analytics import views
from catalog.tests.factories import FlowerFactory
from common.choices import AbcClass
from django.core.management import call_command
from django.utils import timezone
from inventory.exceptions import StorageFailureError
from inventory.models import Batch, LedgerEntry
from inventory.tests.factories import BatchFactory, LedgerEntryFactory
from rest_framework.test import APIClient
from rest_framework.throttling import ScopedRateThrottle


@pytest.fixture
def stocked():
    rose = FlowerFactory(name="Rose", abc_class=AbcClass.A, price="3.00")
    tulip = FlowerFactory(name="Tulip", abc_class=AbcClass.C, price="1.00")
    LedgerEntryFactory(flower=rose, delta_qty=100)
    now = timezone.now()
    for weeks_back in range(1, 7):
        LedgerEntryFactory(
            flower=rose,
            kind=LedgerEntry.KIND_OUTBOUND,
            delta_qty=-10,
            occurred_at=now - dt.timedelta(weeks=weeks_back),
        )
    return rose, tulip


@pytest.mark.django_db
def test_snapshot_endpoint(stocked):
    rose, tulip = stocked
    resp = APIClient().get("/api/v1/analytics/snapshot/")
    assert resp.status_code == 200
    body = resp.json()
    assert body["failed_item_ids"] == []
    rows = {row["item_id"]: row for row in body["rows"]}
    assert rows[rose.id]["current_stock"] == 40
    assert rows[rose.id]["weekly_demand"] == pytest.approx(10.0)
    assert rows[tulip.id]["stock_status"] == "out_of_stock"
    assert rows[tulip.id]["recommendation"]["level"] == "critical"


@pytest.mark.django_db
def test_recommendation_endpoint(stocked):
    rose, _ = stocked
    client = APIClient()
    resp = client.get(f"/api/v1/analytics/recommendations/{rose.id}/")
    assert resp.status_code == 200
    assert resp.json()["item_id"] == rose.id
    assert resp.json()["success"] is True
    # Fresh computation, repeated reads agree
    assert client.get(f"/api/v1/analytics/recommendations/{rose.id}/").json() == resp.json()


@pytest.mark.django_db
def test_recommendation_for_unknown_flower_is_404():
    resp = APIClient().get("/api/v1/analytics/recommendations/999999/")
    assert resp.status_code == 404
    assert resp.json()["level"] == "error"
    assert resp.json()["error_code"] == "not_found"


@pytest.mark.django_db
def test_recommendation_reflects_ledger_immediately(stocked):
    _, tulip = stocked
    client = APIClient()
    assert client.get(f"/api/v1/analytics/recommendations/{tulip.id}/").json()["level"] == "critical"
    LedgerEntryFactory(flower=tulip, delta_qty=500)
    assert client.get(f"/api/v1/analytics/recommendations/{tulip.id}/").json()["need_replenishment"] is False


@pytest.mark.django_db
def test_abc_and_demand_endpoints(stocked):
    rose, tulip = stocked
    client = APIClient()

    resp = client.get("/api/v1/analytics/abc-report/")
    assert resp.status_code == 200
    body = resp.json()
    assert body["total_items"] == 2
    assert [item["item_id"] for item in body["items"]] == [rose.id, tulip.id]
    assert body["items"][0]["abc_class"] == "C"

    resp = client.get("/api/v1/analytics/demand-analysis/")
    assert resp.status_code == 200
    by_id = {row["item_id"]: row for row in resp.json()}
    assert by_id[tulip.id]["degraded"] is True
    assert by_id[tulip.id]["average_weekly_demand"] == 8.0


@pytest.mark.django_db
def test_inventory_report_endpoint(stocked):
    _, tulip = stocked
    resp = APIClient().get("/api/v1/analytics/report/")
    assert resp.status_code == 200
    body = resp.json()
    assert body["total_flowers"] == 2
    assert body["out_of_stock_count"] == 1
    assert body["service_level"] == pytest.approx(0.5)
    assert body["replenishment_list"][0]["item_id"] == tulip.id


@pytest.mark.django_db
def test_expiring_batches_endpoint():
    today = timezone.localdate()
    soon = BatchFactory(state=Batch.STATE_ACTIVE, quantity_passed=10, expiry_date=today + dt.timedelta(days=2))
    BatchFactory(state=Batch.STATE_ACTIVE, quantity_passed=10, expiry_date=today + dt.timedelta(days=20))
    BatchFactory(state=Batch.STATE_RECEIVED, expiry_date=today + dt.timedelta(days=1))
    client = APIClient()

    resp = client.get("/api/v1/analytics/expiring/")
    assert resp.status_code == 200
    assert [b["id"] for b in resp.json()] == [soon.id]

    assert client.get("/api/v1/analytics/expiring/?days=1").json() == []
    assert len(client.get("/api/v1/analytics/expiring/?days=30").json()) == 2

    resp = client.get("/api/v1/analytics/expiring/?days=soon")
    assert resp.status_code == 400
    assert resp.json()["field"] == "days"


@pytest.mark.django_db
def test_storage_failure_maps_to_503(monkeypatch):
    def unavailable(**kwargs):
        raise StorageFailureError("Ledger store unavailable")

    monkeypatch.setattr(views, "get_snapshot", unavailable)
    resp = APIClient().get("/api/v1/analytics/snapshot/")
    assert resp.status_code == 503
    assert resp.json()["detail"] == "Ledger store unavailable"


@pytest.mark.django_db
def test_analytics_scope_throttling(monkeypatch):
    monkeypatch.setattr(ScopedRateThrottle, "THROTTLE_RATES", {"analytics": "1/min"})
    client = APIClient()
    assert client.get("/api/v1/analytics/report/").status_code == 200
    assert client.get("/api/v1/analytics/report/").status_code == 429


@pytest.mark.django_db
def test_refresh_snapshot_command(stocked):
    _, tulip = stocked
    out = StringIO()
    call_command("refresh_snapshot", stdout=out)
    output = out.getvalue()
    assert "Flowers: 2" in output
    assert "[critical] Tulip" in output
    assert "Snapshot refreshed" in output


# EOF
