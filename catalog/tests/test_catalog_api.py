import pytest
from catalog.tests.factories import FlowerFactory
from common.choices import AbcClass, FlowerCategory
from inventory.models import LedgerEntry
from inventory.tests.factories import LedgerEntryFactory
from rest_framework.test import APIClient


@pytest.mark.django_db
def test_flowers_list_reports_ledger_stock(django_assert_max_num_queries):
    rose = FlowerFactory(name="Rose")
    FlowerFactory(name="Tulip")
    LedgerEntryFactory(flower=rose, delta_qty=30)
    LedgerEntryFactory(flower=rose, kind=LedgerEntry.KIND_OUTBOUND, delta_qty=-12)

    client = APIClient()
    # Stock is annotated in the list query, not fetched per row
    with django_assert_max_num_queries(3):
        resp = client.get("/api/v1/catalog/flowers/?ordering=name")
    assert resp.status_code == 200
    results = resp.json()["results"]
    assert [r["name"] for r in results] == ["Rose", "Tulip"]
    assert [r["current_stock"] for r in results] == [18, 0]
    assert {"abc_class", "lead_time_days", "inspection_pass_rate", "seasonal_factor"} <= set(results[0].keys())


@pytest.mark.django_db
def test_flower_stock_never_negative():
    flower = FlowerFactory()
    LedgerEntryFactory(flower=flower, kind=LedgerEntry.KIND_ADJUST, delta_qty=-5)
    resp = APIClient().get(f"/api/v1/catalog/flowers/{flower.id}/")
    assert resp.status_code == 200
    assert resp.json()["current_stock"] == 0


@pytest.mark.django_db
def test_flowers_filter_search_and_ordering():
    FlowerFactory(
        name="Lily", variety="Stargazer", category=FlowerCategory.RELIGIOUS, abc_class=AbcClass.A, price="4.00"
    )
    FlowerFactory(name="Daisy", variety="Shasta", category=FlowerCategory.POPULAR, abc_class=AbcClass.C, price="1.00")
    client = APIClient()

    resp = client.get("/api/v1/catalog/flowers/?category=religious")
    assert [r["name"] for r in resp.json()["results"]] == ["Lily"]

    resp = client.get("/api/v1/catalog/flowers/?abc_class=C")
    assert [r["name"] for r in resp.json()["results"]] == ["Daisy"]

    resp = client.get("/api/v1/catalog/flowers/?search=stargazer")
    assert [r["name"] for r in resp.json()["results"]] == ["Lily"]

    resp = client.get("/api/v1/catalog/flowers/?ordering=-price")
    assert [r["name"] for r in resp.json()["results"]] == ["Lily", "Daisy"]


@pytest.mark.django_db
def test_flower_detail_not_found():
    assert APIClient().get("/api/v1/catalog/flowers/999999/").status_code == 404
