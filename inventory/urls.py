from django.urls import path

from .views import (
    BatchActivateView,
    BatchInspectionView,
    BatchListCreateView,
    InventoryHealthView,
    LedgerEntryListView,
    ShipmentView,
    StockAdjustmentView,
)

urlpatterns = [
    path("health/", InventoryHealthView.as_view(), name="inventory-health"),
    path("batches/", BatchListCreateView.as_view(), name="batch-list"),
    path("batches/<int:batch_id>/inspection/", BatchInspectionView.as_view(), name="batch-inspection"),
    path("batches/<int:batch_id>/activate/", BatchActivateView.as_view(), name="batch-activate"),
    # Read-only ledger
    path("ledger/", LedgerEntryListView.as_view(), name="ledger-list"),
    path("adjustments/", StockAdjustmentView.as_view(), name="stock-adjustment"),
    path("shipments/", ShipmentView.as_view(), name="shipment"),
]

# EOF
