from django.urls import path

from .views import (
    AbcReportView,
    DemandAnalysisView,
    ExpiringBatchesView,
    InventoryReportView,
    RecommendationView,
    SnapshotView,
)

urlpatterns = [
    path("snapshot/", SnapshotView.as_view(), name="analytics-snapshot"),
    path("recommendations/<int:flower_id>/", RecommendationView.as_view(), name="analytics-recommendation"),
    path("demand-analysis/", DemandAnalysisView.as_view(), name="analytics-demand-analysis"),
    path("abc-report/", AbcReportView.as_view(), name="analytics-abc-report"),
    path("report/", InventoryReportView.as_view(), name="analytics-report"),
    path("expiring/", ExpiringBatchesView.as_view(), name="analytics-expiring"),
]

# EOF
