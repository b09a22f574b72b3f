"""Read-only analytics endpoints over the cached inventory snapshot."""

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema, inline_serializer
from inventory.exceptions import StorageFailureError
from rest_framework import serializers as rf_serializers
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from . import services
from .serializers import (
    AbcReportSerializer,
    DemandAnalysisSerializer,
    ExpiringBatchRecordSerializer,
    InventoryReportSerializer,
    RecommendationSerializer,
    SnapshotSerializer,
)
from .snapshot import get_snapshot

RECOMMENDATION_ERROR_STATUS = {
    "not_found": status.HTTP_404_NOT_FOUND,
    "storage_failure": status.HTTP_503_SERVICE_UNAVAILABLE,
}

ErrorResponse = inline_serializer(
    name="AnalyticsErrorResponse",
    fields={"detail": rf_serializers.CharField(), "field": rf_serializers.CharField(allow_null=True)},
)


def storage_unavailable(exc: StorageFailureError) -> Response:
    return Response({"detail": exc.message or str(exc), "field": None}, status=status.HTTP_503_SERVICE_UNAVAILABLE)


class AnalyticsView(APIView):
    throttle_scope = "analytics"

    def handle_exception(self, exc):
        if isinstance(exc, StorageFailureError):
            return storage_unavailable(exc)
        return super().handle_exception(exc)


class SnapshotView(AnalyticsView):
    @extend_schema(
        tags=["Analytics Endpoints"],
        summary="Inventory snapshot",
        description=(
            "Per-flower stock, demand, safety stock, stock status, expiring batches and replenishment "
            "recommendation. Served from a short-lived cache; may lag recent writes by up to the cache TTL."
        ),
        responses={200: SnapshotSerializer, 503: ErrorResponse},
    )
    def get(self, request):
        return Response(SnapshotSerializer(get_snapshot()).data)


class RecommendationView(AnalyticsView):
    @extend_schema(
        tags=["Analytics Endpoints"],
        summary="Replenishment recommendation",
        description="Computed fresh from the ledger. Unknown flowers return 404 with an error-level body.",
        responses={200: RecommendationSerializer, 404: RecommendationSerializer, 503: RecommendationSerializer},
        examples=[
            OpenApiExample(
                "Suggested",
                value={
                    "item_id": 1,
                    "item_name": "Rose",
                    "current_stock": 5,
                    "safety_stock": 20.0,
                    "weekly_demand": 10.0,
                    "need_replenishment": True,
                    "level": "suggested",
                    "level_label": "Replenishment suggested",
                    "priority": 3,
                    "reason": "Suggested: stock 5 is below safety stock",
                    "suggested_order_qty": 29,
                    "expected_pass_qty": 23,
                    "shortage": 15,
                    "stock_coverage_days": 3.5,
                    "success": True,
                    "error_message": "",
                    "error_code": None,
                    "degraded": False,
                },
                response_only=True,
            )
        ],
    )
    def get(self, request, flower_id: int):
        recommendation = services.get_recommendation(flower_id)
        code = status.HTTP_200_OK
        if not recommendation.success:
            code = RECOMMENDATION_ERROR_STATUS.get(recommendation.error_code, status.HTTP_503_SERVICE_UNAVAILABLE)
        return Response(RecommendationSerializer(recommendation).data, status=code)


class DemandAnalysisView(AnalyticsView):
    @extend_schema(
        tags=["Analytics Endpoints"],
        summary="Demand analysis",
        description="Average weekly demand, variability, reorder point and review frequency per flower.",
        responses={200: DemandAnalysisSerializer(many=True), 503: ErrorResponse},
    )
    def get(self, request):
        return Response(DemandAnalysisSerializer(services.get_demand_analysis(), many=True).data)


class AbcReportView(AnalyticsView):
    @extend_schema(
        tags=["Analytics Endpoints"],
        summary="ABC classification",
        description="Flowers classified by share of total stock value (A up to 80%, B up to 95%, C beyond).",
        responses={200: AbcReportSerializer, 503: ErrorResponse},
    )
    def get(self, request):
        return Response(AbcReportSerializer(services.get_abc_report()).data)


class InventoryReportView(AnalyticsView):
    @extend_schema(
        tags=["Analytics Endpoints"],
        summary="Inventory report",
        description="Inventory-wide totals and the replenishment list ordered by urgency.",
        responses={200: InventoryReportSerializer, 503: ErrorResponse},
    )
    def get(self, request):
        return Response(InventoryReportSerializer(services.get_inventory_report()).data)


class ExpiringBatchesView(AnalyticsView):
    @extend_schema(
        tags=["Analytics Endpoints"],
        summary="Expiring batches",
        description="Shelf batches expiring within `days` (defaults to ANALYTICS_EXPIRY_WINDOW_DAYS).",
        parameters=[OpenApiParameter("days", OpenApiTypes.INT, location="query", description="Window in days")],
        responses={200: ExpiringBatchRecordSerializer(many=True), 400: ErrorResponse},
    )
    def get(self, request):
        days = request.query_params.get("days")
        within_days = None
        if days is not None:
            if not days.isdigit():
                return Response(
                    {"detail": "days must be a non-negative integer", "field": "days"},
                    status=status.HTTP_400_BAD_REQUEST,
                )
            within_days = int(days)
        qs = services.list_expiring(within_days=within_days)
        return Response(ExpiringBatchRecordSerializer(qs, many=True).data)


# EOF
