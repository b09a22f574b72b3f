"""Inventory health, batch and ledger list views, and write endpoints.

Write endpoints return the typed operation results. Failures map to
404 (``not_found``), 400 (``invalid_input``) or 503 (``storage_failure``)
with a ``{"detail", "field"}`` body.
"""

from django_filters import rest_framework as filters
from drf_spectacular.utils import OpenApiExample, extend_schema, inline_serializer
from rest_framework import generics, status
from rest_framework import serializers as rf_serializers
from rest_framework.response import Response
from rest_framework.views import APIView

from . import services
from .exceptions import InventoryError
from .models import Batch, LedgerEntry
from .serializers import (
    BatchSerializer,
    InspectionResultSerializer,
    InspectionSerializer,
    LedgerEntrySerializer,
    ReceiveBatchSerializer,
    ShipmentResultSerializer,
    ShipmentSerializer,
    StockAdjustmentResultSerializer,
    StockAdjustmentSerializer,
)

ERROR_STATUS = {
    "not_found": status.HTTP_404_NOT_FOUND,
    "invalid_input": status.HTTP_400_BAD_REQUEST,
    "storage_failure": status.HTTP_503_SERVICE_UNAVAILABLE,
}

ErrorResponse = inline_serializer(
    name="InventoryErrorResponse",
    fields={"detail": rf_serializers.CharField(), "field": rf_serializers.CharField(allow_null=True)},
)


def error_response(code: str, message: str, field=None) -> Response:
    return Response({"detail": message, "field": field}, status=ERROR_STATUS.get(code, status.HTTP_400_BAD_REQUEST))


def result_response(result, serializer_class, success_status=status.HTTP_200_OK) -> Response:
    if not result.success:
        return error_response(result.error_code, result.message, result.field)
    return Response(serializer_class(result).data, status=success_status)


class InventoryHealthView(APIView):
    throttle_classes = []

    @extend_schema(
        tags=["Inventory Endpoints"],
        summary="Inventory health",
        description="Simple healthcheck endpoint for the inventory app",
        examples=[OpenApiExample("Health OK", value={"status": "ok", "app": "inventory"})],
    )
    def get(self, request):
        return Response({"status": "ok", "app": "inventory"})


class BatchFilterSet(filters.FilterSet):
    flower_id = filters.NumberFilter(field_name="flower_id")
    expires_before = filters.DateFilter(field_name="expiry_date", lookup_expr="lte")

    class Meta:
        model = Batch
        fields = ["flower_id", "state", "expires_before"]


class BatchListCreateView(generics.ListAPIView):
    throttle_classes = []
    serializer_class = BatchSerializer
    filterset_class = BatchFilterSet

    def get_queryset(self):
        return Batch.objects.select_related("flower").order_by("-received_date", "-id")

    @extend_schema(
        tags=["Inventory Endpoints"],
        summary="List batches",
        description="List batches. Filters: flower_id, state, expires_before (date).",
    )
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    @extend_schema(
        tags=["Inventory Endpoints"],
        summary="Receive a batch",
        description=(
            "Register goods receipt for a flower. The batch starts in `received` with nothing passed; "
            "stock only enters the ledger once the batch is inspected. Expiry defaults to received date "
            "plus the flower's shelf life."
        ),
        request=ReceiveBatchSerializer,
        responses={201: BatchSerializer, 400: ErrorResponse, 404: ErrorResponse, 503: ErrorResponse},
        examples=[OpenApiExample("Receive", value={"flower_id": 1, "quantity_received": 50}, request_only=True)],
    )
    def post(self, request):
        serializer = ReceiveBatchSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            batch = services.receive_batch(**serializer.validated_data)
        except InventoryError as exc:
            return error_response(exc.code, exc.message, exc.field)
        return Response(BatchSerializer(batch).data, status=status.HTTP_201_CREATED)


class BatchInspectionView(APIView):
    throttle_classes = []

    @extend_schema(
        tags=["Inventory Endpoints"],
        summary="Record batch inspection",
        description=(
            "Record how many units of a received batch passed inspection. Appends an inbound ledger entry "
            "for the passed quantity and updates the flower's observed pass rate."
        ),
        request=InspectionSerializer,
        responses={200: InspectionResultSerializer, 400: ErrorResponse, 404: ErrorResponse, 503: ErrorResponse},
        examples=[
            OpenApiExample("Inspect", value={"passed_qty": 40, "note": "stems bruised"}, request_only=True),
            OpenApiExample(
                "Inspected",
                value={
                    "success": True,
                    "message": "Inspection completed: 40/50 passed (80.0%)",
                    "batch_id": 7,
                    "batch_no": "F0001-20250101-001",
                    "flower_name": "Rose",
                    "received_qty": 50,
                    "passed_qty": 40,
                    "failed_qty": 10,
                    "pass_rate": "0.8000",
                    "inspected_at": "2025-01-01T12:00:00Z",
                },
                response_only=True,
            ),
        ],
    )
    def post(self, request, batch_id: int):
        serializer = InspectionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = services.record_inspection(batch_id=batch_id, **serializer.validated_data)
        return result_response(result, InspectionResultSerializer)


class BatchActivateView(APIView):
    throttle_classes = []

    @extend_schema(
        tags=["Inventory Endpoints"],
        summary="Activate an inspected batch",
        request=None,
        responses={200: BatchSerializer, 400: ErrorResponse, 404: ErrorResponse},
    )
    def post(self, request, batch_id: int):
        try:
            batch = services.activate_batch(batch_id=batch_id)
        except InventoryError as exc:
            return error_response(exc.code, exc.message, exc.field)
        return Response(BatchSerializer(batch).data)


class LedgerEntryFilterSet(filters.FilterSet):
    flower_id = filters.NumberFilter(field_name="flower_id")
    occurred_after = filters.IsoDateTimeFilter(field_name="occurred_at", lookup_expr="gte")

    class Meta:
        model = LedgerEntry
        fields = ["flower_id", "kind", "occurred_after"]


class LedgerEntryListView(generics.ListAPIView):
    throttle_classes = []
    serializer_class = LedgerEntrySerializer
    filterset_class = LedgerEntryFilterSet

    @extend_schema(
        tags=["Inventory Endpoints"],
        summary="List ledger entries",
        description="List ledger entries, newest first. Filters: flower_id, kind, occurred_after (ISO).",
    )
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    def get_queryset(self):
        return LedgerEntry.objects.order_by("-occurred_at", "-id")


class StockAdjustmentView(APIView):
    throttle_classes = []

    @extend_schema(
        tags=["Inventory Endpoints"],
        summary="Adjust stock",
        description="Append a signed adjustment entry (stocktake correction, damage, loss). A reason is required.",
        request=StockAdjustmentSerializer,
        responses={201: StockAdjustmentResultSerializer, 400: ErrorResponse, 404: ErrorResponse, 503: ErrorResponse},
        examples=[
            OpenApiExample("Adjust", value={"flower_id": 1, "delta_qty": -3, "reason": "damaged"}, request_only=True)
        ],
    )
    def post(self, request):
        serializer = StockAdjustmentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = services.record_stock_adjustment(**serializer.validated_data)
        return result_response(result, StockAdjustmentResultSerializer, status.HTTP_201_CREATED)


class ShipmentView(APIView):
    throttle_classes = []

    @extend_schema(
        tags=["Inventory Endpoints"],
        summary="Ship goods",
        description=(
            "Append an outbound entry when stock covers the quantity. The response carries the "
            "replenishment recommendation computed after the shipment."
        ),
        request=ShipmentSerializer,
        responses={201: ShipmentResultSerializer, 400: ErrorResponse, 404: ErrorResponse, 503: ErrorResponse},
        examples=[OpenApiExample("Ship", value={"flower_id": 1, "quantity": 12}, request_only=True)],
    )
    def post(self, request):
        serializer = ShipmentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = services.record_shipment(**serializer.validated_data)
        return result_response(result, ShipmentResultSerializer, status.HTTP_201_CREATED)


# EOF
