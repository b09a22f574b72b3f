"""Serializers for inventory domain.

Read-only serializers for batches and ledger entries, input serializers for
the write endpoints, and result serializers for the typed operation results.
Range and business checks live in the services so that every caller gets
the same typed failure.
"""

from analytics.serializers import RecommendationSerializer
from rest_framework import serializers

from .models import Batch, LedgerEntry


class BatchSerializer(serializers.ModelSerializer):
    """Read-only representation of a batch with its flower name and failed quantity."""

    flower_name = serializers.CharField(source="flower.name", read_only=True)
    quantity_failed = serializers.IntegerField(read_only=True)

    class Meta:
        model = Batch
        fields = [
            "id",
            "flower",
            "flower_name",
            "batch_no",
            "quantity_received",
            "quantity_passed",
            "quantity_failed",
            "received_date",
            "expiry_date",
            "inspection_note",
            "inspected_at",
            "state",
        ]
        read_only_fields = fields


class LedgerEntrySerializer(serializers.ModelSerializer):
    """Read-only representation of ledger entries."""

    class Meta:
        model = LedgerEntry
        fields = [
            "id",
            "flower",
            "batch",
            "kind",
            "delta_qty",
            "reason",
            "occurred_at",
        ]
        read_only_fields = fields


class ReceiveBatchSerializer(serializers.Serializer):
    flower_id = serializers.IntegerField()
    quantity_received = serializers.IntegerField()
    received_date = serializers.DateField(required=False, allow_null=True)
    expiry_date = serializers.DateField(required=False, allow_null=True)
    batch_no = serializers.CharField(required=False, allow_blank=True, max_length=40, default="")


class InspectionSerializer(serializers.Serializer):
    passed_qty = serializers.IntegerField()
    note = serializers.CharField(allow_blank=True, max_length=500)


class StockAdjustmentSerializer(serializers.Serializer):
    flower_id = serializers.IntegerField()
    delta_qty = serializers.IntegerField()
    reason = serializers.CharField(allow_blank=True, max_length=300)


class ShipmentSerializer(serializers.Serializer):
    flower_id = serializers.IntegerField()
    quantity = serializers.IntegerField()
    reason = serializers.CharField(required=False, allow_blank=True, max_length=200, default="sale")
    customer_name = serializers.CharField(required=False, allow_blank=True, max_length=120, default="")


class InspectionResultSerializer(serializers.Serializer):
    success = serializers.BooleanField()
    message = serializers.CharField()
    batch_id = serializers.IntegerField(allow_null=True)
    batch_no = serializers.CharField()
    flower_name = serializers.CharField()
    received_qty = serializers.IntegerField()
    passed_qty = serializers.IntegerField()
    failed_qty = serializers.IntegerField()
    pass_rate = serializers.DecimalField(max_digits=5, decimal_places=4)
    inspected_at = serializers.DateTimeField(allow_null=True)


class StockAdjustmentResultSerializer(serializers.Serializer):
    success = serializers.BooleanField()
    message = serializers.CharField()
    flower_id = serializers.IntegerField(allow_null=True)
    flower_name = serializers.CharField()
    old_stock = serializers.IntegerField()
    new_stock = serializers.IntegerField()
    adjustment_qty = serializers.IntegerField()
    reason = serializers.CharField()
    adjusted_at = serializers.DateTimeField(allow_null=True)


class ShipmentResultSerializer(serializers.Serializer):
    success = serializers.BooleanField()
    message = serializers.CharField()
    flower_id = serializers.IntegerField(allow_null=True)
    flower_name = serializers.CharField()
    quantity = serializers.IntegerField()
    remaining_stock = serializers.IntegerField()
    shipped_at = serializers.DateTimeField(allow_null=True)
    recommendation = RecommendationSerializer(allow_null=True)


# EOF
