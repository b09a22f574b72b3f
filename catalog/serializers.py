"""Serializers for the catalog app (read-only)."""

from rest_framework import serializers

from .models import Flower


class FlowerSerializer(serializers.ModelSerializer):
    current_stock = serializers.SerializerMethodField()

    class Meta:
        model = Flower
        fields = [
            "id",
            "name",
            "variety",
            "category",
            "abc_class",
            "shelf_life_days",
            "price",
            "seasonal_factor",
            "inspection_pass_rate",
            "lead_time_days",
            "review_cycle_weeks",
            "current_stock",
        ]
        read_only_fields = fields

    def get_current_stock(self, obj) -> int:
        return max(0, int(getattr(obj, "net_ledger_quantity", 0) or 0))
