"""Read-only serializers for analytics results (frozen dataclasses, not models)."""

from rest_framework import serializers


class RecommendationSerializer(serializers.Serializer):
    item_id = serializers.IntegerField()
    item_name = serializers.CharField()
    current_stock = serializers.IntegerField()
    safety_stock = serializers.FloatField()
    weekly_demand = serializers.FloatField()
    need_replenishment = serializers.BooleanField()
    level = serializers.CharField()
    level_label = serializers.CharField()
    priority = serializers.IntegerField()
    reason = serializers.CharField()
    suggested_order_qty = serializers.IntegerField()
    expected_pass_qty = serializers.IntegerField()
    shortage = serializers.IntegerField()
    stock_coverage_days = serializers.FloatField()
    success = serializers.BooleanField()
    error_message = serializers.CharField()
    error_code = serializers.CharField(allow_null=True)
    degraded = serializers.BooleanField()


class ExpiringBatchSerializer(serializers.Serializer):
    batch_id = serializers.IntegerField()
    batch_no = serializers.CharField()
    quantity = serializers.IntegerField()
    expiry_date = serializers.DateField()
    days_until_expiry = serializers.IntegerField()


class SnapshotRowSerializer(serializers.Serializer):
    item_id = serializers.IntegerField()
    item_name = serializers.CharField()
    variety = serializers.CharField()
    category = serializers.CharField()
    abc_class = serializers.CharField(allow_null=True)
    unit_price = serializers.DecimalField(max_digits=10, decimal_places=2)
    pass_rate = serializers.FloatField()
    lead_time_days = serializers.IntegerField()
    current_stock = serializers.IntegerField()
    total_value = serializers.DecimalField(max_digits=14, decimal_places=2)
    safety_stock = serializers.FloatField()
    weekly_demand = serializers.FloatField()
    weekly_demand_std_dev = serializers.FloatField()
    weeks_observed = serializers.IntegerField()
    stock_status = serializers.CharField()
    degraded = serializers.BooleanField()
    recommendation = RecommendationSerializer()
    expiring_batches = ExpiringBatchSerializer(many=True)


class SnapshotSerializer(serializers.Serializer):
    as_of = serializers.DateTimeField()
    generated_at = serializers.DateTimeField()
    failed_item_ids = serializers.ListField(child=serializers.IntegerField())
    rows = SnapshotRowSerializer(many=True)


class DemandAnalysisSerializer(serializers.Serializer):
    item_id = serializers.IntegerField()
    item_name = serializers.CharField()
    abc_class = serializers.CharField(allow_null=True)
    average_weekly_demand = serializers.FloatField()
    std_dev = serializers.FloatField()
    coefficient_of_variation = serializers.FloatField()
    safety_stock = serializers.FloatField()
    reorder_point = serializers.FloatField()
    demand_pattern = serializers.CharField()
    variability_level = serializers.CharField()
    service_level = serializers.FloatField()
    review_frequency_days = serializers.IntegerField()
    weeks_observed = serializers.IntegerField()
    degraded = serializers.BooleanField()


class AbcItemSerializer(serializers.Serializer):
    item_id = serializers.IntegerField()
    item_name = serializers.CharField()
    category = serializers.CharField()
    current_stock = serializers.IntegerField()
    unit_price = serializers.DecimalField(max_digits=10, decimal_places=2)
    total_value = serializers.DecimalField(max_digits=14, decimal_places=2)
    value_percentage = serializers.DecimalField(max_digits=7, decimal_places=2)
    cumulative_percentage = serializers.DecimalField(max_digits=7, decimal_places=2)
    abc_class = serializers.CharField()
    management_strategy = serializers.CharField()
    review_days = serializers.IntegerField()


class AbcReportSerializer(serializers.Serializer):
    total_items = serializers.IntegerField()
    total_value = serializers.DecimalField(max_digits=16, decimal_places=2)
    class_a_count = serializers.IntegerField()
    class_b_count = serializers.IntegerField()
    class_c_count = serializers.IntegerField()
    class_a_value = serializers.DecimalField(max_digits=16, decimal_places=2)
    class_b_value = serializers.DecimalField(max_digits=16, decimal_places=2)
    class_c_value = serializers.DecimalField(max_digits=16, decimal_places=2)
    class_a_percentage = serializers.DecimalField(max_digits=7, decimal_places=2)
    class_b_percentage = serializers.DecimalField(max_digits=7, decimal_places=2)
    class_c_percentage = serializers.DecimalField(max_digits=7, decimal_places=2)
    summary = serializers.CharField()
    items = AbcItemSerializer(many=True)


class InventoryReportSerializer(serializers.Serializer):
    as_of = serializers.DateTimeField()
    generated_at = serializers.DateTimeField()
    total_flowers = serializers.IntegerField()
    total_units = serializers.IntegerField()
    total_value = serializers.DecimalField(max_digits=16, decimal_places=2)
    low_stock_count = serializers.IntegerField()
    out_of_stock_count = serializers.IntegerField()
    expiring_batch_count = serializers.IntegerField()
    critical_count = serializers.IntegerField()
    service_level = serializers.FloatField()
    replenishment_list = RecommendationSerializer(many=True)


class ExpiringBatchRecordSerializer(serializers.Serializer):
    """Batch rows from the expiring-batches query (model instances)."""

    id = serializers.IntegerField()
    batch_no = serializers.CharField()
    flower_id = serializers.IntegerField()
    flower_name = serializers.CharField(source="flower.name")
    quantity_passed = serializers.IntegerField()
    expiry_date = serializers.DateField()
    state = serializers.CharField()


# EOF
