"""Metrics query and output serializers."""

from __future__ import annotations

from rest_framework import serializers


class MetricsQuerySerializer(serializers.Serializer):
    date_from = serializers.DateField(required=False, allow_null=True)
    date_to = serializers.DateField(required=False, allow_null=True)

    def validate(self, attrs):
        date_from, date_to = attrs.get("date_from"), attrs.get("date_to")
        if date_from and date_to and date_from > date_to:
            raise serializers.ValidationError({"from": "Must be on or before 'to'"})
        return attrs


class StatusCountSerializer(serializers.Serializer):
    status = serializers.CharField()
    count = serializers.IntegerField()


class TopProductSerializer(serializers.Serializer):
    product_id = serializers.UUIDField(allow_null=True)
    name = serializers.CharField()
    total_sold = serializers.IntegerField()


class DayCountSerializer(serializers.Serializer):
    date = serializers.CharField()
    count = serializers.IntegerField()


class StoreMetricsSerializer(serializers.Serializer):
    total_orders = serializers.IntegerField()
    completed_orders = serializers.IntegerField()
    cancelled_orders = serializers.IntegerField()
    revenue = serializers.DecimalField(max_digits=14, decimal_places=2)
    avg_order_value = serializers.DecimalField(max_digits=12, decimal_places=2)
    avg_delivery_time = serializers.IntegerField()
    conversion_rate = serializers.IntegerField()
    orders_by_status = StatusCountSerializer(many=True)
    top_products = TopProductSerializer(many=True)
    orders_by_day = DayCountSerializer(many=True)
