"""Delivery DRF serializers."""

from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers

from modules.delivery.constants import MIN_ZONE_DISTANCE_KM
from modules.delivery.models import BlockedDate, DeliverySlot, DeliveryZone
from modules.delivery.timeofday import TIME_OF_DAY_PATTERN

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class DeliveryZoneInputSerializer(serializers.Serializer):
    name = serializers.CharField(min_length=1, max_length=100)
    max_distance = serializers.FloatField(min_value=MIN_ZONE_DISTANCE_KM)
    delivery_fee = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=Decimal("0")
    )
    min_order = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=Decimal("0")
    )
    is_active = serializers.BooleanField(required=False, default=True)


class TimeOfDayField(serializers.RegexField):
    def __init__(self, **kwargs) -> None:
        super().__init__(
            TIME_OF_DAY_PATTERN,
            error_messages={"invalid": "Invalid time format (HH:MM)"},
            **kwargs,
        )


class DeliverySlotInputSerializer(serializers.Serializer):
    day_of_week = serializers.IntegerField(min_value=0, max_value=6)
    start_time = TimeOfDayField()
    end_time = TimeOfDayField()
    max_orders_per_hour = serializers.IntegerField(min_value=1)
    is_active = serializers.BooleanField(required=False, default=True)


class BlockedDateInputSerializer(serializers.Serializer):
    date = serializers.DateField()
    reason = serializers.CharField(
        required=False, allow_blank=True, default="", max_length=255
    )


class BulkBlockedDatesInputSerializer(serializers.Serializer):
    dates = BlockedDateInputSerializer(many=True, allow_empty=False)


class BlockedDateRangeSerializer(serializers.Serializer):
    date_from = serializers.DateField(required=False, allow_null=True)
    date_to = serializers.DateField(required=False, allow_null=True)


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class DeliveryZoneSerializer(serializers.ModelSerializer):
    class Meta:
        model = DeliveryZone
        fields = [
            "id",
            "name",
            "max_distance",
            "delivery_fee",
            "min_order",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class DeliverySlotSerializer(serializers.ModelSerializer):
    day_name = serializers.CharField(read_only=True)

    class Meta:
        model = DeliverySlot
        fields = [
            "id",
            "day_of_week",
            "day_name",
            "start_time",
            "end_time",
            "max_orders_per_hour",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class BlockedDateSerializer(serializers.ModelSerializer):
    class Meta:
        model = BlockedDate
        fields = ["id", "date", "reason", "created_at"]
        read_only_fields = fields
