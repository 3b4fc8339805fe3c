"""Order DRF serializers for API input/output.

The serializer operates at the Interface layer (API Views).
Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.delivery.serializers import TimeOfDayField
from modules.orders.constants import (
    OrderStatus,
    OrderType,
    PaymentMethod,
)
from modules.orders.models import Order, OrderItem

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class CreateOrderItemSerializer(serializers.Serializer):
    """Validates a single item in an order creation request."""

    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)
    notes = serializers.CharField(required=False, default="", allow_blank=True)


class CreateOrderSerializer(serializers.Serializer):
    """Validates the public order placement payload."""

    customer_name = serializers.CharField(min_length=2, max_length=255)
    customer_phone = serializers.CharField(min_length=6, max_length=32)
    customer_email = serializers.EmailField(required=False, default="", allow_blank=True)
    customer_address = serializers.CharField(min_length=5, max_length=500)
    customer_lat = serializers.FloatField(min_value=-90, max_value=90)
    customer_lng = serializers.FloatField(min_value=-180, max_value=180)
    customer_notes = serializers.CharField(required=False, default="", allow_blank=True)
    type = serializers.ChoiceField(choices=OrderType.choices)
    scheduled_date = serializers.DateField(required=False, allow_null=True)
    scheduled_slot_start = TimeOfDayField(required=False, allow_null=True)
    scheduled_slot_end = TimeOfDayField(required=False, allow_null=True)
    payment_method = serializers.ChoiceField(choices=PaymentMethod.choices)
    items = CreateOrderItemSerializer(many=True, allow_empty=False)


class UpdateOrderStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=OrderStatus.choices)
    reason = serializers.CharField(required=False, default="", allow_blank=True, max_length=500)


class AssignDeliverySerializer(serializers.Serializer):
    delivery_user_id = serializers.UUIDField()


class CancelOrderSerializer(serializers.Serializer):
    reason = serializers.CharField(min_length=1, max_length=500)


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class OrderItemSerializer(serializers.ModelSerializer):
    """Line items with the name and price captured at placement."""

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "product_id",
            "name",
            "unit_price",
            "quantity",
            "total_price",
            "notes",
        ]
        read_only_fields = fields


class AssigneeSerializer(serializers.Serializer):
    id = serializers.UUIDField(read_only=True)
    name = serializers.CharField(read_only=True)
    phone = serializers.CharField(read_only=True)


class OrderSerializer(serializers.ModelSerializer):
    """Staff view of an order with items and assignee."""

    items = OrderItemSerializer(many=True, read_only=True)
    assigned_to = AssigneeSerializer(read_only=True, allow_null=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "type",
            "status",
            "customer_name",
            "customer_phone",
            "customer_email",
            "customer_address",
            "customer_lat",
            "customer_lng",
            "customer_notes",
            "scheduled_date",
            "scheduled_slot_start",
            "scheduled_slot_end",
            "subtotal",
            "delivery_fee",
            "total",
            "payment_method",
            "payment_status",
            "estimated_minutes",
            "assigned_to",
            "assigned_at",
            "confirmed_at",
            "preparing_at",
            "ready_at",
            "on_the_way_at",
            "delivered_at",
            "cancelled_at",
            "cancel_reason",
            "cancelled_by",
            "refund_status",
            "items",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class OrderCreatedSerializer(serializers.ModelSerializer):
    """Placement receipt returned to the customer."""

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "status",
            "type",
            "total",
            "payment_method",
            "payment_status",
            "estimated_minutes",
            "created_at",
        ]
        read_only_fields = fields


class TrackingItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderItem
        fields = ["name", "quantity", "total_price"]
        read_only_fields = fields


class TrackingStoreSerializer(serializers.Serializer):
    name = serializers.CharField(read_only=True)
    phone = serializers.CharField(read_only=True)


class OrderTrackingSerializer(serializers.ModelSerializer):
    """Public subset shown on the customer tracking page."""

    items = TrackingItemSerializer(many=True, read_only=True)
    store = TrackingStoreSerializer(read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "status",
            "type",
            "estimated_minutes",
            "customer_name",
            "customer_address",
            "scheduled_date",
            "scheduled_slot_start",
            "scheduled_slot_end",
            "items",
            "subtotal",
            "delivery_fee",
            "total",
            "payment_method",
            "payment_status",
            "store",
            "created_at",
            "confirmed_at",
            "preparing_at",
            "ready_at",
            "on_the_way_at",
            "delivered_at",
            "cancelled_at",
            "cancelled_by",
            "cancel_reason",
        ]
        read_only_fields = fields
