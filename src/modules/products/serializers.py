"""Catalog DRF serializers for API input/output.

Business logic lives in the Service Layer, which receives the Pydantic
DTOs from ``dtos.py``.
"""

from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers

from modules.products.models import Category, Product

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class CategoryInputSerializer(serializers.Serializer):
    name = serializers.CharField(min_length=2, max_length=255)
    description = serializers.CharField(required=False, allow_blank=True)
    image = serializers.URLField(required=False, allow_blank=True)
    sort_order = serializers.IntegerField(min_value=0, required=False)
    is_active = serializers.BooleanField(required=False)


class ProductInputSerializer(serializers.Serializer):
    name = serializers.CharField(min_length=1, max_length=255)
    price = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=Decimal("0")
    )
    description = serializers.CharField(required=False, allow_blank=True)
    image = serializers.URLField(required=False, allow_blank=True)
    category_id = serializers.UUIDField(required=False, allow_null=True)
    is_available = serializers.BooleanField(required=False)
    sort_order = serializers.IntegerField(min_value=0, required=False)


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class CategorySerializer(serializers.ModelSerializer):
    product_count = serializers.IntegerField(read_only=True, default=None)

    class Meta:
        model = Category
        fields = [
            "id",
            "name",
            "description",
            "image",
            "sort_order",
            "is_active",
            "product_count",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ProductSerializer(serializers.ModelSerializer):
    category_id = serializers.UUIDField(read_only=True, allow_null=True)
    category_name = serializers.CharField(
        source="category.name", read_only=True, default=None
    )

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "description",
            "image",
            "price",
            "category_id",
            "category_name",
            "is_available",
            "sort_order",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
