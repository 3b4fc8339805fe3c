"""Store DRF serializers (input validation and read models)."""

from __future__ import annotations

from rest_framework import serializers

from modules.stores.constants import MemberRole
from modules.stores.models import Store, StoreMember, StoreSettings

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class UpdateStoreSerializer(serializers.Serializer):
    name = serializers.CharField(min_length=2, required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    logo = serializers.URLField(required=False, allow_blank=True)
    phone = serializers.CharField(required=False, allow_blank=True)
    email = serializers.EmailField(required=False, allow_blank=True)
    address = serializers.CharField(min_length=5, required=False)
    latitude = serializers.FloatField(min_value=-90, max_value=90, required=False)
    longitude = serializers.FloatField(min_value=-180, max_value=180, required=False)
    is_active = serializers.BooleanField(required=False)


class UpdateStoreSettingsSerializer(serializers.Serializer):
    accepts_cash = serializers.BooleanField(required=False)
    accepts_transfer = serializers.BooleanField(required=False)
    bank_name = serializers.CharField(required=False, allow_blank=True)
    bank_account_holder = serializers.CharField(required=False, allow_blank=True)
    bank_account_number = serializers.CharField(required=False, allow_blank=True)
    bank_alias = serializers.CharField(required=False, allow_blank=True)
    min_advance_hours = serializers.IntegerField(min_value=1, required=False)
    max_advance_days = serializers.IntegerField(min_value=1, required=False)
    immediate_cancel_minutes = serializers.IntegerField(min_value=0, required=False)
    scheduled_cancel_hours = serializers.IntegerField(min_value=0, required=False)


class UpdateMemberRoleSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=MemberRole.choices)


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class StoreSettingsSerializer(serializers.ModelSerializer):
    class Meta:
        model = StoreSettings
        fields = [
            "accepts_cash",
            "accepts_transfer",
            "bank_name",
            "bank_account_holder",
            "bank_account_number",
            "bank_alias",
            "min_advance_hours",
            "max_advance_days",
            "immediate_cancel_minutes",
            "scheduled_cancel_hours",
        ]
        read_only_fields = fields


class PublicStoreSettingsSerializer(serializers.ModelSerializer):
    """Settings a customer needs to place an order (no cancellation policy)."""

    class Meta:
        model = StoreSettings
        fields = [
            "accepts_cash",
            "accepts_transfer",
            "bank_name",
            "bank_account_holder",
            "bank_account_number",
            "bank_alias",
            "min_advance_hours",
            "max_advance_days",
        ]
        read_only_fields = fields


class StoreSerializer(serializers.ModelSerializer):
    settings = StoreSettingsSerializer(read_only=True)
    owner_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = Store
        fields = [
            "id",
            "name",
            "slug",
            "description",
            "logo",
            "phone",
            "email",
            "address",
            "latitude",
            "longitude",
            "currency",
            "is_active",
            "owner_id",
            "settings",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class PublicStoreSerializer(serializers.ModelSerializer):
    settings = PublicStoreSettingsSerializer(read_only=True)

    class Meta:
        model = Store
        fields = [
            "id",
            "name",
            "slug",
            "description",
            "logo",
            "phone",
            "address",
            "latitude",
            "longitude",
            "currency",
            "settings",
        ]
        read_only_fields = fields


class StoreMemberSerializer(serializers.ModelSerializer):
    user_id = serializers.UUIDField(read_only=True)
    name = serializers.CharField(source="user.name", read_only=True)
    email = serializers.EmailField(source="user.email", read_only=True)
    phone = serializers.CharField(source="user.phone", read_only=True)

    class Meta:
        model = StoreMember
        fields = [
            "id",
            "user_id",
            "name",
            "email",
            "phone",
            "role",
            "is_active",
            "joined_at",
        ]
        read_only_fields = fields


class MembershipSerializer(serializers.ModelSerializer):
    """A user's view of one of their stores."""

    store_id = serializers.UUIDField(read_only=True)
    store_name = serializers.CharField(source="store.name", read_only=True)
    store_slug = serializers.CharField(source="store.slug", read_only=True)
    currency = serializers.CharField(source="store.currency", read_only=True)

    class Meta:
        model = StoreMember
        fields = ["store_id", "store_name", "store_slug", "currency", "role"]
        read_only_fields = fields
