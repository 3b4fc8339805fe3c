"""Account DRF serializers for API input/output."""

from __future__ import annotations

from rest_framework import serializers

from modules.accounts.models import User
from modules.delivery.serializers import (
    DeliverySlotInputSerializer,
    DeliveryZoneInputSerializer,
)
from modules.stores.constants import Currency
from modules.stores.serializers import MembershipSerializer

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class RegisterSerializer(serializers.Serializer):
    name = serializers.CharField(min_length=2, max_length=255)
    email = serializers.EmailField()
    password = serializers.CharField(min_length=6, write_only=True)
    phone = serializers.CharField(min_length=6, max_length=32)

    store_name = serializers.CharField(min_length=2, max_length=255)
    store_address = serializers.CharField(min_length=5, max_length=255)
    store_latitude = serializers.FloatField(min_value=-90, max_value=90)
    store_longitude = serializers.FloatField(min_value=-180, max_value=180)
    store_phone = serializers.CharField(min_length=6, max_length=32)
    store_logo = serializers.URLField(required=False, default="", allow_blank=True)
    currency = serializers.ChoiceField(choices=Currency.choices)

    accepts_cash = serializers.BooleanField()
    accepts_transfer = serializers.BooleanField()
    bank_name = serializers.CharField(required=False, default="", allow_blank=True)
    bank_account_holder = serializers.CharField(
        required=False, default="", allow_blank=True
    )
    bank_account_number = serializers.CharField(
        required=False, default="", allow_blank=True
    )
    bank_alias = serializers.CharField(required=False, default="", allow_blank=True)

    min_advance_hours = serializers.IntegerField(min_value=1)
    max_advance_days = serializers.IntegerField(min_value=1)
    immediate_cancel_minutes = serializers.IntegerField(min_value=0)
    scheduled_cancel_hours = serializers.IntegerField(min_value=0)

    delivery_slots = DeliverySlotInputSerializer(many=True, allow_empty=False)
    delivery_zones = DeliveryZoneInputSerializer(many=True, allow_empty=False)

    def validate(self, attrs):
        if not (attrs["accepts_cash"] or attrs["accepts_transfer"]):
            raise serializers.ValidationError(
                {"accepts_cash": "At least one payment method must be accepted"}
            )
        if attrs["accepts_transfer"] and not (
            attrs.get("bank_name")
            and attrs.get("bank_account_holder")
            and attrs.get("bank_account_number")
        ):
            raise serializers.ValidationError(
                {"bank_name": "Bank details are required when accepting transfers"}
            )
        return attrs


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)


class UpdateProfileSerializer(serializers.Serializer):
    name = serializers.CharField(min_length=2, max_length=255, required=False)
    phone = serializers.CharField(min_length=6, max_length=32, required=False)


class ChangePasswordSerializer(serializers.Serializer):
    current_password = serializers.CharField(write_only=True)
    new_password = serializers.CharField(min_length=6, write_only=True)


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ["id", "email", "name", "phone"]
        read_only_fields = fields


class ProfileSerializer(UserSerializer):
    stores = serializers.SerializerMethodField()

    class Meta(UserSerializer.Meta):
        fields = [*UserSerializer.Meta.fields, "stores"]
        read_only_fields = fields

    def get_stores(self, user: User) -> list:
        from modules.accounts.services import active_memberships

        return MembershipSerializer(active_memberships(user), many=True).data
