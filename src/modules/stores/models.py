"""Store, StoreSettings and StoreMember models.

A store is the tenant boundary: catalog, delivery configuration and
orders all hang off it.  ``latitude`` / ``longitude`` are the origin
for delivery distance.  Membership roles gate the staff API; exactly
one member is the OWNER (created at registration).
"""

from __future__ import annotations

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone

from modules.core.models import BaseModel
from modules.stores.constants import Currency, MemberRole


class Store(BaseModel):
    name = models.CharField(max_length=255)
    slug = models.SlugField(max_length=255, unique=True)
    description = models.TextField(blank=True, default="")
    logo = models.URLField(max_length=500, blank=True, default="")
    phone = models.CharField(max_length=32, blank=True, default="")
    email = models.EmailField(blank=True, default="")
    address = models.CharField(max_length=255)
    latitude = models.FloatField(
        validators=[MinValueValidator(-90), MaxValueValidator(90)]
    )
    longitude = models.FloatField(
        validators=[MinValueValidator(-180), MaxValueValidator(180)]
    )
    currency = models.CharField(
        max_length=3, choices=Currency.choices, default=Currency.EUR
    )
    is_active = models.BooleanField(default=True)
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="owned_stores",
    )

    class Meta:
        db_table = "stores"
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class StoreSettings(BaseModel):
    """Per-store payment, scheduling and cancellation policy."""

    store = models.OneToOneField(
        "stores.Store", on_delete=models.CASCADE, related_name="settings"
    )
    accepts_cash = models.BooleanField(default=True)
    accepts_transfer = models.BooleanField(default=False)
    bank_name = models.CharField(max_length=255, blank=True, default="")
    bank_account_holder = models.CharField(max_length=255, blank=True, default="")
    bank_account_number = models.CharField(max_length=64, blank=True, default="")
    bank_alias = models.CharField(max_length=64, blank=True, default="")
    min_advance_hours = models.PositiveIntegerField(
        default=2, validators=[MinValueValidator(1)]
    )
    max_advance_days = models.PositiveIntegerField(
        default=7, validators=[MinValueValidator(1)]
    )
    immediate_cancel_minutes = models.PositiveIntegerField(default=10)
    scheduled_cancel_hours = models.PositiveIntegerField(default=24)

    class Meta:
        db_table = "store_settings"
        constraints = [
            models.CheckConstraint(
                condition=models.Q(accepts_cash=True) | models.Q(accepts_transfer=True),
                name="store_settings_payment_method_required",
            ),
        ]

    def accepts(self, payment_method: str) -> bool:
        return {
            "CASH": self.accepts_cash,
            "TRANSFER": self.accepts_transfer,
        }.get(payment_method, False)

    def __str__(self) -> str:
        return f"Settings for {self.store_id}"


class StoreMember(BaseModel):
    store = models.ForeignKey(
        "stores.Store", on_delete=models.CASCADE, related_name="members"
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="memberships",
    )
    role = models.CharField(max_length=16, choices=MemberRole.choices)
    is_active = models.BooleanField(default=True)
    joined_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "store_members"
        ordering = ["joined_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["store", "user"], name="store_members_unique_user"
            ),
        ]

    @property
    def is_owner(self) -> bool:
        return self.role == MemberRole.OWNER

    def __str__(self) -> str:
        return f"{self.user_id}@{self.store_id} ({self.role})"
