"""Delivery configuration: zones, weekly slots and blocked dates."""

from __future__ import annotations

from decimal import Decimal

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from modules.core.models import BaseModel
from modules.delivery.constants import DAY_NAMES, MIN_ZONE_DISTANCE_KM
from modules.delivery.timeofday import parse_time_of_day, time_of_day_validator


class DeliveryZone(BaseModel):
    """A distance band around the store with its own fee and minimum order.

    An address belongs to the active zone with the smallest
    ``max_distance`` that still covers it.
    """

    store = models.ForeignKey(
        "stores.Store", on_delete=models.CASCADE, related_name="delivery_zones"
    )
    name = models.CharField(max_length=100)
    max_distance = models.FloatField(
        validators=[MinValueValidator(MIN_ZONE_DISTANCE_KM)]
    )
    delivery_fee = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0"))],
    )
    min_order = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0"))],
    )
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = "delivery_zones"
        ordering = ["max_distance"]
        indexes = [
            models.Index(
                fields=["store", "is_active", "max_distance"],
                name="zones_store_active_dist_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.name} (<= {self.max_distance} km)"


class DeliverySlot(BaseModel):
    """A recurring weekly delivery window, ``[start_time, end_time)``."""

    store = models.ForeignKey(
        "stores.Store", on_delete=models.CASCADE, related_name="delivery_slots"
    )
    day_of_week = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(0), MaxValueValidator(6)]
    )
    start_time = models.CharField(max_length=5, validators=[time_of_day_validator])
    end_time = models.CharField(max_length=5, validators=[time_of_day_validator])
    max_orders_per_hour = models.PositiveIntegerField(
        default=1, validators=[MinValueValidator(1)]
    )
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = "delivery_slots"
        ordering = ["day_of_week", "start_time"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(day_of_week__gte=0, day_of_week__lte=6),
                name="delivery_slots_day_of_week_range",
            ),
        ]
        indexes = [
            models.Index(
                fields=["store", "day_of_week", "is_active"],
                name="slots_store_day_active_idx",
            ),
        ]

    @property
    def start_minutes(self) -> int:
        return parse_time_of_day(self.start_time)

    @property
    def end_minutes(self) -> int:
        return parse_time_of_day(self.end_time)

    @property
    def duration_hours(self) -> float:
        return (self.end_minutes - self.start_minutes) / 60

    @property
    def capacity(self) -> float:
        """Orders the slot can take: hourly rate times (fractional) hours."""
        return self.max_orders_per_hour * self.duration_hours

    @property
    def day_name(self) -> str:
        return DAY_NAMES[self.day_of_week]

    def overlaps(self, start_minutes: int, end_minutes: int) -> bool:
        return start_minutes < self.end_minutes and end_minutes > self.start_minutes

    def __str__(self) -> str:
        return f"{self.day_name} {self.start_time}-{self.end_time}"


class BlockedDate(BaseModel):
    store = models.ForeignKey(
        "stores.Store", on_delete=models.CASCADE, related_name="blocked_dates"
    )
    date = models.DateField()
    reason = models.CharField(max_length=255, blank=True, default="")

    class Meta:
        db_table = "blocked_dates"
        ordering = ["date"]
        constraints = [
            models.UniqueConstraint(
                fields=["store", "date"], name="blocked_dates_unique_store_date"
            ),
        ]

    def __str__(self) -> str:
        return f"{self.date:%Y-%m-%d} ({self.store_id})"
