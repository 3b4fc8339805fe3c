"""Order and OrderItem models.

Business rules implemented:
- Status transitions follow ``VALID_TRANSITIONS`` (checked via
  ``can_transition_to``; enforced at service layer).
- ``order_number`` is sequential per store; ``(store, order_number)``
  is unique and the service allocates it under a store-row lock.
- The customer is a snapshot on the order, not a user account.
- OrderItem snapshots product name and price at creation time and is
  never modified afterwards.  Deleting a product keeps the item
  (``SET_NULL``).
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel
from modules.orders.constants import (
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    CancelledBy,
    OrderStatus,
    OrderType,
    PaymentMethod,
    PaymentStatus,
    RefundStatus,
)
from shared.domain.events import DomainEventMixin


class Order(DomainEventMixin, BaseModel):
    """Order aggregate root."""

    store = models.ForeignKey(
        "stores.Store", on_delete=models.PROTECT, related_name="orders"
    )
    order_number = models.PositiveIntegerField(editable=False)
    type = models.CharField(
        max_length=16, choices=OrderType.choices, default=OrderType.IMMEDIATE
    )
    status = models.CharField(
        max_length=20, choices=OrderStatus.choices, default=OrderStatus.PENDING
    )

    # Customer snapshot
    customer_name = models.CharField(max_length=255)
    customer_phone = models.CharField(max_length=32)
    customer_email = models.EmailField(blank=True, default="")
    customer_address = models.CharField(max_length=500)
    customer_lat = models.FloatField()
    customer_lng = models.FloatField()
    customer_notes = models.TextField(blank=True, default="")

    # Scheduling (SCHEDULED orders only)
    scheduled_date = models.DateField(null=True, blank=True)
    scheduled_slot_start = models.CharField(max_length=5, blank=True, default="")
    scheduled_slot_end = models.CharField(max_length=5, blank=True, default="")

    # Pricing
    subtotal = models.DecimalField(max_digits=10, decimal_places=2)
    delivery_fee = models.DecimalField(
        max_digits=10, decimal_places=2, default=Decimal("0.00")
    )
    total = models.DecimalField(max_digits=10, decimal_places=2)

    # Payment
    payment_method = models.CharField(max_length=16, choices=PaymentMethod.choices)
    payment_status = models.CharField(
        max_length=16, choices=PaymentStatus.choices, default=PaymentStatus.PENDING
    )

    estimated_minutes = models.PositiveIntegerField(null=True, blank=True)

    # Lifecycle timestamps
    confirmed_at = models.DateTimeField(null=True, blank=True)
    preparing_at = models.DateTimeField(null=True, blank=True)
    ready_at = models.DateTimeField(null=True, blank=True)
    on_the_way_at = models.DateTimeField(null=True, blank=True)
    delivered_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)

    # Cancellation
    cancel_reason = models.TextField(blank=True, default="")
    cancelled_by = models.CharField(
        max_length=16, choices=CancelledBy.choices, blank=True, default=""
    )
    refund_status = models.CharField(
        max_length=16, choices=RefundStatus.choices, null=True, blank=True
    )

    # Delivery assignment
    assigned_to = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="assigned_orders",
    )
    assigned_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "orders"
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["store", "order_number"], name="orders_unique_store_number"
            ),
        ]
        indexes = [
            models.Index(fields=["store", "status"], name="orders_store_status_idx"),
            models.Index(fields=["store", "-created_at"], name="orders_store_created_idx"),
            models.Index(
                fields=["store", "scheduled_date", "scheduled_slot_start"],
                name="orders_store_slot_idx",
            ),
        ]

    # ------------------------------------------------------------------
    # State Machine helpers
    # ------------------------------------------------------------------

    @property
    def is_terminal(self) -> bool:
        """Return ``True`` if the order is in a terminal state."""
        return self.status in TERMINAL_STATES

    def can_transition_to(self, new_status: str) -> bool:
        """Check whether transitioning to *new_status* is valid."""
        return new_status in VALID_TRANSITIONS.get(self.status, set())

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return f"#{self.order_number} ({self.status})"


class OrderItem(BaseModel):
    """Line item with a name and price snapshot.

    ``total_price`` is always ``quantity * unit_price``; both are fixed
    when the order is created.
    """

    order = models.ForeignKey(
        "orders.Order", on_delete=models.CASCADE, related_name="items"
    )
    product = models.ForeignKey(
        "products.Product",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="order_items",
    )
    name = models.CharField(max_length=255)
    unit_price = models.DecimalField(max_digits=10, decimal_places=2)
    quantity = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    total_price = models.DecimalField(max_digits=10, decimal_places=2)
    notes = models.TextField(blank=True, default="")

    class Meta:
        db_table = "order_items"
        ordering = ["created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="order_items_quantity_positive",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.name} x{self.quantity} ({self.total_price})"
