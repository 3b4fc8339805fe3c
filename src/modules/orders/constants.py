"""Order domain constants.

Status choices and the transition table of the order state machine.
"""

from django.db import models


class OrderStatus(models.TextChoices):
    PENDING = "PENDING", "Pending"
    CONFIRMED = "CONFIRMED", "Confirmed"
    PREPARING = "PREPARING", "Preparing"
    READY = "READY", "Ready"
    ON_THE_WAY = "ON_THE_WAY", "On the way"
    DELIVERED = "DELIVERED", "Delivered"
    CANCELLED = "CANCELLED", "Cancelled"


class OrderType(models.TextChoices):
    IMMEDIATE = "IMMEDIATE", "Immediate"
    SCHEDULED = "SCHEDULED", "Scheduled"


class PaymentMethod(models.TextChoices):
    CASH = "CASH", "Cash"
    TRANSFER = "TRANSFER", "Bank transfer"


class PaymentStatus(models.TextChoices):
    PENDING = "PENDING", "Pending"
    CONFIRMED = "CONFIRMED", "Confirmed"


class RefundStatus(models.TextChoices):
    PENDING = "PENDING", "Pending"
    NOT_REQUIRED = "NOT_REQUIRED", "Not required"


class CancelledBy(models.TextChoices):
    CUSTOMER = "CUSTOMER", "Customer"
    STORE = "STORE", "Store"


VALID_TRANSITIONS: dict[str, set[str]] = {
    OrderStatus.PENDING: {
        OrderStatus.CONFIRMED,
        OrderStatus.PREPARING,
        OrderStatus.CANCELLED,
    },
    OrderStatus.CONFIRMED: {OrderStatus.PREPARING, OrderStatus.CANCELLED},
    OrderStatus.PREPARING: {OrderStatus.READY, OrderStatus.CANCELLED},
    OrderStatus.READY: {OrderStatus.ON_THE_WAY, OrderStatus.CANCELLED},
    OrderStatus.ON_THE_WAY: {OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    OrderStatus.DELIVERED: set(),
    OrderStatus.CANCELLED: set(),
}

TERMINAL_STATES: set[str] = {OrderStatus.DELIVERED, OrderStatus.CANCELLED}

STATUS_TIMESTAMP_FIELDS: dict[str, str] = {
    OrderStatus.CONFIRMED: "confirmed_at",
    OrderStatus.PREPARING: "preparing_at",
    OrderStatus.READY: "ready_at",
    OrderStatus.ON_THE_WAY: "on_the_way_at",
    OrderStatus.DELIVERED: "delivered_at",
    OrderStatus.CANCELLED: "cancelled_at",
}

CUSTOMER_CANCEL_REASON = "Cancelled by customer"
STORE_CANCEL_REASON = "Cancelled by store"
