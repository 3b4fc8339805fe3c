"""Pure order policies: pricing, cancellation windows and refunds.

These functions take plain values and never touch the database, so the
service layer can apply them inside its transactions and tests can
exercise them directly.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Iterable, Optional, Tuple

from django.utils import timezone

from modules.delivery.timeofday import combine
from modules.orders.constants import (
    OrderStatus,
    OrderType,
    PaymentMethod,
    PaymentStatus,
    RefundStatus,
)
from modules.orders.exceptions import (
    CancellationWindowExpired,
    MinimumOrderNotReached,
    OrderAlreadyCancelled,
    OrderAlreadyDelivered,
)

TWO_PLACES = Decimal("0.01")


# ---------------------------------------------------------------------------
# Pricing
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PricedLine:
    product_id: object
    name: str
    unit_price: Decimal
    quantity: int
    total_price: Decimal
    notes: str = ""


@dataclass(frozen=True)
class OrderPricing:
    subtotal: Decimal
    delivery_fee: Decimal
    total: Decimal


def price_line(
    product_id, name: str, unit_price: Decimal, quantity: int, notes: str = ""
) -> PricedLine:
    total = (unit_price * quantity).quantize(TWO_PLACES)
    return PricedLine(product_id, name, unit_price, quantity, total, notes or "")


def price_order(
    lines: Iterable[PricedLine], delivery_fee: Decimal, min_order: Decimal
) -> OrderPricing:
    """Sum lines, enforce the zone minimum and add the delivery fee."""
    subtotal = sum((line.total_price for line in lines), Decimal("0.00"))
    if subtotal < min_order:
        raise MinimumOrderNotReached(f"Minimum order for this zone is {min_order}")
    return OrderPricing(
        subtotal=subtotal.quantize(TWO_PLACES),
        delivery_fee=delivery_fee.quantize(TWO_PLACES),
        total=(subtotal + delivery_fee).quantize(TWO_PLACES),
    )


def initial_state(payment_method: str) -> Tuple[str, str]:
    """``(status, payment_status)`` for a new order.

    Cash orders are confirmed on placement; transfers wait for the store
    to confirm the payment.
    """
    if payment_method == PaymentMethod.CASH:
        return OrderStatus.CONFIRMED, PaymentStatus.CONFIRMED
    return OrderStatus.PENDING, PaymentStatus.PENDING


# ---------------------------------------------------------------------------
# Cancellation
# ---------------------------------------------------------------------------


def ensure_cancellable(status: str) -> None:
    if status == OrderStatus.DELIVERED:
        raise OrderAlreadyDelivered()
    if status == OrderStatus.CANCELLED:
        raise OrderAlreadyCancelled()


def customer_cancel_deadline(
    order_type: str,
    created_at: datetime,
    scheduled_date: Optional[date],
    scheduled_slot_start: str,
    immediate_cancel_minutes: int,
    scheduled_cancel_hours: int,
) -> datetime:
    """Last instant at which the customer may still cancel."""
    if order_type == OrderType.SCHEDULED:
        start = timezone.make_aware(combine(scheduled_date, scheduled_slot_start))
        return start - timedelta(hours=scheduled_cancel_hours)
    return created_at + timedelta(minutes=immediate_cancel_minutes)


def ensure_customer_window(deadline: datetime, now: datetime) -> None:
    if now > deadline:
        raise CancellationWindowExpired()


def refund_status_for(payment_method: str, payment_status: str) -> Optional[str]:
    """Refund bookkeeping on cancellation.

    Confirmed transfers must be paid back; cash was never collected.
    """
    if payment_method == PaymentMethod.TRANSFER and payment_status == PaymentStatus.CONFIRMED:
        return RefundStatus.PENDING
    if payment_method == PaymentMethod.CASH:
        return RefundStatus.NOT_REQUIRED
    return None
