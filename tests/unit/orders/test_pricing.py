"""Unit tests for pure order policies: pricing, initial state, refunds."""

from datetime import date, datetime, timedelta, timezone as dt_timezone
from decimal import Decimal

import pytest

from modules.orders.constants import OrderStatus, PaymentStatus, RefundStatus
from modules.orders.exceptions import (
    CancellationWindowExpired,
    MinimumOrderNotReached,
    OrderAlreadyCancelled,
    OrderAlreadyDelivered,
)
from modules.orders.policies import (
    customer_cancel_deadline,
    ensure_cancellable,
    ensure_customer_window,
    initial_state,
    price_line,
    price_order,
    refund_status_for,
)

pytestmark = pytest.mark.unit

FEE = Decimal("2.00")
MINIMUM = Decimal("10.00")


class TestPricing:
    def test_line_total_is_quantity_times_price(self):
        line = price_line("p1", "Margherita", Decimal("4.00"), 3)
        assert line.total_price == Decimal("12.00")

    def test_below_minimum_is_rejected(self):
        lines = [price_line("p1", "Margherita", Decimal("4.00"), 2)]
        with pytest.raises(MinimumOrderNotReached) as exc_info:
            price_order(lines, FEE, MINIMUM)
        assert "10.00" in exc_info.value.message

    def test_total_adds_delivery_fee(self):
        lines = [price_line("p1", "Margherita", Decimal("4.00"), 3)]
        pricing = price_order(lines, FEE, MINIMUM)
        assert pricing.subtotal == Decimal("12.00")
        assert pricing.delivery_fee == Decimal("2.00")
        assert pricing.total == Decimal("14.00")

    def test_exact_minimum_is_accepted(self):
        lines = [
            price_line("p1", "Margherita", Decimal("4.00"), 1),
            price_line("p2", "Calzone", Decimal("6.00"), 1),
        ]
        assert price_order(lines, FEE, MINIMUM).total == Decimal("12.00")


class TestInitialState:
    def test_cash_is_confirmed_on_placement(self):
        assert initial_state("CASH") == (OrderStatus.CONFIRMED, PaymentStatus.CONFIRMED)

    def test_transfer_waits_for_payment(self):
        assert initial_state("TRANSFER") == (OrderStatus.PENDING, PaymentStatus.PENDING)


class TestCancellationPolicy:
    def test_delivered_and_cancelled_cannot_be_cancelled(self):
        with pytest.raises(OrderAlreadyDelivered):
            ensure_cancellable(OrderStatus.DELIVERED)
        with pytest.raises(OrderAlreadyCancelled):
            ensure_cancellable(OrderStatus.CANCELLED)
        ensure_cancellable(OrderStatus.ON_THE_WAY)

    def test_immediate_deadline_counts_from_creation(self):
        created = datetime(2026, 3, 2, 12, 0, tzinfo=dt_timezone.utc)
        deadline = customer_cancel_deadline("IMMEDIATE", created, None, "", 10, 24)
        assert deadline == created + timedelta(minutes=10)

    def test_scheduled_deadline_counts_back_from_slot_start(self):
        created = datetime(2026, 2, 25, 9, 0, tzinfo=dt_timezone.utc)
        deadline = customer_cancel_deadline(
            "SCHEDULED", created, date(2026, 3, 2), "12:00", 10, 24
        )
        assert deadline == datetime(2026, 3, 1, 12, 0, tzinfo=dt_timezone.utc)

    def test_window_is_inclusive_of_deadline(self):
        deadline = datetime(2026, 3, 2, 12, 10, tzinfo=dt_timezone.utc)
        ensure_customer_window(deadline, deadline)
        with pytest.raises(CancellationWindowExpired):
            ensure_customer_window(deadline, deadline + timedelta(seconds=1))


class TestRefundStatus:
    @pytest.mark.parametrize(
        "method,payment_status,expected",
        [
            ("TRANSFER", "CONFIRMED", RefundStatus.PENDING),
            ("TRANSFER", "PENDING", None),
            ("CASH", "CONFIRMED", RefundStatus.NOT_REQUIRED),
        ],
    )
    def test_refund_bookkeeping(self, method, payment_status, expected):
        assert refund_status_for(method, payment_status) == expected
