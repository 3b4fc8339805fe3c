"""Unit tests for Order DTOs.

Covers:
- CreateOrderItemDTO: quantity validation, frozen immutability.
- CreateOrderDTO: items, duplicate products, scheduling fields by type.
- OrderListFilter: translation to ``Q``.
"""

from __future__ import annotations

from datetime import date
from uuid import uuid4

import pytest
from pydantic import ValidationError

from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO, OrderListFilter

pytestmark = pytest.mark.unit


def _body(**overrides):
    body = {
        "customer_name": "Ana",
        "customer_phone": "600111222",
        "customer_address": "Calle Luna 3",
        "customer_lat": 40.0,
        "customer_lng": -3.0,
        "type": "IMMEDIATE",
        "payment_method": "CASH",
        "items": [{"product_id": uuid4(), "quantity": 1}],
    }
    body.update(overrides)
    return body


class TestCreateOrderItemDTO:
    def test_zero_quantity_raises(self):
        with pytest.raises(ValidationError, match="Quantity must be at least 1"):
            CreateOrderItemDTO(product_id=uuid4(), quantity=0)

    def test_is_immutable(self):
        dto = CreateOrderItemDTO(product_id=uuid4(), quantity=2)
        with pytest.raises(ValidationError):
            dto.quantity = 5


class TestCreateOrderDTO:
    def test_valid_immediate_order(self):
        dto = CreateOrderDTO(**_body())
        assert dto.type == "IMMEDIATE"
        assert dto.scheduled_date is None

    def test_empty_items_raises(self):
        with pytest.raises(ValidationError, match="at least one item"):
            CreateOrderDTO(**_body(items=[]))

    def test_duplicate_products_raise(self):
        pid = uuid4()
        items = [{"product_id": pid, "quantity": 1}, {"product_id": pid, "quantity": 2}]
        with pytest.raises(ValidationError, match="Duplicate product IDs"):
            CreateOrderDTO(**_body(items=items))

    def test_scheduled_requires_date_and_slot(self):
        with pytest.raises(ValidationError, match="Scheduled orders require"):
            CreateOrderDTO(**_body(type="SCHEDULED", scheduled_date=date(2026, 3, 2)))

    def test_immediate_rejects_scheduling_fields(self):
        with pytest.raises(ValidationError, match="Immediate orders cannot"):
            CreateOrderDTO(**_body(scheduled_slot_start="12:00"))

    def test_slot_times_must_be_hh_mm(self):
        with pytest.raises(ValidationError, match="HH:MM"):
            CreateOrderDTO(
                **_body(
                    type="SCHEDULED",
                    scheduled_date=date(2026, 3, 2),
                    scheduled_slot_start="9:00",
                    scheduled_slot_end="10:00",
                )
            )

    def test_latitude_out_of_range(self):
        with pytest.raises(ValidationError):
            CreateOrderDTO(**_body(customer_lat=91))

    def test_unknown_payment_method(self):
        with pytest.raises(ValidationError):
            CreateOrderDTO(**_body(payment_method="CARD"))


class TestOrderListFilter:
    def test_empty_filter_matches_everything(self):
        assert not OrderListFilter().to_q()

    def test_status_and_type_combine(self):
        q = OrderListFilter(status="READY", type="SCHEDULED").to_q()
        assert ("status", "READY") in q.children
        assert ("type", "SCHEDULED") in q.children
