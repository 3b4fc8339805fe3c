"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.  These are
the contracts between the API layer (DRF Serializers) and the Service
layer.  DTOs are immutable (``frozen=True``).

- ``CreateOrderItemDTO``: a single requested line.
- ``CreateOrderDTO``: customer snapshot, scheduling, payment and items.
- ``OrderListFilter``: typed listing criteria, translated to ``Q``.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import List, Optional
from uuid import UUID

from django.db.models import Q
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from modules.delivery.dtos import TimeOfDay
from modules.orders.constants import OrderStatus, OrderType, PaymentMethod

# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CreateOrderItemDTO(BaseModel):
    """Immutable DTO for a single order item in a creation request.

    ``unit_price`` is resolved by the Service Layer from the catalog.
    """

    model_config = ConfigDict(frozen=True)

    product_id: UUID
    quantity: int
    notes: Optional[str] = ""

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Quantity must be at least 1.")
        return v


class CreateOrderDTO(BaseModel):
    """Immutable DTO for order placement.

    Validates:
    - at least one item, no duplicated products;
    - coordinates within range;
    - SCHEDULED orders carry a date and both slot bounds, IMMEDIATE
      orders carry none.
    """

    model_config = ConfigDict(frozen=True)

    customer_name: str = Field(min_length=2)
    customer_phone: str = Field(min_length=6)
    customer_email: Optional[str] = ""
    customer_address: str = Field(min_length=5)
    customer_lat: float = Field(ge=-90, le=90)
    customer_lng: float = Field(ge=-180, le=180)
    customer_notes: Optional[str] = ""

    type: OrderType
    scheduled_date: Optional[dt.date] = None
    scheduled_slot_start: Optional[TimeOfDay] = None
    scheduled_slot_end: Optional[TimeOfDay] = None

    payment_method: PaymentMethod
    items: List[CreateOrderItemDTO]

    @field_validator("items")
    @classmethod
    def items_must_not_be_empty(
        cls, v: List[CreateOrderItemDTO]
    ) -> List[CreateOrderItemDTO]:
        if not v:
            raise ValueError("Order must have at least one item.")
        return v

    @model_validator(mode="after")
    def no_duplicate_products(self):
        """Prevent duplicate product IDs in the same order."""
        product_ids = [item.product_id for item in self.items]
        if len(product_ids) != len(set(product_ids)):
            raise ValueError("Duplicate product IDs are not allowed in the same order.")
        return self

    @model_validator(mode="after")
    def scheduling_matches_type(self):
        fields = (self.scheduled_date, self.scheduled_slot_start, self.scheduled_slot_end)
        if self.type == OrderType.SCHEDULED and not all(fields):
            raise ValueError(
                "Scheduled orders require scheduled_date, "
                "scheduled_slot_start and scheduled_slot_end."
            )
        if self.type == OrderType.IMMEDIATE and any(fields):
            raise ValueError("Immediate orders cannot carry scheduling fields.")
        return self


# ---------------------------------------------------------------------------
# Query specs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class OrderListFilter:
    """Staff order listing criteria for one store.

    ``date`` matches the local calendar day the order was created on, or
    the scheduled date for scheduled orders.
    """

    status: Optional[OrderStatus] = None
    type: Optional[OrderType] = None
    date: Optional[dt.date] = None
    assigned_to: Optional[UUID] = None

    def to_q(self) -> Q:
        query = Q()
        if self.status:
            query &= Q(status=self.status)
        if self.type:
            query &= Q(type=self.type)
        if self.date:
            query &= Q(created_at__date=self.date) | Q(scheduled_date=self.date)
        if self.assigned_to:
            query &= Q(assigned_to_id=self.assigned_to)
        return query
