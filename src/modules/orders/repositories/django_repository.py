"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.  Writes are
wrapped in ``transaction.atomic()`` so the Order aggregate (Order +
OrderItems) is persisted atomically.  Status mutations lock the order
row with ``select_for_update()``.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Max, QuerySet

from modules.orders.dtos import OrderListFilter
from modules.orders.models import Order, OrderItem
from modules.orders.policies import PricedLine
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Create (aggregate root + children)
    # ------------------------------------------------------------------

    @transaction.atomic
    def create(self, data: Dict[str, Any], lines: List[PricedLine]) -> Order:
        order = Order.objects.create(**data)
        OrderItem.objects.bulk_create(
            [
                OrderItem(
                    order=order,
                    product_id=line.product_id,
                    name=line.name,
                    unit_price=line.unit_price,
                    quantity=line.quantity,
                    total_price=line.total_price,
                    notes=line.notes,
                )
                for line in lines
            ]
        )
        logger.info(
            "order.persisted",
            order_id=str(order.id),
            order_number=order.order_number,
            item_count=len(lines),
        )
        return order

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def _base(self) -> QuerySet:
        return Order.objects.select_related("assigned_to", "store").prefetch_related(
            "items"
        )

    def get_by_id(self, id: str) -> Optional[Order]:
        """Returns ``None`` for non-existent or invalid IDs."""
        try:
            return self._base().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_in_store(self, store_id, id) -> Optional[Order]:
        try:
            return self._base().filter(id=id, store_id=store_id).first()
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id, store_id=None) -> Optional[Order]:
        queryset = Order.objects.select_for_update().filter(id=id)
        if store_id is not None:
            queryset = queryset.filter(store_id=store_id)
        try:
            return queryset.first()
        except (ValueError, ValidationError):
            return None

    def list_for_store(self, store_id, criteria: OrderListFilter) -> QuerySet:
        return (
            self._base()
            .filter(store_id=store_id)
            .filter(criteria.to_q())
            .order_by("-created_at", "-order_number")
        )

    def next_order_number(self, store_id) -> int:
        current = Order.objects.filter(store_id=store_id).aggregate(
            value=Max("order_number")
        )["value"]
        return (current or 0) + 1

    # ------------------------------------------------------------------
    # Save (IRepository contract)
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: Order) -> Order:
        entity.save()
        return entity
