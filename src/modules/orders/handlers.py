"""Audit-log handlers for Orders domain events."""

from __future__ import annotations

import structlog

from modules.orders.events import (
    OrderAssigned,
    OrderCancelled,
    OrderCreated,
    OrderStatusChanged,
)
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class OrderCreatedHandler(IEventHandler[OrderCreated]):
    def handle(self, event: OrderCreated) -> None:
        logger.info("order.event.created", **event.log_context())


class OrderCancelledHandler(IEventHandler[OrderCancelled]):
    def handle(self, event: OrderCancelled) -> None:
        logger.info(
            "order.event.cancelled",
            cancelled_by=event.cancelled_by,
            **event.log_context(),
        )


class OrderStatusChangedHandler(IEventHandler[OrderStatusChanged]):
    def handle(self, event: OrderStatusChanged) -> None:
        logger.info(
            "order.event.status_changed",
            old_status=event.old_status,
            new_status=event.new_status,
            **event.log_context(),
        )


class OrderAssignedHandler(IEventHandler[OrderAssigned]):
    def handle(self, event: OrderAssigned) -> None:
        logger.info(
            "order.event.assigned",
            assigned_to=str(event.assigned_to_id),
            **event.log_context(),
        )


order_created_handler = OrderCreatedHandler()
order_cancelled_handler = OrderCancelledHandler()
order_status_changed_handler = OrderStatusChangedHandler()
order_assigned_handler = OrderAssignedHandler()
