"""Bridge order domain events to real-time room broadcasts."""

from __future__ import annotations

import structlog

from modules.orders.events import (
    OrderAssigned,
    OrderCancelled,
    OrderCreated,
    OrderStatusChanged,
)
from modules.realtime.hub import get_hub, order_room, store_room
from shared.domain.bus import IEventHandler
from shared.domain.events import DomainEvent

logger = structlog.get_logger(__name__)


def order_payload(order_id) -> dict:
    from modules.orders.models import Order
    from modules.orders.serializers import OrderSerializer

    order = (
        Order.objects.select_related("assigned_to")
        .prefetch_related("items")
        .filter(id=order_id)
        .first()
    )
    return OrderSerializer(order).data if order else {"id": str(order_id)}


class OrderBroadcaster(IEventHandler[DomainEvent]):
    """Emits ``event_name`` with the current order to the store room.

    With ``to_order_room`` the order's tracking room receives it too.
    """

    def __init__(self, event_name: str, to_order_room: bool = False) -> None:
        self.event_name = event_name
        self.to_order_room = to_order_room

    def handle(self, event: DomainEvent) -> None:
        hub = get_hub()
        payload = order_payload(event.aggregate_id)
        reached = hub.emit(store_room(event.store_id), self.event_name, payload)
        if self.to_order_room:
            reached += hub.emit(order_room(event.aggregate_id), self.event_name, payload)
        logger.debug(
            "realtime.broadcast",
            realtime_event=self.event_name,
            order_id=str(event.aggregate_id),
            reached=reached,
        )


order_created_broadcaster: IEventHandler[OrderCreated] = OrderBroadcaster("order:new")
order_updated_broadcaster: IEventHandler[OrderStatusChanged] = OrderBroadcaster(
    "order:updated", to_order_room=True
)
order_assigned_broadcaster: IEventHandler[OrderAssigned] = OrderBroadcaster(
    "order:assigned"
)
order_cancelled_broadcaster: IEventHandler[OrderCancelled] = OrderBroadcaster(
    "order:cancelled", to_order_room=True
)
