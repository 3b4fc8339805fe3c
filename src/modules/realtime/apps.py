from django.apps import AppConfig


class RealtimeConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.realtime"
    label = "realtime"

    def ready(self) -> None:
        from modules.orders.events import (
            OrderAssigned,
            OrderCancelled,
            OrderCreated,
            OrderStatusChanged,
        )
        from modules.realtime.handlers import (
            order_assigned_broadcaster,
            order_cancelled_broadcaster,
            order_created_broadcaster,
            order_updated_broadcaster,
        )
        from modules.realtime.hub import init_hub
        from shared.infrastructure.bus import event_bus

        init_hub()
        event_bus.subscribe(OrderCreated, order_created_broadcaster)
        event_bus.subscribe(OrderStatusChanged, order_updated_broadcaster)
        event_bus.subscribe(OrderAssigned, order_assigned_broadcaster)
        event_bus.subscribe(OrderCancelled, order_cancelled_broadcaster)
