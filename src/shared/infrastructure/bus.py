"""In-memory event bus implementation."""

from __future__ import annotations

from typing import Dict, List, Type

import structlog
from django.db import transaction

from shared.domain.bus import IEventBus, IEventHandler
from shared.domain.events import DomainEvent, DomainEventMixin

logger = structlog.get_logger(__name__)


class InMemoryEventBus(IEventBus):
    """Simple in-process event bus.

    A failing handler is logged and skipped; it never breaks the
    request that published the event.
    """

    def __init__(self) -> None:
        self._handlers: Dict[Type[DomainEvent], List[IEventHandler]] = {}

    def subscribe(self, event_class: Type[DomainEvent], handler: IEventHandler) -> None:
        handlers = self._handlers.setdefault(event_class, [])
        if handler not in handlers:
            handlers.append(handler)

    def publish(self, event: DomainEvent) -> None:
        for handler in self._handlers.get(type(event), []):
            try:
                handler.handle(event)
            except Exception:
                logger.exception(
                    "event_bus.handler_failed",
                    handler=type(handler).__name__,
                    **event.log_context(),
                )

    def publish_on_commit(self, aggregate: DomainEventMixin) -> None:
        """Drain the aggregate's pending events once the transaction commits.

        Rolled-back transactions publish nothing.
        """
        events = aggregate.domain_events
        aggregate.clear_domain_events()
        for event in events:
            transaction.on_commit(lambda event=event: self.publish(event))


# Global bus instance (singleton)

event_bus = InMemoryEventBus()
