"""Event bus contracts.

Handlers are plain objects with a ``handle`` method, so module-level
singletons and small classes both qualify.
"""

from __future__ import annotations

from typing import Generic, Protocol, Type, TypeVar

from shared.domain.events import DomainEvent, DomainEventMixin

E = TypeVar("E", bound=DomainEvent, contravariant=True)


class IEventHandler(Protocol, Generic[E]):
    def handle(self, event: E) -> None: ...


class IEventBus(Protocol):
    def publish(self, event: DomainEvent) -> None: ...

    def publish_on_commit(self, aggregate: DomainEventMixin) -> None:
        """Publish the aggregate's pending events after the current transaction commits."""
        ...

    def subscribe(self, event_class: Type[E], handler: IEventHandler[E]) -> None: ...
