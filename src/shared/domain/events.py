"""Domain event primitives.

Events are immutable facts about an aggregate.  Every event in this
system belongs to one store (the tenant), so ``store_id`` travels on the
base class and handlers can route by it without knowing the subtype.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from uuid import UUID, uuid4


@dataclass(frozen=True)
class DomainEvent:
    aggregate_id: UUID
    store_id: Optional[UUID] = None
    event_id: UUID = field(default_factory=uuid4)
    occurred_on: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    event_name: str = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "event_name", self.__class__.__name__)

    def log_context(self) -> Dict[str, Any]:
        """Identifiers for structured log lines about this event."""
        return {
            "event_name": self.event_name,
            "event_id": str(self.event_id),
            "aggregate_id": str(self.aggregate_id),
            "store_id": str(self.store_id) if self.store_id else None,
        }


class DomainEventMixin:
    """Collects pending events on an aggregate until they are published."""

    _domain_events: list[DomainEvent]

    def add_domain_event(self, event: DomainEvent) -> None:
        if not hasattr(self, "_domain_events"):
            self._domain_events = []
        self._domain_events.append(event)

    def clear_domain_events(self) -> None:
        if hasattr(self, "_domain_events"):
            self._domain_events.clear()

    @property
    def domain_events(self) -> list[DomainEvent]:
        if not hasattr(self, "_domain_events"):
            self._domain_events = []
        return list(self._domain_events)
