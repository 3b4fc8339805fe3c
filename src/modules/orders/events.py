"""Domain events for the Orders bounded context.

Published on the in-process event bus after the surrounding
transaction commits.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class OrderCreated(DomainEvent):
    """Raised when an order is placed."""


@dataclass(frozen=True)
class OrderStatusChanged(DomainEvent):
    """Raised on any status change other than cancellation."""

    old_status: str = ""
    new_status: str = ""


@dataclass(frozen=True)
class OrderAssigned(DomainEvent):
    """Raised when a delivery person is assigned."""

    assigned_to_id: Optional[UUID] = None


@dataclass(frozen=True)
class OrderCancelled(DomainEvent):
    """Raised when an order is cancelled by the store or the customer."""

    cancelled_by: str = ""
