"""Order repository interface.

Extends ``IRepository[Order]`` with the store-scoped look-ups, the
row lock used by every mutation and per-store order numbering.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.orders.dtos import OrderListFilter
    from modules.orders.models import Order
    from modules.orders.policies import PricedLine


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root (Order + items)."""

    @abstractmethod
    def create(self, data: Dict[str, Any], lines: List[PricedLine]) -> Order:
        """Create an order with its item snapshots atomically."""

    @abstractmethod
    def get_in_store(self, store_id, id) -> Optional[Order]:
        """Retrieve an order of ``store_id`` with items and assignee."""

    @abstractmethod
    def get_for_update(self, id, store_id=None) -> Optional[Order]:
        """Retrieve an order with a row-level lock (SELECT FOR UPDATE)."""

    @abstractmethod
    def list_for_store(self, store_id, criteria: OrderListFilter) -> QuerySet:
        """Orders of a store matching ``criteria``, newest first."""

    @abstractmethod
    def next_order_number(self, store_id) -> int:
        """Current highest order number of the store plus one.

        Only meaningful while the caller holds the store-row lock.
        """
