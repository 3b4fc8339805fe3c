"""Product repository interface.

Extends ``IRepository[Product]`` with the store-scoped look-ups the
catalog and order services need.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Iterable, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.products.dtos import ProductListFilter
    from modules.products.models import Product


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product aggregate."""

    @abstractmethod
    def get_in_store(self, store_id, id) -> Optional[Product]:
        """Retrieve a product only if it belongs to ``store_id``."""

    @abstractmethod
    def get_available_in_store(self, store_id, ids: Iterable) -> List[Product]:
        """Return the available products among ``ids`` that belong to the store."""

    @abstractmethod
    def list_for_store(self, store_id, criteria: ProductListFilter) -> QuerySet:
        """Catalog of ``store_id`` matching ``criteria``."""

    @abstractmethod
    def delete(self, id: str) -> bool:
        """Remove a product; order items keep their snapshot."""
