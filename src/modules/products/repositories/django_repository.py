"""Django ORM implementation of the Product repository.

Look-ups return ``None`` instead of raising; the Service Layer decides
how to translate a missing entity into a domain error.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import models, transaction

from modules.products.dtos import ProductListFilter
from modules.products.models import Product
from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Product]:
        try:
            return Product.objects.select_related("category").filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_in_store(self, store_id, id) -> Optional[Product]:
        try:
            return (
                Product.objects.select_related("category")
                .filter(id=id, store_id=store_id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def list_for_store(self, store_id, criteria: ProductListFilter) -> models.QuerySet:
        return (
            Product.objects.select_related("category")
            .filter(store_id=store_id)
            .filter(criteria.to_q())
        )

    def get_available_in_store(self, store_id, ids: Iterable) -> List[Product]:
        return list(
            Product.objects.filter(store_id=store_id, id__in=list(ids), is_available=True)
        )

    @transaction.atomic
    def save(self, entity: Product) -> Product:
        entity.save()
        logger.info("product.saved", product_id=str(entity.id), store_id=str(entity.store_id))
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        deleted, _ = Product.objects.filter(id=id).delete()
        if deleted:
            logger.info("product.deleted", product_id=str(id))
        return bool(deleted)
