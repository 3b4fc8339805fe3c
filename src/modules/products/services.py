"""Catalog service layer (Use Cases).

Orchestrates categories and products for a store.  Product persistence
goes through the injected ``IProductRepository``.

Business rules enforced here:
- A product's category must exist in the same store.
- New categories are appended after the current last one.
- Deleting a category leaves its products uncategorized.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

import structlog
from django.db import models, transaction
from django.db.models import Max

from modules.products.dtos import ProductListFilter
from modules.products.exceptions import CategoryNotFound, InvalidCategory, ProductNotFound
from modules.products.models import Category, Product

if TYPE_CHECKING:
    from modules.products.dtos import (
        CreateCategoryDTO,
        CreateProductDTO,
        UpdateCategoryDTO,
        UpdateProductDTO,
    )
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class CategoryService:
    def list_categories(self, store_id, include_inactive: bool = True) -> List[Category]:
        categories = Category.objects.filter(store_id=store_id).annotate(
            product_count=models.Count("products")
        )
        if not include_inactive:
            categories = categories.filter(is_active=True)
        return list(categories.order_by("sort_order", "name"))

    def get_category(self, store_id, category_id) -> Category:
        category = Category.objects.filter(id=category_id, store_id=store_id).first()
        if not category:
            raise CategoryNotFound()
        return category

    @transaction.atomic
    def create_category(self, store_id, dto: CreateCategoryDTO) -> Category:
        sort_order = dto.sort_order
        if sort_order is None:
            current_max = Category.objects.filter(store_id=store_id).aggregate(
                value=Max("sort_order")
            )["value"]
            sort_order = 0 if current_max is None else current_max + 1

        category = Category.objects.create(
            store_id=store_id,
            name=dto.name,
            description=dto.description or "",
            image=dto.image or "",
            sort_order=sort_order,
        )
        logger.info("category.created", store_id=str(store_id), category_id=str(category.id))
        return category

    @transaction.atomic
    def update_category(self, store_id, category_id, dto: UpdateCategoryDTO) -> Category:
        category = self.get_category(store_id, category_id)
        for field, value in dto.model_dump(exclude_none=True).items():
            setattr(category, field, value)
        category.save()
        logger.info("category.updated", store_id=str(store_id), category_id=str(category_id))
        return category

    @transaction.atomic
    def delete_category(self, store_id, category_id) -> int:
        """Delete a category and return how many products were detached."""
        category = self.get_category(store_id, category_id)
        affected = Product.objects.filter(category=category).update(category=None)
        category.delete()
        logger.info(
            "category.deleted",
            store_id=str(store_id),
            category_id=str(category_id),
            products_affected=affected,
        )
        return affected


class ProductService:
    """Application service for Product use-cases.

    Receives an ``IProductRepository`` via constructor injection (DIP).
    """

    def __init__(self, repository: IProductRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_products(self, store_id, criteria: Optional[ProductListFilter] = None):
        return self._repo.list_for_store(store_id, criteria or ProductListFilter())

    def get_product(self, store_id, product_id) -> Product:
        product = self._repo.get_in_store(store_id, product_id)
        if not product:
            raise ProductNotFound()
        return product

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_product(self, store_id, dto: CreateProductDTO) -> Product:
        self._check_category(store_id, dto.category_id)

        product = Product(
            store_id=store_id,
            category_id=dto.category_id,
            name=dto.name,
            description=dto.description or "",
            image=dto.image or "",
            price=dto.price,
            is_available=dto.is_available,
            sort_order=dto.sort_order,
        )
        product = self._repo.save(product)
        logger.info("product.created", store_id=str(store_id), product_id=str(product.id))
        return product

    @transaction.atomic
    def update_product(self, store_id, product_id, dto: UpdateProductDTO) -> Product:
        product = self.get_product(store_id, product_id)
        changes = dto.model_dump(exclude_unset=True)
        if "category_id" in changes:
            self._check_category(store_id, changes["category_id"])

        for field, value in changes.items():
            if value is None and field != "category_id":
                continue
            setattr(product, field, value)

        product = self._repo.save(product)
        logger.info("product.updated", product_id=str(product_id), fields=sorted(changes))
        return product

    @transaction.atomic
    def toggle_availability(self, store_id, product_id) -> Product:
        product = self.get_product(store_id, product_id)
        product.is_available = not product.is_available
        product = self._repo.save(product)
        logger.info(
            "product.availability_toggled",
            product_id=str(product_id),
            is_available=product.is_available,
        )
        return product

    @transaction.atomic
    def delete_product(self, store_id, product_id) -> None:
        """Hard delete; existing order items keep their snapshots."""
        product = self.get_product(store_id, product_id)
        self._repo.delete(str(product.id))

    def _check_category(self, store_id, category_id: Optional[object]) -> None:
        if category_id is None:
            return
        if not Category.objects.filter(id=category_id, store_id=store_id).exists():
            raise InvalidCategory()
