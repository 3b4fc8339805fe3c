"""Catalog models: Category and Product.

Business rules implemented:
- Price cannot be negative.
- A product's category, when set, belongs to the same store
  (enforced at service layer).
- Deleting a category detaches its products (``SET_NULL``).
- Only ``is_available`` products can be ordered (enforced by the
  order service).
"""

from __future__ import annotations

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel


class Category(BaseModel):
    store = models.ForeignKey(
        "stores.Store", on_delete=models.CASCADE, related_name="categories"
    )
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    image = models.URLField(max_length=500, blank=True, default="")
    sort_order = models.PositiveIntegerField(default=0)
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = "categories"
        ordering = ["sort_order", "name"]
        indexes = [
            models.Index(fields=["store", "sort_order"], name="categories_store_sort_idx"),
        ]

    def __str__(self) -> str:
        return self.name


class Product(BaseModel):
    """Sellable catalog item.

    Order items snapshot ``name`` and ``price`` at purchase time, so edits
    here never alter existing orders.
    """

    store = models.ForeignKey(
        "stores.Store", on_delete=models.CASCADE, related_name="products"
    )
    category = models.ForeignKey(
        "products.Category",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="products",
    )
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    image = models.URLField(max_length=500, blank=True, default="")
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0"))],
    )
    is_available = models.BooleanField(default=True)
    sort_order = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "products"
        ordering = ["sort_order", "name"]
        indexes = [
            models.Index(
                fields=["store", "is_available"], name="products_store_avail_idx"
            ),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(price__gte=0),
                name="products_price_not_negative",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.price})"
