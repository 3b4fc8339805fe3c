"""Catalog domain exceptions."""

from __future__ import annotations

from modules.core.exceptions import BadRequestError, NotFoundError


class ProductNotFound(NotFoundError):
    default_message = "Product not found"


class CategoryNotFound(NotFoundError):
    default_message = "Category not found"


class InvalidCategory(BadRequestError):
    """The referenced category does not exist in the product's store."""

    default_message = "Category not found"
