"""Catalog DTOs for the Service Layer.

Framework-agnostic, immutable (``frozen=True``) Pydantic v2 models.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional
from uuid import UUID

from django.db.models import Q
from pydantic import BaseModel, ConfigDict, Field


class CreateCategoryDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=2)
    description: Optional[str] = ""
    image: Optional[str] = ""
    sort_order: Optional[int] = Field(default=None, ge=0)


class UpdateCategoryDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: Optional[str] = Field(default=None, min_length=2)
    description: Optional[str] = None
    image: Optional[str] = None
    sort_order: Optional[int] = Field(default=None, ge=0)
    is_active: Optional[bool] = None


class CreateProductDTO(BaseModel):
    """Immutable DTO for product creation. Price may be zero, never negative."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    price: Decimal = Field(ge=0)
    description: Optional[str] = ""
    image: Optional[str] = ""
    category_id: Optional[UUID] = None
    is_available: bool = True
    sort_order: int = Field(default=0, ge=0)


class UpdateProductDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: Optional[str] = Field(default=None, min_length=1)
    price: Optional[Decimal] = Field(default=None, ge=0)
    description: Optional[str] = None
    image: Optional[str] = None
    category_id: Optional[UUID] = None
    is_available: Optional[bool] = None
    sort_order: Optional[int] = Field(default=None, ge=0)


@dataclass(frozen=True)
class ProductListFilter:
    """Catalog listing criteria for one store."""

    category: Optional[UUID] = None
    is_available: Optional[bool] = None
    search: str = ""
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None

    def to_q(self) -> Q:
        query = Q()
        if self.category:
            query &= Q(category_id=self.category)
        if self.is_available is not None:
            query &= Q(is_available=self.is_available)
        if self.search:
            query &= Q(name__icontains=self.search)
        if self.min_price is not None:
            query &= Q(price__gte=self.min_price)
        if self.max_price is not None:
            query &= Q(price__lte=self.max_price)
        return query
