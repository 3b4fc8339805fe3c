"""Catalog API views.

Exposes ``CategoryService`` and ``ProductService`` under
``/stores/{store_id}/``.  Every member can read; OWNER and ADMIN write.
"""

from __future__ import annotations

from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.responses import created_response, success_response
from modules.products.dtos import (
    CreateCategoryDTO,
    CreateProductDTO,
    UpdateCategoryDTO,
    UpdateProductDTO,
)
from modules.products.filters import ProductFilter
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.serializers import (
    CategoryInputSerializer,
    CategorySerializer,
    ProductInputSerializer,
    ProductSerializer,
)
from modules.products.services import CategoryService, ProductService
from modules.stores.constants import ALL_ROLES, MANAGER_ROLES
from modules.stores.permissions import IsStoreMember

CATALOG_ROLES = {
    "default": MANAGER_ROLES,
    "list": ALL_ROLES,
    "retrieve": ALL_ROLES,
}


class CategoryViewSet(GenericViewSet):
    permission_classes = [IsStoreMember]
    lookup_url_kwarg = "category_id"
    lookup_value_regex = "[0-9a-fA-F-]{36}"
    store_roles = CATALOG_ROLES

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = CategoryService()

    def list(self, request: Request, store_id: str) -> Response:
        categories = self._service.list_categories(store_id)
        return success_response(CategorySerializer(categories, many=True).data)

    def retrieve(self, request: Request, store_id: str, category_id: str) -> Response:
        category = self._service.get_category(store_id, category_id)
        return success_response(CategorySerializer(category).data)

    def create(self, request: Request, store_id: str) -> Response:
        serializer = CategoryInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        data.pop("is_active", None)
        category = self._service.create_category(store_id, CreateCategoryDTO(**data))
        return created_response(CategorySerializer(category).data)

    def partial_update(self, request: Request, store_id: str, category_id: str) -> Response:
        serializer = CategoryInputSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        category = self._service.update_category(
            store_id, category_id, UpdateCategoryDTO(**serializer.validated_data)
        )
        return success_response(CategorySerializer(category).data)

    def destroy(self, request: Request, store_id: str, category_id: str) -> Response:
        affected = self._service.delete_category(store_id, category_id)
        return success_response(
            {"products_affected": affected}, message="Category deleted"
        )


class ProductViewSet(GenericViewSet):
    """Product CRUD plus availability toggle.

    Does **not** extend ``ModelViewSet``; ORM access goes through the
    service/repository layer.  ``ProductFilter`` validates list queries.
    """

    permission_classes = [IsStoreMember]
    lookup_url_kwarg = "product_id"
    lookup_value_regex = "[0-9a-fA-F-]{36}"
    store_roles = CATALOG_ROLES
    queryset = Product.objects.none()

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ProductService(repository=ProductDjangoRepository())

    def list(self, request: Request, store_id: str) -> Response:
        criteria = ProductFilter(request.query_params).to_criteria()
        queryset = self._service.list_products(store_id, criteria)
        page = self.paginate_queryset(queryset)
        serializer = ProductSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    def retrieve(self, request: Request, store_id: str, product_id: str) -> Response:
        product = self._service.get_product(store_id, product_id)
        return success_response(ProductSerializer(product).data)

    def create(self, request: Request, store_id: str) -> Response:
        serializer = ProductInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        product = self._service.create_product(
            store_id, CreateProductDTO(**serializer.validated_data)
        )
        return created_response(ProductSerializer(product).data)

    def partial_update(self, request: Request, store_id: str, product_id: str) -> Response:
        serializer = ProductInputSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        product = self._service.update_product(
            store_id, product_id, UpdateProductDTO(**serializer.validated_data)
        )
        return success_response(ProductSerializer(product).data)

    @action(detail=True, methods=["patch"], url_path="toggle-availability")
    def toggle_availability(
        self, request: Request, store_id: str, product_id: str
    ) -> Response:
        product = self._service.toggle_availability(store_id, product_id)
        return success_response(ProductSerializer(product).data)

    def destroy(self, request: Request, store_id: str, product_id: str) -> Response:
        self._service.delete_product(store_id, product_id)
        return success_response(message="Product deleted")
