import django_filters
from rest_framework.exceptions import ValidationError

from modules.products.dtos import ProductListFilter
from modules.products.models import Product


class ProductFilter(django_filters.FilterSet):
    """Validates catalog query params and turns them into a ``ProductListFilter``."""

    category = django_filters.UUIDFilter(field_name="category_id")
    is_available = django_filters.BooleanFilter(field_name="is_available")
    search = django_filters.CharFilter(field_name="name", lookup_expr="icontains")
    min_price = django_filters.NumberFilter(field_name="price", lookup_expr="gte")
    max_price = django_filters.NumberFilter(field_name="price", lookup_expr="lte")

    class Meta:
        model = Product
        fields = ["category", "is_available", "search", "min_price", "max_price"]

    def to_criteria(self) -> ProductListFilter:
        if not self.is_valid():
            raise ValidationError(self.errors)
        data = self.form.cleaned_data
        return ProductListFilter(
            category=data.get("category"),
            is_available=data.get("is_available"),
            search=data.get("search") or "",
            min_price=data.get("min_price"),
            max_price=data.get("max_price"),
        )
