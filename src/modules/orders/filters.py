import django_filters
from rest_framework.exceptions import ValidationError

from modules.orders.constants import OrderStatus, OrderType
from modules.orders.dtos import OrderListFilter
from modules.orders.models import Order


class OrderFilter(django_filters.FilterSet):
    """Validates listing query params and turns them into an ``OrderListFilter``."""

    status = django_filters.ChoiceFilter(choices=OrderStatus.choices)
    type = django_filters.ChoiceFilter(choices=OrderType.choices)
    date = django_filters.DateFilter(method="filter_date")
    assigned_to = django_filters.UUIDFilter(field_name="assigned_to_id")

    class Meta:
        model = Order
        fields = ["status", "type", "date", "assigned_to"]

    def filter_date(self, queryset, name, value):
        return queryset.filter(OrderListFilter(date=value).to_q())

    def to_criteria(self) -> OrderListFilter:
        if not self.is_valid():
            raise ValidationError(self.errors)
        data = self.form.cleaned_data
        return OrderListFilter(
            status=data.get("status") or None,
            type=data.get("type") or None,
            date=data.get("date"),
            assigned_to=data.get("assigned_to"),
        )
