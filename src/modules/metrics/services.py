"""Store metrics aggregation.

All figures are computed from orders of one store inside an optional
creation-time window.  Revenue, average value, delivery time and top
products consider DELIVERED orders only.  Nothing here raises on an
empty store: every figure falls back to zero.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Any, Dict, List, Optional

import structlog
from django.db.models import Avg, Count, Q, Sum
from django.db.models.functions import TruncDate
from django.utils import timezone

from modules.orders.constants import OrderStatus
from modules.orders.models import Order, OrderItem

logger = structlog.get_logger(__name__)

TOP_PRODUCTS_LIMIT = 5
TRAILING_DAYS = 7


def start_of_day(day: date) -> datetime:
    return timezone.make_aware(datetime.combine(day, time.min))


@dataclass(frozen=True)
class MetricsWindow:
    """Half-open creation-time window ``[start, end)``; either bound may be open."""

    start: Optional[datetime] = None
    end: Optional[datetime] = None

    @classmethod
    def for_dates(cls, date_from: Optional[date], date_to: Optional[date]) -> MetricsWindow:
        """Whole local days, ``date_to`` included."""
        return cls(
            start=start_of_day(date_from) if date_from else None,
            end=start_of_day(date_to + timedelta(days=1)) if date_to else None,
        )

    @classmethod
    def for_day(cls, day: date) -> MetricsWindow:
        return cls.for_dates(day, day)

    def to_q(self, prefix: str = "") -> Q:
        query = Q()
        if self.start:
            query &= Q(**{f"{prefix}created_at__gte": self.start})
        if self.end:
            query &= Q(**{f"{prefix}created_at__lt": self.end})
        return query


@dataclass
class StoreMetrics:
    total_orders: int = 0
    completed_orders: int = 0
    cancelled_orders: int = 0
    revenue: Decimal = Decimal("0.00")
    avg_order_value: Decimal = Decimal("0.00")
    avg_delivery_time: int = 0
    conversion_rate: int = 0
    orders_by_status: List[Dict[str, Any]] = field(default_factory=list)
    top_products: List[Dict[str, Any]] = field(default_factory=list)
    orders_by_day: List[Dict[str, Any]] = field(default_factory=list)


class MetricsService:
    def get_store_metrics(
        self, store_id, window: Optional[MetricsWindow] = None
    ) -> StoreMetrics:
        window = window or MetricsWindow()
        orders = Order.objects.filter(store_id=store_id).filter(window.to_q())
        delivered = orders.filter(status=OrderStatus.DELIVERED)

        metrics = StoreMetrics()
        metrics.total_orders = orders.count()
        metrics.completed_orders = delivered.count()
        metrics.cancelled_orders = orders.filter(status=OrderStatus.CANCELLED).count()

        totals = delivered.aggregate(revenue=Sum("total"), average=Avg("total"))
        metrics.revenue = totals["revenue"] or Decimal("0.00")
        metrics.avg_order_value = Decimal(totals["average"] or 0).quantize(Decimal("0.01"))
        metrics.avg_delivery_time = self._avg_delivery_minutes(delivered)

        if metrics.total_orders:
            metrics.conversion_rate = round(
                metrics.completed_orders / metrics.total_orders * 100
            )

        metrics.orders_by_status = [
            {"status": row["status"], "count": row["count"]}
            for row in orders.values("status").annotate(count=Count("id")).order_by("status")
        ]
        metrics.top_products = [
            {
                "product_id": row["product_id"],
                "name": row["name"],
                "total_sold": row["total_sold"] or 0,
            }
            for row in OrderItem.objects.filter(
                order__store_id=store_id, order__status=OrderStatus.DELIVERED
            )
            .filter(window.to_q(prefix="order__"))
            .values("product_id", "name")
            .annotate(total_sold=Sum("quantity"))
            .order_by("-total_sold", "name")[:TOP_PRODUCTS_LIMIT]
        ]
        metrics.orders_by_day = self._orders_by_day(store_id)

        logger.info(
            "metrics.computed",
            store_id=str(store_id),
            total_orders=metrics.total_orders,
        )
        return metrics

    def get_today_metrics(self, store_id) -> StoreMetrics:
        return self.get_store_metrics(
            store_id, MetricsWindow.for_day(timezone.localdate())
        )

    def _avg_delivery_minutes(self, delivered) -> int:
        durations = [
            (delivered_at - confirmed_at).total_seconds() / 60
            for confirmed_at, delivered_at in delivered.filter(
                confirmed_at__isnull=False, delivered_at__isnull=False
            ).values_list("confirmed_at", "delivered_at")
        ]
        if not durations:
            return 0
        return round(sum(durations) / len(durations))

    def _orders_by_day(self, store_id) -> List[Dict[str, Any]]:
        """Trailing week ending today, one entry per day including empty ones."""
        today = timezone.localdate()
        days = [today - timedelta(days=offset) for offset in range(TRAILING_DAYS - 1, -1, -1)]
        counts = {
            row["day"]: row["count"]
            for row in Order.objects.filter(
                store_id=store_id, created_at__gte=start_of_day(days[0])
            )
            .annotate(day=TruncDate("created_at"))
            .values("day")
            .annotate(count=Count("id"))
            .order_by("day")
        }
        return [{"date": day.isoformat(), "count": counts.get(day, 0)} for day in days]
