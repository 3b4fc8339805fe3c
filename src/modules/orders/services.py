"""Order service layer (Use Cases).

Orchestrates order placement, the status lifecycle, delivery
assignment, payment confirmation and cancellation.  All write
operations are atomic; the service defines the unit-of-work boundary.

Business rules enforced:
- Store must exist and be active; the payment method must be enabled.
- Delivery address must fall inside an active zone of the store.
- Scheduled orders must fit an open, non-full slot.
- Products must belong to the store and be available.
- Order numbers are sequential per store, allocated under a store-row lock.
- Status transitions are validated against the state machine.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional

import structlog
from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone

from modules.delivery.directions import route_estimate
from modules.delivery.exceptions import OutsideCoverageArea
from modules.delivery.geo import Coordinates, distance_km
from modules.delivery.services import DeliveryZoneService, SlotCapacityValidator
from modules.orders.constants import (
    CUSTOMER_CANCEL_REASON,
    STORE_CANCEL_REASON,
    STATUS_TIMESTAMP_FIELDS,
    CancelledBy,
    OrderStatus,
    OrderType,
    PaymentMethod,
    PaymentStatus,
)
from modules.orders.events import (
    OrderAssigned,
    OrderCancelled,
    OrderCreated,
    OrderStatusChanged,
)
from modules.orders.exceptions import (
    CancellationWindowExpired,
    DeliveryPersonRequired,
    InvalidOrderStatus,
    NotADeliveryPerson,
    NotATransferPayment,
    OrderAlreadyCancelled,
    OrderAlreadyClosed,
    OrderNotFound,
    PaymentAlreadyConfirmed,
    PaymentMethodNotAccepted,
    ProductsUnavailable,
)
from modules.orders.policies import (
    customer_cancel_deadline,
    ensure_cancellable,
    ensure_customer_window,
    initial_state,
    price_line,
    price_order,
    refund_status_for,
)
from modules.stores.constants import MemberRole
from modules.stores.exceptions import StoreNotFound
from modules.stores.models import Store, StoreMember, StoreSettings
from shared.infrastructure.bus import event_bus

if TYPE_CHECKING:
    from modules.orders.dtos import CreateOrderDTO, OrderListFilter
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class OrderService:
    """Application service for Order use-cases.

    Receives repositories via constructor injection (DIP).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        product_repository: IProductRepository,
        zone_service: Optional[DeliveryZoneService] = None,
        slot_validator: Optional[SlotCapacityValidator] = None,
    ) -> None:
        self._order_repo = order_repository
        self._product_repo = product_repository
        self._zones = zone_service or DeliveryZoneService()
        self._slots = slot_validator or SlotCapacityValidator()

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_order(
        self, store_slug: str, dto: CreateOrderDTO, now: Optional[datetime] = None
    ) -> Order:
        """Place a customer order on the store identified by ``store_slug``.

        Steps:
        1. Lock the store row; it serializes numbering and slot booking.
        2. Check the payment method against the store settings.
        3. Resolve the delivery zone from the haversine distance.
        4. Validate the scheduled slot (SCHEDULED only).
        5. Snapshot product names and prices, price the order.
        6. Persist order + items and publish ``OrderCreated`` on commit.

        Raises:
            StoreNotFound: unknown or inactive store.
            PaymentMethodNotAccepted: method disabled in store settings.
            OutsideCoverageArea: no active zone covers the address.
            ProductsUnavailable: a product is missing or unavailable.
            MinimumOrderNotReached: subtotal below the zone minimum.
        """
        now = now or timezone.now()
        store = Store.objects.select_for_update().filter(slug=store_slug).first()
        if not store or not store.is_active:
            raise StoreNotFound()

        log = logger.bind(store_id=str(store.id), order_type=dto.type)
        log.info("order.creation_started")

        store_settings = StoreSettings.objects.get(store=store)
        if not store_settings.accepts(dto.payment_method):
            raise PaymentMethodNotAccepted()

        distance = distance_km(
            Coordinates(store.latitude, store.longitude),
            Coordinates(dto.customer_lat, dto.customer_lng),
        )
        zone = self._zones.resolve_zone(store.id, distance)
        if not zone:
            log.info("order.outside_coverage", distance_km=distance)
            raise OutsideCoverageArea()

        if dto.type == OrderType.SCHEDULED:
            self._slots.validate(
                store.id,
                store_settings,
                dto.scheduled_date,
                dto.scheduled_slot_start,
                dto.scheduled_slot_end,
                now=now,
            )

        products = {
            product.id: product
            for product in self._product_repo.get_available_in_store(
                store.id, [item.product_id for item in dto.items]
            )
        }
        if len(products) != len(dto.items):
            raise ProductsUnavailable()

        lines = [
            price_line(
                product_id=item.product_id,
                name=products[item.product_id].name,
                unit_price=products[item.product_id].price,
                quantity=item.quantity,
                notes=item.notes or "",
            )
            for item in dto.items
        ]
        pricing = price_order(lines, zone.delivery_fee, zone.min_order)
        status, payment_status = initial_state(dto.payment_method)

        order = self._order_repo.create(
            {
                "store": store,
                "order_number": self._order_repo.next_order_number(store.id),
                "type": dto.type,
                "status": status,
                "customer_name": dto.customer_name,
                "customer_phone": dto.customer_phone,
                "customer_email": dto.customer_email or "",
                "customer_address": dto.customer_address,
                "customer_lat": dto.customer_lat,
                "customer_lng": dto.customer_lng,
                "customer_notes": dto.customer_notes or "",
                "scheduled_date": dto.scheduled_date,
                "scheduled_slot_start": dto.scheduled_slot_start or "",
                "scheduled_slot_end": dto.scheduled_slot_end or "",
                "subtotal": pricing.subtotal,
                "delivery_fee": pricing.delivery_fee,
                "total": pricing.total,
                "payment_method": dto.payment_method,
                "payment_status": payment_status,
                "confirmed_at": now if status == OrderStatus.CONFIRMED else None,
            },
            lines,
        )

        order.add_domain_event(OrderCreated(aggregate_id=order.id, store_id=store.id))
        event_bus.publish_on_commit(order)

        log.info(
            "order.created",
            order_id=str(order.id),
            order_number=order.order_number,
            zone_id=str(zone.id),
            total=str(order.total),
        )
        return order

    def update_status(
        self, store_id, order_id, new_status: str, reason: str = ""
    ) -> Order:
        """Transition an order to a new status.

        The route ETA for ``ON_THE_WAY`` is fetched before the order row is
        locked, so a slow directions provider never holds the lock.  The
        transition is then re-validated under ``SELECT FOR UPDATE``.
        ``CANCELLED`` follows the store cancellation path.

        Raises:
            OrderNotFound: order does not exist in this store.
            InvalidOrderStatus: transition is not allowed.
            DeliveryPersonRequired: ``ON_THE_WAY`` without an assignee.
        """
        estimate = None
        if new_status == OrderStatus.ON_THE_WAY:
            current = self.get_order(store_id, order_id)
            self._check_transition(current, new_status)
            store = current.store
            estimate = route_estimate(
                Coordinates(store.latitude, store.longitude),
                Coordinates(current.customer_lat, current.customer_lng),
            )

        with transaction.atomic():
            order = self._lock(store_id, order_id)
            self._check_transition(order, new_status)
            log = logger.bind(
                order_id=str(order_id),
                current_status=order.status,
                new_status=new_status,
            )

            if new_status == OrderStatus.CANCELLED:
                self._cancel(
                    order, CancelledBy.STORE, reason or STORE_CANCEL_REASON, timezone.now()
                )
                return self.get_order(store_id, order_id)

            if estimate is not None:
                order.estimated_minutes = estimate.duration_minutes

            old_status = order.status
            order.status = new_status
            setattr(order, STATUS_TIMESTAMP_FIELDS[new_status], timezone.now())
            order.add_domain_event(
                OrderStatusChanged(
                    aggregate_id=order.id,
                    store_id=order.store_id,
                    old_status=old_status,
                    new_status=new_status,
                )
            )
            self._order_repo.save(order)
            event_bus.publish_on_commit(order)

        log.info("order.status_updated", estimated_minutes=order.estimated_minutes)
        return self.get_order(store_id, order_id)

    @transaction.atomic
    def assign_delivery(self, store_id, order_id, user_id) -> Order:
        """Assign an active delivery member of the store to the order.

        Raises:
            OrderAlreadyClosed: order is delivered or cancelled.
            NotADeliveryPerson: user is not an active DELIVERY member.
        """
        order = self._lock(store_id, order_id)
        if order.is_terminal:
            raise OrderAlreadyClosed(
                f"Cannot assign a delivery person to a {order.status.lower()} order"
            )

        is_delivery_member = StoreMember.objects.filter(
            store_id=store_id,
            user_id=user_id,
            role=MemberRole.DELIVERY,
            is_active=True,
        ).exists()
        if not is_delivery_member:
            raise NotADeliveryPerson()

        order.assigned_to_id = user_id
        order.assigned_at = timezone.now()
        order.add_domain_event(
            OrderAssigned(
                aggregate_id=order.id, store_id=order.store_id, assigned_to_id=user_id
            )
        )
        self._order_repo.save(order)
        event_bus.publish_on_commit(order)

        logger.info(
            "order.assigned", order_id=str(order_id), assigned_to=str(user_id)
        )
        return self.get_order(store_id, order_id)

    @transaction.atomic
    def confirm_payment(self, store_id, order_id) -> Order:
        """Confirm a bank transfer and force the order into PREPARING.

        Paying is a shortcut past the transition table: ``confirmed_at`` and
        ``preparing_at`` are both stamped, whatever the current status.

        Raises:
            OrderAlreadyCancelled: order was cancelled.
            OrderAlreadyClosed: order was already delivered.
            NotATransferPayment: order is paid in cash.
            PaymentAlreadyConfirmed: payment confirmed before.
        """
        order = self._lock(store_id, order_id)
        if order.status == OrderStatus.CANCELLED:
            raise OrderAlreadyCancelled()
        if order.status == OrderStatus.DELIVERED:
            raise OrderAlreadyClosed("Order is already delivered")
        if order.payment_method != PaymentMethod.TRANSFER:
            raise NotATransferPayment()
        if order.payment_status == PaymentStatus.CONFIRMED:
            raise PaymentAlreadyConfirmed()

        now = timezone.now()
        old_status = order.status
        order.payment_status = PaymentStatus.CONFIRMED
        order.status = OrderStatus.PREPARING
        order.confirmed_at = now
        order.preparing_at = now
        order.add_domain_event(
            OrderStatusChanged(
                aggregate_id=order.id,
                store_id=order.store_id,
                old_status=old_status,
                new_status=order.status,
            )
        )
        self._order_repo.save(order)
        event_bus.publish_on_commit(order)

        logger.info("order.payment_confirmed", order_id=str(order_id))
        return self.get_order(store_id, order_id)

    @transaction.atomic
    def cancel_by_store(self, store_id, order_id, reason: str) -> Order:
        """Cancel on behalf of the store; no time window applies."""
        order = self._lock(store_id, order_id)
        ensure_cancellable(order.status)
        self._cancel(order, CancelledBy.STORE, reason, timezone.now())
        return self.get_order(store_id, order_id)

    @transaction.atomic
    def cancel_by_customer(self, order_id, now: Optional[datetime] = None) -> Order:
        """Cancel from the public tracking page within the store's window.

        Raises:
            CancellationWindowExpired: the window has passed.
        """
        now = now or timezone.now()
        order = self._order_repo.get_for_update(order_id)
        if not order:
            raise OrderNotFound()
        ensure_cancellable(order.status)

        store_settings = StoreSettings.objects.get(store_id=order.store_id)
        deadline = customer_cancel_deadline(
            order.type,
            order.created_at,
            order.scheduled_date,
            order.scheduled_slot_start,
            store_settings.immediate_cancel_minutes,
            store_settings.scheduled_cancel_hours,
        )
        try:
            ensure_customer_window(deadline, now)
        except CancellationWindowExpired:
            logger.info(
                "order.cancel_window_expired",
                order_id=str(order_id),
                deadline=deadline.isoformat(),
            )
            raise

        self._cancel(order, CancelledBy.CUSTOMER, CUSTOMER_CANCEL_REASON, now)
        return self._order_repo.get_by_id(order_id)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, store_id, order_id) -> Order:
        """Retrieve a single order of the store.

        Raises:
            OrderNotFound: if the order does not exist in this store.
        """
        order = self._order_repo.get_in_store(store_id, order_id)
        if not order:
            raise OrderNotFound()
        return order

    def track_order(self, order_id) -> Order:
        """Public lookup by id for the customer tracking page."""
        order = self._order_repo.get_by_id(order_id)
        if not order:
            raise OrderNotFound()
        return order

    def list_orders(self, store_id, criteria: OrderListFilter) -> QuerySet:
        return self._order_repo.list_for_store(store_id, criteria)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _lock(self, store_id, order_id) -> Order:
        order = self._order_repo.get_for_update(order_id, store_id=store_id)
        if not order:
            raise OrderNotFound()
        return order

    def _check_transition(self, order: Order, new_status: str) -> None:
        if not order.can_transition_to(new_status):
            logger.warning(
                "order.invalid_transition",
                order_id=str(order.id),
                current_status=order.status,
                new_status=new_status,
            )
            raise InvalidOrderStatus(
                f"Cannot transition from {order.status} to {new_status}"
            )
        if new_status == OrderStatus.ON_THE_WAY and not order.assigned_to_id:
            raise DeliveryPersonRequired()

    def _cancel(self, order: Order, cancelled_by: str, reason: str, now: datetime) -> None:
        order.status = OrderStatus.CANCELLED
        order.cancelled_by = cancelled_by
        order.cancel_reason = reason
        order.cancelled_at = now
        order.refund_status = refund_status_for(order.payment_method, order.payment_status)
        order.add_domain_event(
            OrderCancelled(
                aggregate_id=order.id, store_id=order.store_id, cancelled_by=cancelled_by
            )
        )
        self._order_repo.save(order)
        event_bus.publish_on_commit(order)

        logger.info(
            "order.cancelled",
            order_id=str(order.id),
            cancelled_by=cancelled_by,
            refund_status=order.refund_status,
        )
