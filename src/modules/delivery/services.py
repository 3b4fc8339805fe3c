"""Delivery service layer.

- ``DeliveryZoneService``: zone CRUD and distance → zone resolution.
- ``DeliverySlotService``: weekly slot CRUD with overlap protection.
- ``BlockedDateService``: closed days, single and bulk.
- ``SlotCapacityValidator``: admission rules for scheduled orders.

Every store keeps at least one active zone and one active slot; the
guards live in the delete operations.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING, Iterable, List, Optional

import structlog
from django.db import IntegrityError, transaction
from django.utils import timezone

from modules.delivery.constants import DAY_NAMES
from modules.delivery.exceptions import (
    BlockedDateNotFound,
    DateAlreadyBlocked,
    DateInPast,
    DateNotAvailable,
    InsufficientNotice,
    InvalidSlotWindow,
    LastActiveSlot,
    LastActiveZone,
    NoValidDates,
    SlotFull,
    SlotNotAvailable,
    SlotNotFound,
    SlotOverlap,
    TooFarInAdvance,
    ZoneNotFound,
)
from modules.delivery.models import BlockedDate, DeliverySlot, DeliveryZone
from modules.delivery.timeofday import combine, parse_time_of_day, weekday_index

if TYPE_CHECKING:
    from modules.delivery.dtos import (
        BlockedDateDTO,
        BlockedDateRange,
        DeliverySlotDTO,
        DeliveryZoneDTO,
        UpdateDeliverySlotDTO,
        UpdateDeliveryZoneDTO,
    )
    from modules.stores.models import StoreSettings

logger = structlog.get_logger(__name__)


def local_today() -> date:
    return timezone.localdate()


def scheduled_start(day: date, slot_start: str) -> datetime:
    """Aware datetime for a slot start in the configured ``TIME_ZONE``."""
    return timezone.make_aware(combine(day, slot_start))


# ---------------------------------------------------------------------------
# Zones
# ---------------------------------------------------------------------------


class DeliveryZoneService:
    def list_zones(self, store_id, include_inactive: bool = False) -> List[DeliveryZone]:
        zones = DeliveryZone.objects.filter(store_id=store_id)
        if not include_inactive:
            zones = zones.filter(is_active=True)
        return list(zones.order_by("max_distance"))

    def get_zone(self, store_id, zone_id) -> DeliveryZone:
        zone = DeliveryZone.objects.filter(id=zone_id, store_id=store_id).first()
        if not zone:
            raise ZoneNotFound()
        return zone

    def resolve_zone(self, store_id, distance: float) -> Optional[DeliveryZone]:
        """Tightest active zone whose radius covers ``distance`` km."""
        return (
            DeliveryZone.objects.filter(
                store_id=store_id, is_active=True, max_distance__gte=distance
            )
            .order_by("max_distance")
            .first()
        )

    @transaction.atomic
    def create_zone(self, store_id, dto: DeliveryZoneDTO) -> DeliveryZone:
        zone = DeliveryZone.objects.create(store_id=store_id, **dto.model_dump())
        logger.info("delivery_zone.created", store_id=str(store_id), zone_id=str(zone.id))
        return zone

    @transaction.atomic
    def update_zone(self, store_id, zone_id, dto: UpdateDeliveryZoneDTO) -> DeliveryZone:
        zone = self.get_zone(store_id, zone_id)
        for field, value in dto.model_dump(exclude_none=True).items():
            setattr(zone, field, value)
        zone.save()
        logger.info("delivery_zone.updated", store_id=str(store_id), zone_id=str(zone_id))
        return zone

    @transaction.atomic
    def delete_zone(self, store_id, zone_id) -> None:
        zone = self.get_zone(store_id, zone_id)
        others_active = (
            DeliveryZone.objects.filter(store_id=store_id, is_active=True)
            .exclude(id=zone.id)
            .exists()
        )
        if not others_active:
            raise LastActiveZone()
        zone.delete()
        logger.info("delivery_zone.deleted", store_id=str(store_id), zone_id=str(zone_id))


# ---------------------------------------------------------------------------
# Slots
# ---------------------------------------------------------------------------


def check_slot_window(start_time: str, end_time: str) -> tuple[int, int]:
    start, end = parse_time_of_day(start_time), parse_time_of_day(end_time)
    if start >= end:
        raise InvalidSlotWindow()
    return start, end


def find_overlap(
    candidates: Iterable[DeliverySlot], start: int, end: int
) -> Optional[DeliverySlot]:
    for slot in candidates:
        if slot.overlaps(start, end):
            return slot
    return None


class DeliverySlotService:
    def list_slots(self, store_id, include_inactive: bool = False) -> List[DeliverySlot]:
        slots = DeliverySlot.objects.filter(store_id=store_id)
        if not include_inactive:
            slots = slots.filter(is_active=True)
        return list(slots.order_by("day_of_week", "start_time"))

    def list_by_day(self, store_id, day_of_week: int) -> List[DeliverySlot]:
        return list(
            DeliverySlot.objects.filter(
                store_id=store_id, day_of_week=day_of_week, is_active=True
            ).order_by("start_time")
        )

    def get_slot(self, store_id, slot_id) -> DeliverySlot:
        slot = DeliverySlot.objects.filter(id=slot_id, store_id=store_id).first()
        if not slot:
            raise SlotNotFound()
        return slot

    @transaction.atomic
    def create_slot(self, store_id, dto: DeliverySlotDTO) -> DeliverySlot:
        start, end = check_slot_window(dto.start_time, dto.end_time)
        if dto.is_active:
            self._ensure_no_overlap(store_id, dto.day_of_week, start, end)

        slot = DeliverySlot.objects.create(store_id=store_id, **dto.model_dump())
        logger.info(
            "delivery_slot.created",
            store_id=str(store_id),
            slot_id=str(slot.id),
            day=DAY_NAMES[slot.day_of_week],
        )
        return slot

    @transaction.atomic
    def update_slot(self, store_id, slot_id, dto: UpdateDeliverySlotDTO) -> DeliverySlot:
        slot = self.get_slot(store_id, slot_id)
        for field, value in dto.model_dump(exclude_none=True).items():
            setattr(slot, field, value)

        start, end = check_slot_window(slot.start_time, slot.end_time)
        if slot.is_active:
            self._ensure_no_overlap(
                store_id, slot.day_of_week, start, end, exclude_id=slot.id
            )

        slot.save()
        logger.info("delivery_slot.updated", store_id=str(store_id), slot_id=str(slot_id))
        return slot

    @transaction.atomic
    def delete_slot(self, store_id, slot_id) -> None:
        slot = self.get_slot(store_id, slot_id)
        others_active = (
            DeliverySlot.objects.filter(store_id=store_id, is_active=True)
            .exclude(id=slot.id)
            .exists()
        )
        if not others_active:
            raise LastActiveSlot()
        slot.delete()
        logger.info("delivery_slot.deleted", store_id=str(store_id), slot_id=str(slot_id))

    def _ensure_no_overlap(
        self, store_id, day_of_week: int, start: int, end: int, exclude_id=None
    ) -> None:
        same_day = DeliverySlot.objects.filter(
            store_id=store_id, day_of_week=day_of_week, is_active=True
        )
        if exclude_id is not None:
            same_day = same_day.exclude(id=exclude_id)

        clash = find_overlap(same_day, start, end)
        if clash:
            raise SlotOverlap(
                f"Time slot overlaps with existing slot: "
                f"{clash.start_time} - {clash.end_time}"
            )


# ---------------------------------------------------------------------------
# Blocked dates
# ---------------------------------------------------------------------------


class BlockedDateService:
    def list_blocked_dates(
        self, store_id, window: Optional[BlockedDateRange] = None
    ) -> List[BlockedDate]:
        blocked = BlockedDate.objects.filter(store_id=store_id)
        if window is not None:
            blocked = blocked.filter(window.to_q())
        return list(blocked.order_by("date"))

    def is_date_blocked(self, store_id, day: date) -> bool:
        return BlockedDate.objects.filter(store_id=store_id, date=day).exists()

    def create_blocked_date(self, store_id, dto: BlockedDateDTO) -> BlockedDate:
        if dto.date < local_today():
            raise DateInPast()
        if self.is_date_blocked(store_id, dto.date):
            raise DateAlreadyBlocked()

        try:
            with transaction.atomic():
                blocked = BlockedDate.objects.create(
                    store_id=store_id, date=dto.date, reason=dto.reason or ""
                )
        except IntegrityError as exc:
            # Lost a race with a concurrent insert of the same date.
            raise DateAlreadyBlocked() from exc

        logger.info("blocked_date.created", store_id=str(store_id), date=dto.date.isoformat())
        return blocked

    def create_many(self, store_id, dtos: Iterable[BlockedDateDTO]) -> List[BlockedDate]:
        """Block several dates; past dates are dropped and duplicates skipped.

        Only the successfully created subset is returned.
        """
        today = local_today()
        valid = [dto for dto in dtos if dto.date >= today]
        if not valid:
            raise NoValidDates()

        created = []
        for dto in valid:
            try:
                created.append(self.create_blocked_date(store_id, dto))
            except DateAlreadyBlocked:
                logger.info(
                    "blocked_date.skipped_duplicate",
                    store_id=str(store_id),
                    date=dto.date.isoformat(),
                )
        return created

    @transaction.atomic
    def delete_blocked_date(self, store_id, blocked_date_id) -> None:
        deleted, _ = BlockedDate.objects.filter(
            id=blocked_date_id, store_id=store_id
        ).delete()
        if not deleted:
            raise BlockedDateNotFound()
        logger.info(
            "blocked_date.deleted",
            store_id=str(store_id),
            blocked_date_id=str(blocked_date_id),
        )


# ---------------------------------------------------------------------------
# Scheduled order admission
# ---------------------------------------------------------------------------


class SlotCapacityValidator:
    """Decide whether a scheduled order fits the store's calendar.

    Rules, first failure wins:

    1. the slot start is at least ``min_advance_hours`` away;
    2. it is no more than ``max_advance_days`` away;
    3. the date is not blocked;
    4. an active slot with exactly these bounds exists on that weekday;
    5. non-cancelled scheduled orders already booked on (date, slot start)
       are below ``max_orders_per_hour * slot hours``.

    Callers that go on to book the order must run this inside the same
    transaction that serializes bookings for the store.
    """

    def __init__(self, blocked_dates: Optional[BlockedDateService] = None) -> None:
        self._blocked_dates = blocked_dates or BlockedDateService()

    def validate(
        self,
        store_id,
        store_settings: StoreSettings,
        scheduled_date: date,
        slot_start: str,
        slot_end: str,
        now: Optional[datetime] = None,
    ) -> DeliverySlot:
        from modules.orders.constants import OrderStatus, OrderType
        from modules.orders.models import Order

        now = now or timezone.now()
        log = logger.bind(
            store_id=str(store_id),
            scheduled_date=scheduled_date.isoformat(),
            slot_start=slot_start,
        )

        hours_ahead = (scheduled_start(scheduled_date, slot_start) - now).total_seconds() / 3600
        if hours_ahead < store_settings.min_advance_hours:
            log.info("schedule.rejected", reason="insufficient_notice")
            raise InsufficientNotice(
                f"Orders must be placed at least "
                f"{store_settings.min_advance_hours} hours in advance"
            )
        if hours_ahead > store_settings.max_advance_days * 24:
            log.info("schedule.rejected", reason="too_far_ahead")
            raise TooFarInAdvance(
                f"Orders cannot be placed more than "
                f"{store_settings.max_advance_days} days in advance"
            )

        if self._blocked_dates.is_date_blocked(store_id, scheduled_date):
            log.info("schedule.rejected", reason="date_blocked")
            raise DateNotAvailable()

        slot = DeliverySlot.objects.filter(
            store_id=store_id,
            day_of_week=weekday_index(scheduled_date),
            start_time=slot_start,
            end_time=slot_end,
            is_active=True,
        ).first()
        if not slot:
            log.info("schedule.rejected", reason="slot_not_found")
            raise SlotNotAvailable()

        booked = (
            Order.objects.filter(
                store_id=store_id,
                type=OrderType.SCHEDULED,
                scheduled_date=scheduled_date,
                scheduled_slot_start=slot_start,
            )
            .exclude(status=OrderStatus.CANCELLED)
            .count()
        )
        if booked >= slot.capacity:
            log.info("schedule.rejected", reason="slot_full", booked=booked)
            raise SlotFull()

        return slot
