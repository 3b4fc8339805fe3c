"""Unit tests for weekly slot management and blocked dates."""

from datetime import date, timedelta

import pytest
from django.utils import timezone

from modules.delivery.dtos import (
    BlockedDateDTO,
    BlockedDateRange,
    DeliverySlotDTO,
    UpdateDeliverySlotDTO,
)
from modules.delivery.exceptions import (
    BlockedDateNotFound,
    DateAlreadyBlocked,
    DateInPast,
    InvalidSlotWindow,
    LastActiveSlot,
    NoValidDates,
    SlotOverlap,
)
from modules.delivery.services import BlockedDateService, DeliverySlotService

pytestmark = pytest.mark.unit


def _slot(day=1, start="12:00", end="14:00", rate=2, active=True):
    return DeliverySlotDTO(
        day_of_week=day,
        start_time=start,
        end_time=end,
        max_orders_per_hour=rate,
        is_active=active,
    )


class TestDeliverySlotService:
    def test_overlapping_slot_same_day_is_rejected(self, store, monday_slot):
        with pytest.raises(SlotOverlap) as exc_info:
            DeliverySlotService().create_slot(store.id, _slot(start="13:00", end="15:00"))
        assert "12:00 - 14:00" in exc_info.value.message

    def test_adjacent_slot_is_allowed(self, store, monday_slot):
        slot = DeliverySlotService().create_slot(store.id, _slot(start="14:00", end="16:00"))
        assert slot.capacity == 4

    def test_same_window_other_day_is_allowed(self, store, monday_slot):
        slot = DeliverySlotService().create_slot(store.id, _slot(day=2))
        assert slot.day_name == "Tuesday"

    def test_inactive_slot_may_overlap(self, store, monday_slot):
        slot = DeliverySlotService().create_slot(store.id, _slot(active=False))
        assert slot.is_active is False

    def test_start_must_precede_end(self, store):
        with pytest.raises(InvalidSlotWindow):
            DeliverySlotService().create_slot(store.id, _slot(start="14:00", end="12:00"))

    def test_update_checks_overlap_excluding_itself(self, store, monday_slot):
        service = DeliverySlotService()
        updated = service.update_slot(
            store.id, monday_slot.id, UpdateDeliverySlotDTO(end_time="15:00")
        )
        assert updated.end_time == "15:00"

        other = service.create_slot(store.id, _slot(start="16:00", end="18:00"))
        with pytest.raises(SlotOverlap):
            service.update_slot(store.id, other.id, UpdateDeliverySlotDTO(start_time="14:30"))

    def test_cannot_delete_last_active_slot(self, store, monday_slot):
        with pytest.raises(LastActiveSlot):
            DeliverySlotService().delete_slot(store.id, monday_slot.id)

    def test_list_by_day_orders_by_start(self, store, monday_slot):
        service = DeliverySlotService()
        service.create_slot(store.id, _slot(start="09:00", end="11:00"))
        assert [s.start_time for s in service.list_by_day(store.id, 1)] == ["09:00", "12:00"]


class TestBlockedDateService:
    def test_block_and_list_in_range(self, store):
        service = BlockedDateService()
        tomorrow = timezone.localdate() + timedelta(days=1)
        service.create_blocked_date(store.id, BlockedDateDTO(date=tomorrow, reason="Inventory"))
        service.create_blocked_date(
            store.id, BlockedDateDTO(date=tomorrow + timedelta(days=30))
        )

        window = BlockedDateRange(date_from=tomorrow, date_to=tomorrow + timedelta(days=7))
        listed = service.list_blocked_dates(store.id, window)
        assert [b.date for b in listed] == [tomorrow]
        assert listed[0].reason == "Inventory"
        assert service.is_date_blocked(store.id, tomorrow)

    def test_adjacent_dates_stay_open(self, store):
        service = BlockedDateService()
        tomorrow = timezone.localdate() + timedelta(days=1)
        service.create_blocked_date(store.id, BlockedDateDTO(date=tomorrow))

        assert service.is_date_blocked(store.id, tomorrow)
        assert not service.is_date_blocked(store.id, tomorrow - timedelta(days=1))
        assert not service.is_date_blocked(store.id, tomorrow + timedelta(days=1))

    def test_past_date_is_rejected(self, store):
        with pytest.raises(DateInPast):
            BlockedDateService().create_blocked_date(
                store.id, BlockedDateDTO(date=date(2000, 1, 1))
            )

    def test_duplicate_date_is_conflict(self, store):
        service = BlockedDateService()
        day = timezone.localdate()
        service.create_blocked_date(store.id, BlockedDateDTO(date=day))
        with pytest.raises(DateAlreadyBlocked) as exc_info:
            service.create_blocked_date(store.id, BlockedDateDTO(date=day))
        assert exc_info.value.status_code == 409

    def test_bulk_skips_past_and_duplicates(self, store):
        service = BlockedDateService()
        today = timezone.localdate()
        service.create_blocked_date(store.id, BlockedDateDTO(date=today))

        created = service.create_many(
            store.id,
            [
                BlockedDateDTO(date=today - timedelta(days=1)),
                BlockedDateDTO(date=today),
                BlockedDateDTO(date=today + timedelta(days=2)),
            ],
        )
        assert [b.date for b in created] == [today + timedelta(days=2)]

    def test_bulk_with_only_past_dates_fails(self, store):
        with pytest.raises(NoValidDates):
            BlockedDateService().create_many(
                store.id, [BlockedDateDTO(date=date(2001, 5, 1))]
            )

    def test_delete_unknown_is_not_found(self, store):
        import uuid

        with pytest.raises(BlockedDateNotFound):
            BlockedDateService().delete_blocked_date(store.id, uuid.uuid4())
