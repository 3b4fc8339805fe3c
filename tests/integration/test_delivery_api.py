"""Integration tests for delivery zones, slots and blocked dates."""

from __future__ import annotations

import pytest
from freezegun import freeze_time

from modules.stores.constants import MemberRole

pytestmark = pytest.mark.integration


def delivery_url(store, suffix):
    return f"/api/v1/stores/{store.id}/{suffix}"


class TestZones:
    def test_create_and_list_sorted_by_radius(self, owner_client, store, zone):
        response = owner_client.post(
            delivery_url(store, "delivery-zones/"),
            {"name": "Cerca", "max_distance": 2, "delivery_fee": "1.00", "min_order": "5.00"},
            format="json",
        )
        assert response.status_code == 201

        names = [z["name"] for z in owner_client.get(delivery_url(store, "delivery-zones/")).json()["data"]]
        assert names == ["Cerca", "Centro"]

    def test_last_active_zone_cannot_be_deleted(self, owner_client, store, zone):
        response = owner_client.delete(delivery_url(store, f"delivery-zones/{zone.id}/"))
        assert response.status_code == 400
        assert response.json()["message"] == "Cannot delete the last active delivery zone"

    def test_delivery_member_reads_but_cannot_write(self, auth_client_for, courier, store, zone):
        client = auth_client_for(courier)
        assert client.get(delivery_url(store, "delivery-zones/")).status_code == 200
        response = client.patch(
            delivery_url(store, f"delivery-zones/{zone.id}/"), {"delivery_fee": "0.00"}, format="json"
        )
        assert response.status_code == 403


class TestSlots:
    def test_overlap_is_rejected(self, owner_client, store, monday_slot):
        response = owner_client.post(
            delivery_url(store, "delivery-slots/"),
            {"day_of_week": 1, "start_time": "13:00", "end_time": "15:00", "max_orders_per_hour": 3},
            format="json",
        )
        assert response.status_code == 400
        assert response.json()["message"] == (
            "Time slot overlaps with existing slot: 12:00 - 14:00"
        )

    def test_bad_time_format(self, owner_client, store):
        response = owner_client.post(
            delivery_url(store, "delivery-slots/"),
            {"day_of_week": 1, "start_time": "25:00", "end_time": "26:00", "max_orders_per_hour": 3},
            format="json",
        )
        assert response.status_code == 400
        assert "start_time" in response.json()["errors"]

    def test_by_day(self, owner_client, store, monday_slot):
        monday = owner_client.get(delivery_url(store, "delivery-slots/day/1/")).json()["data"]
        tuesday = owner_client.get(delivery_url(store, "delivery-slots/day/2/")).json()["data"]
        assert [s["start_time"] for s in monday] == ["12:00"]
        assert tuesday == []


@freeze_time("2026-03-01 10:00:00")
class TestBlockedDates:
    def test_block_and_list_range(self, owner_client, store):
        url = delivery_url(store, "blocked-dates/")
        created = owner_client.post(url, {"date": "2026-03-05", "reason": "Holiday"}, format="json")
        assert created.status_code == 201
        owner_client.post(url, {"date": "2026-04-10"}, format="json")

        data = owner_client.get(url, {"from": "2026-03-01", "to": "2026-03-31"}).json()["data"]
        assert [b["date"] for b in data] == ["2026-03-05"]

    def test_duplicate_is_409(self, owner_client, store):
        url = delivery_url(store, "blocked-dates/")
        owner_client.post(url, {"date": "2026-03-05"}, format="json")
        response = owner_client.post(url, {"date": "2026-03-05"}, format="json")
        assert response.status_code == 409

    def test_past_date_is_400(self, owner_client, store):
        response = owner_client.post(
            delivery_url(store, "blocked-dates/"), {"date": "2026-02-27"}, format="json"
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Cannot block a date in the past"

    def test_bulk_skips_past_dates(self, owner_client, store):
        response = owner_client.post(
            delivery_url(store, "blocked-dates/bulk/"),
            {"dates": [{"date": "2026-02-01"}, {"date": "2026-03-07"}, {"date": "2026-03-08"}]},
            format="json",
        )
        assert response.status_code == 201
        assert [b["date"] for b in response.json()["data"]] == ["2026-03-07", "2026-03-08"]

    def test_unblock(self, owner_client, store):
        url = delivery_url(store, "blocked-dates/")
        blocked_id = owner_client.post(url, {"date": "2026-03-05"}, format="json").json()["data"]["id"]
        assert owner_client.delete(f"{url}{blocked_id}/").status_code == 200
        assert owner_client.get(url).json()["data"] == []

    def test_cashier_cannot_block(self, auth_client_for, make_member, store):
        cashier, _ = make_member(MemberRole.CASHIER)
        response = auth_client_for(cashier).post(
            delivery_url(store, "blocked-dates/"), {"date": "2026-03-05"}, format="json"
        )
        assert response.status_code == 403
