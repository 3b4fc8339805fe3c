"""Unit tests for the real-time hub and the order broadcasters."""

from __future__ import annotations

import pytest

from modules.accounts.tokens import issue_access_token
from modules.realtime.exceptions import HubAuthenticationError
from modules.realtime.hub import (
    LOCATION_UPDATED,
    RealtimeHub,
    get_hub,
    init_hub,
    order_room,
    reset_hub,
    store_room,
)

pytestmark = pytest.mark.unit


class Inbox:
    def __init__(self):
        self.messages = []

    def __call__(self, event, payload):
        self.messages.append((event, payload))

    def events(self):
        return [event for event, _ in self.messages]


@pytest.fixture()
def hub():
    return RealtimeHub()


class TestLifecycle:
    def test_get_hub_before_init_fails(self):
        reset_hub()
        try:
            with pytest.raises(RuntimeError, match="not initialized"):
                get_hub()
        finally:
            init_hub()

    def test_init_is_idempotent(self):
        assert init_hub() is init_hub()
        assert get_hub() is init_hub()


class TestConnect:
    def test_joins_store_rooms(self, hub, owner, store):
        connection = hub.connect(issue_access_token(owner), Inbox())
        assert connection.rooms == {store_room(store.id)}
        assert connection in hub.members(store_room(store.id))

    def test_missing_token(self, hub):
        with pytest.raises(HubAuthenticationError):
            hub.connect(None, Inbox())

    def test_garbage_token(self, hub):
        with pytest.raises(HubAuthenticationError, match="Invalid token"):
            hub.connect("not-a-jwt", Inbox())

    def test_deleted_user(self, hub, make_member):
        user, _ = make_member()
        token = issue_access_token(user)
        user.delete()
        with pytest.raises(HubAuthenticationError, match="User not found"):
            hub.connect(token, Inbox())

    def test_disconnect_leaves_rooms(self, hub, owner, store):
        connection = hub.connect(issue_access_token(owner), Inbox())
        hub.disconnect(connection)
        assert hub.members(store_room(store.id)) == set()


class TestEmit:
    def test_track_and_untrack_order(self, hub, owner, store):
        inbox = Inbox()
        connection = hub.connect(issue_access_token(owner), inbox)
        hub.track(connection, "abc")
        assert hub.emit(order_room("abc"), "order:updated", {}) == 1

        hub.untrack(connection, "abc")
        assert hub.emit(order_room("abc"), "order:updated", {}) == 0
        assert inbox.events() == ["order:updated"]

    def test_failing_sender_is_skipped(self, hub, owner, make_member, store):
        def broken(event, payload):
            raise ConnectionError("gone")

        cashier, _ = make_member()
        inbox = Inbox()
        hub.connect(issue_access_token(owner), broken)
        hub.connect(issue_access_token(cashier), inbox)

        assert hub.emit(store_room(store.id), "order:new", {"id": "1"}) == 1
        assert inbox.messages == [("order:new", {"id": "1"})]


class TestPushLocation:
    def test_assignee_broadcasts_to_store_and_order(
        self, hub, place_order, order_service, store, owner, courier
    ):
        order = place_order()
        order_service.assign_delivery(store.id, order.id, courier.id)
        staff_inbox, courier_inbox = Inbox(), Inbox()
        hub.connect(issue_access_token(owner), staff_inbox)
        courier_conn = hub.connect(issue_access_token(courier), courier_inbox)
        hub.track(courier_conn, order.id)

        assert hub.push_location(courier_conn, order.id, 40.42, -3.70) is True
        # Store room plus the order room the courier is tracking.
        assert courier_inbox.events() == [LOCATION_UPDATED, LOCATION_UPDATED]

        event, payload = staff_inbox.messages[-1]
        assert event == LOCATION_UPDATED
        assert payload["order_id"] == str(order.id)
        assert payload["lat"] == 40.42
        assert "timestamp" in payload

    def test_non_assignee_is_rejected(self, hub, place_order, owner):
        order = place_order()
        connection = hub.connect(issue_access_token(owner), Inbox())
        assert hub.push_location(connection, order.id, 0.0, 0.0) is False

    def test_malformed_order_id_is_dropped(self, hub, courier, store):
        inbox = Inbox()
        connection = hub.connect(issue_access_token(courier), inbox)
        assert hub.push_location(connection, "not-a-uuid", 1.0, 2.0) is False
        assert inbox.messages == []


class TestBroadcasters:
    def test_order_events_reach_store_room(
        self, place_order, order_service, store, owner, django_capture_on_commit_callbacks
    ):
        hub = get_hub()
        inbox = Inbox()
        connection = hub.connect(issue_access_token(owner), inbox)
        try:
            with django_capture_on_commit_callbacks(execute=True):
                order = place_order()
            with django_capture_on_commit_callbacks(execute=True):
                order_service.cancel_by_store(store.id, order.id, "Closed")
        finally:
            hub.disconnect(connection)

        assert inbox.events() == ["order:new", "order:cancelled"]
        assert inbox.messages[0][1]["order_number"] == order.order_number
