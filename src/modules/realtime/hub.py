"""In-process real-time hub.

Connections join named rooms and receive ``(event, payload)`` pairs
through the ``send`` callable supplied by the transport.  Rooms:

- ``store:{id}``: every active member of the store, joined on connect;
- ``order:{id}``: anyone tracking the order.

The hub is a process-wide service created once by ``init_hub()`` (from
the realtime app's ``ready()``); ``get_hub()`` fails fast before that.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional, Set
from uuid import UUID, uuid4

import structlog
from django.core.exceptions import ValidationError
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.tokens import AccessToken

from modules.realtime.exceptions import HubAuthenticationError

logger = structlog.get_logger(__name__)

Sender = Callable[[str, Dict[str, Any]], None]

LOCATION_UPDATED = "delivery:location:updated"


def store_room(store_id) -> str:
    return f"store:{store_id}"


def order_room(order_id) -> str:
    return f"order:{order_id}"


@dataclass(eq=False)
class Connection:
    user_id: UUID
    send: Sender
    id: UUID = field(default_factory=uuid4)
    rooms: Set[str] = field(default_factory=set)


class RealtimeHub:
    def __init__(self) -> None:
        self._rooms: Dict[str, Set[Connection]] = {}
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Connections
    # ------------------------------------------------------------------

    def connect(self, token: Optional[str], send: Sender) -> Connection:
        """Authenticate ``token`` and join the user's store rooms.

        Raises:
            HubAuthenticationError: missing, invalid or expired token,
                or the user no longer exists.
        """
        from modules.accounts.models import User
        from modules.stores.models import StoreMember

        if not token:
            raise HubAuthenticationError()
        try:
            access = AccessToken(token)
        except TokenError as exc:
            raise HubAuthenticationError("Invalid token") from exc

        user_id = access.get(api_settings.USER_ID_CLAIM)
        if not User.objects.filter(id=user_id, is_active=True).exists():
            raise HubAuthenticationError("User not found")

        connection = Connection(user_id=UUID(str(user_id)), send=send)
        store_ids = StoreMember.objects.filter(
            user_id=user_id, is_active=True
        ).values_list("store_id", flat=True)
        for store_id in store_ids:
            self._join(connection, store_room(store_id))

        logger.info(
            "realtime.connected",
            connection_id=str(connection.id),
            user_id=str(user_id),
            rooms=sorted(connection.rooms),
        )
        return connection

    def disconnect(self, connection: Connection) -> None:
        with self._lock:
            for room in connection.rooms:
                members = self._rooms.get(room)
                if members is not None:
                    members.discard(connection)
                    if not members:
                        del self._rooms[room]
            connection.rooms.clear()
        logger.info("realtime.disconnected", connection_id=str(connection.id))

    def track(self, connection: Connection, order_id) -> None:
        self._join(connection, order_room(order_id))

    def untrack(self, connection: Connection, order_id) -> None:
        room = order_room(order_id)
        with self._lock:
            members = self._rooms.get(room)
            if members is not None:
                members.discard(connection)
                if not members:
                    del self._rooms[room]
            connection.rooms.discard(room)

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    def push_location(self, connection: Connection, order_id, lat: float, lng: float) -> bool:
        """Relay the courier position; only the order's assignee may push."""
        from modules.orders.models import Order

        try:
            order = (
                Order.objects.filter(id=order_id)
                .values("store_id", "assigned_to_id")
                .first()
            )
        except (ValueError, ValidationError):
            order = None
        if not order or order["assigned_to_id"] != connection.user_id:
            logger.warning(
                "realtime.location_rejected",
                connection_id=str(connection.id),
                order_id=str(order_id),
            )
            return False

        payload = {
            "order_id": str(order_id),
            "lat": lat,
            "lng": lng,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        self.emit(store_room(order["store_id"]), LOCATION_UPDATED, payload)
        self.emit(order_room(order_id), LOCATION_UPDATED, payload)
        return True

    def emit(self, room: str, event: str, payload: Dict[str, Any]) -> int:
        """Send to every connection in ``room``; returns how many were reached.

        A failing sender is logged and skipped.
        """
        with self._lock:
            members = list(self._rooms.get(room, ()))
        delivered = 0
        for connection in members:
            try:
                connection.send(event, payload)
                delivered += 1
            except Exception:
                logger.exception(
                    "realtime.send_failed",
                    connection_id=str(connection.id),
                    room=room,
                    realtime_event=event,
                )
        return delivered

    def members(self, room: str) -> Set[Connection]:
        with self._lock:
            return set(self._rooms.get(room, ()))

    def stats(self) -> Dict[str, int]:
        with self._lock:
            connections = set().union(*self._rooms.values()) if self._rooms else set()
            return {"rooms": len(self._rooms), "connections": len(connections)}

    def _join(self, connection: Connection, room: str) -> None:
        with self._lock:
            self._rooms.setdefault(room, set()).add(connection)
            connection.rooms.add(room)


_hub: Optional[RealtimeHub] = None


def init_hub() -> RealtimeHub:
    """Create the process-wide hub; repeated calls return the same instance."""
    global _hub
    if _hub is None:
        _hub = RealtimeHub()
    return _hub


def get_hub() -> RealtimeHub:
    if _hub is None:
        raise RuntimeError("Realtime hub not initialized; call init_hub() first")
    return _hub


def reset_hub() -> None:
    """Drop the process-wide hub (test isolation)."""
    global _hub
    _hub = None
