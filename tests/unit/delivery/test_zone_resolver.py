"""Unit tests for delivery zone resolution and zone guards."""

from decimal import Decimal

import pytest

from modules.delivery.dtos import DeliveryZoneDTO
from modules.delivery.exceptions import LastActiveZone
from modules.delivery.models import DeliveryZone
from modules.delivery.services import DeliveryZoneService

pytestmark = pytest.mark.unit


@pytest.fixture()
def zones(store):
    def _zone(name, radius, active=True):
        return DeliveryZone.objects.create(
            store=store,
            name=name,
            max_distance=radius,
            delivery_fee=Decimal("1.00"),
            min_order=Decimal("0"),
            is_active=active,
        )

    return {
        "near": _zone("Near", 2),
        "mid": _zone("Mid", 5),
        "far": _zone("Far", 10),
        "closed": _zone("Closed", 3, active=False),
    }


class TestResolveZone:
    def test_picks_smallest_covering_radius(self, store, zones):
        service = DeliveryZoneService()
        assert service.resolve_zone(store.id, 1.0) == zones["near"]
        assert service.resolve_zone(store.id, 2.5) == zones["mid"]
        assert service.resolve_zone(store.id, 9.9) == zones["far"]

    def test_boundary_distance_is_covered(self, store, zones):
        assert DeliveryZoneService().resolve_zone(store.id, 2.0) == zones["near"]

    def test_inactive_zones_are_ignored(self, store, zones):
        assert DeliveryZoneService().resolve_zone(store.id, 2.8) == zones["mid"]

    def test_outside_every_zone_returns_none(self, store, zones):
        assert DeliveryZoneService().resolve_zone(store.id, 10.1) is None

    def test_other_store_zones_are_ignored(self, store, zones):
        from modules.stores.models import Store

        other = Store.objects.create(
            name="Other", slug="other", address="Somewhere 1", latitude=0, longitude=0,
            owner=store.owner,
        )
        assert DeliveryZoneService().resolve_zone(other.id, 1.0) is None


class TestZoneGuards:
    def test_cannot_delete_last_active_zone(self, store, zone):
        with pytest.raises(LastActiveZone):
            DeliveryZoneService().delete_zone(store.id, zone.id)

    def test_delete_allowed_when_another_active_zone_remains(self, store, zone):
        service = DeliveryZoneService()
        service.create_zone(
            store.id,
            DeliveryZoneDTO(
                name="Outer", max_distance=8, delivery_fee=Decimal("3"), min_order=Decimal("15")
            ),
        )
        service.delete_zone(store.id, zone.id)
        assert not DeliveryZone.objects.filter(id=zone.id).exists()
