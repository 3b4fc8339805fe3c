from decimal import Decimal

import pytest

from django.core.cache import cache
from rest_framework.test import APIClient

from modules.accounts.models import User
from modules.accounts.tokens import issue_access_token
from modules.delivery.models import DeliverySlot, DeliveryZone
from modules.products.models import Category, Product
from modules.stores.constants import MemberRole
from modules.stores.models import Store, StoreMember, StoreSettings

STORE_LAT, STORE_LNG = 40.4168, -3.7038
# About 1.1 km north of the store.
CUSTOMER_LAT, CUSTOMER_LNG = 40.4268, -3.7038


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture(autouse=True)
def _clear_cache():
    """Throttle counters live in the cache; start every test clean."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


# ---------------------------------------------------------------------------
# Tenancy
# ---------------------------------------------------------------------------


@pytest.fixture()
def owner():
    return User.objects.create_user(
        email="owner@example.com", password="secret123", name="Store Owner", phone="600000001"
    )


@pytest.fixture()
def store(owner):
    store = Store.objects.create(
        name="Pizza Roma",
        slug="pizza-roma",
        address="Calle Mayor 1, Madrid",
        phone="910000000",
        latitude=STORE_LAT,
        longitude=STORE_LNG,
        currency="EUR",
        owner=owner,
    )
    StoreSettings.objects.create(
        store=store,
        accepts_cash=True,
        accepts_transfer=True,
        bank_name="Banco Uno",
        bank_account_holder="Pizza Roma SL",
        bank_account_number="ES7620770024003102575766",
        min_advance_hours=2,
        max_advance_days=7,
        immediate_cancel_minutes=10,
        scheduled_cancel_hours=24,
    )
    StoreMember.objects.create(store=store, user=owner, role=MemberRole.OWNER)
    return store


@pytest.fixture()
def make_member(store):
    """Factory: ``make_member(role, email=...)`` -> (user, membership)."""

    def _make(role=MemberRole.CASHIER, email=None, target_store=None):
        email = email or f"{role.lower()}@example.com"
        user = User.objects.create_user(
            email=email, password="secret123", name=f"{role.title()} User"
        )
        membership = StoreMember.objects.create(
            store=target_store or store, user=user, role=role
        )
        return user, membership

    return _make


@pytest.fixture()
def courier(make_member):
    user, _ = make_member(MemberRole.DELIVERY, email="courier@example.com")
    return user


@pytest.fixture()
def auth_client_for():
    """Factory: APIClient carrying a real bearer token for ``user``."""

    def _client(user):
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {issue_access_token(user)}")
        return client

    return _client


@pytest.fixture()
def owner_client(auth_client_for, owner, store):
    return auth_client_for(owner)


# ---------------------------------------------------------------------------
# Delivery setup and catalog
# ---------------------------------------------------------------------------


@pytest.fixture()
def zone(store):
    return DeliveryZone.objects.create(
        store=store,
        name="Centro",
        max_distance=5,
        delivery_fee=Decimal("2.00"),
        min_order=Decimal("10.00"),
    )


@pytest.fixture()
def monday_slot(store):
    """Monday 12:00-14:00 at 2 orders per hour: capacity 4."""
    return DeliverySlot.objects.create(
        store=store,
        day_of_week=1,
        start_time="12:00",
        end_time="14:00",
        max_orders_per_hour=2,
    )


@pytest.fixture()
def category(store):
    return Category.objects.create(store=store, name="Pizzas")


@pytest.fixture()
def pizza(store, category):
    return Product.objects.create(
        store=store, category=category, name="Margherita", price=Decimal("4.00")
    )


@pytest.fixture()
def calzone(store, category):
    return Product.objects.create(
        store=store, category=category, name="Calzone", price=Decimal("6.00")
    )


@pytest.fixture()
def order_payload(pizza, calzone):
    """Factory for a valid immediate order request body (subtotal 14.00)."""

    def _payload(**overrides):
        payload = {
            "customer_name": "Ana Cliente",
            "customer_phone": "600111222",
            "customer_email": "ana@example.com",
            "customer_address": "Calle Fuencarral 20, Madrid",
            "customer_lat": CUSTOMER_LAT,
            "customer_lng": CUSTOMER_LNG,
            "type": "IMMEDIATE",
            "payment_method": "CASH",
            "items": [
                {"product_id": str(pizza.id), "quantity": 2},
                {"product_id": str(calzone.id), "quantity": 1},
            ],
        }
        payload.update(overrides)
        return payload

    return _payload


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------


@pytest.fixture()
def order_service():
    from modules.orders.views import build_order_service

    return build_order_service()


@pytest.fixture()
def place_order(store, zone, order_service, order_payload):
    """Factory: place an order through the service; kwargs override the body."""
    from modules.orders.dtos import CreateOrderDTO

    def _place(now=None, **overrides):
        dto = CreateOrderDTO(**order_payload(**overrides))
        return order_service.create_order(store.slug, dto, now=now)

    return _place
