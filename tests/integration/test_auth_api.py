"""Integration tests for ``/api/v1/auth/``."""

from __future__ import annotations

import pytest

pytestmark = pytest.mark.integration

REGISTER_URL = "/api/v1/auth/register/"
LOGIN_URL = "/api/v1/auth/login/"
PROFILE_URL = "/api/v1/auth/profile/"


def register_body(**overrides):
    body = {
        "name": "Marta Owner",
        "email": "marta@example.com",
        "password": "secret123",
        "phone": "600333444",
        "store_name": "Taco Loco",
        "store_address": "Calle Sol 5, Madrid",
        "store_latitude": 40.41,
        "store_longitude": -3.70,
        "store_phone": "910333444",
        "currency": "EUR",
        "accepts_cash": True,
        "accepts_transfer": False,
        "min_advance_hours": 2,
        "max_advance_days": 7,
        "immediate_cancel_minutes": 10,
        "scheduled_cancel_hours": 24,
        "delivery_slots": [
            {"day_of_week": 6, "start_time": "20:00", "end_time": "23:00", "max_orders_per_hour": 4}
        ],
        "delivery_zones": [
            {"name": "Centro", "max_distance": 4, "delivery_fee": "2.50", "min_order": "12.00"}
        ],
    }
    body.update(overrides)
    return body


class TestRegister:
    def test_creates_store_and_returns_token(self, api_client):
        response = api_client.post(REGISTER_URL, register_body(), format="json")

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["store"]["slug"] == "taco-loco"
        assert data["store"]["currency"] == "EUR"
        assert data["user"]["email"] == "marta@example.com"
        assert "password" not in data["user"]

        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {data['token']}")
        store = api_client.get(f"/api/v1/stores/{data['store']['id']}/")
        assert store.status_code == 200

    def test_duplicate_email_is_409(self, api_client, owner):
        response = api_client.post(
            REGISTER_URL, register_body(email="owner@example.com"), format="json"
        )
        assert response.status_code == 409
        assert response.json()["message"] == "Email already registered"

    def test_transfer_without_bank_details_is_400(self, api_client):
        response = api_client.post(
            REGISTER_URL, register_body(accepts_transfer=True), format="json"
        )
        assert response.status_code == 400
        assert "bank_name" in response.json()["errors"]

    def test_overlapping_slots_leave_nothing_behind(self, api_client):
        from modules.accounts.models import User

        slots = [
            {"day_of_week": 6, "start_time": "20:00", "end_time": "22:00", "max_orders_per_hour": 4},
            {"day_of_week": 6, "start_time": "21:30", "end_time": "23:00", "max_orders_per_hour": 4},
        ]
        response = api_client.post(REGISTER_URL, register_body(delivery_slots=slots), format="json")
        assert response.status_code == 400
        assert not User.objects.filter(email="marta@example.com").exists()


class TestLogin:
    def test_login_lists_stores(self, api_client, owner, store):
        response = api_client.post(
            LOGIN_URL, {"email": "owner@example.com", "password": "secret123"}, format="json"
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["token"]
        assert data["stores"] == [
            {
                "store_id": str(store.id),
                "store_name": "Pizza Roma",
                "store_slug": "pizza-roma",
                "currency": "EUR",
                "role": "OWNER",
            }
        ]

    def test_bad_password_is_401(self, api_client, owner):
        response = api_client.post(
            LOGIN_URL, {"email": "owner@example.com", "password": "nope"}, format="json"
        )
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid email or password"


class TestProfile:
    def test_requires_authentication(self, api_client):
        assert api_client.get(PROFILE_URL).status_code == 401

    def test_get_and_patch(self, owner_client):
        profile = owner_client.get(PROFILE_URL).json()["data"]
        assert profile["stores"][0]["role"] == "OWNER"

        response = owner_client.patch(PROFILE_URL, {"name": "New Name"}, format="json")
        assert response.json()["data"]["name"] == "New Name"

    def test_change_password(self, owner_client, api_client):
        response = owner_client.post(
            "/api/v1/auth/change-password/",
            {"current_password": "secret123", "new_password": "another123"},
            format="json",
        )
        assert response.status_code == 200

        login = api_client.post(
            LOGIN_URL, {"email": "owner@example.com", "password": "another123"}, format="json"
        )
        assert login.status_code == 200
