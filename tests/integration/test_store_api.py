"""Integration tests for store profile, settings and staff endpoints."""

from __future__ import annotations

import pytest

from modules.stores.constants import MemberRole

pytestmark = pytest.mark.integration


def store_url(store, suffix=""):
    return f"/api/v1/stores/{store.id}/{suffix}"


class TestStoreProfile:
    def test_member_reads_store_with_settings(self, auth_client_for, make_member, store):
        user, _ = make_member(MemberRole.DELIVERY)
        data = auth_client_for(user).get(store_url(store)).json()["data"]
        assert data["slug"] == "pizza-roma"
        assert data["settings"]["immediate_cancel_minutes"] == 10

    def test_owner_updates_store(self, owner_client, store):
        response = owner_client.patch(store_url(store), {"name": "Pizza Roma 2"}, format="json")
        assert response.json()["data"]["name"] == "Pizza Roma 2"

    def test_cashier_cannot_update_store(self, auth_client_for, make_member, store):
        user, _ = make_member(MemberRole.CASHIER)
        response = auth_client_for(user).patch(store_url(store), {"name": "X Y"}, format="json")
        assert response.status_code == 403

    def test_settings_keep_a_payment_method(self, owner_client, store):
        response = owner_client.patch(
            store_url(store, "settings/"),
            {"accepts_cash": False, "accepts_transfer": False},
            format="json",
        )
        assert response.status_code == 400
        assert response.json()["message"] == "At least one payment method must be accepted"

    def test_public_storefront_by_slug(self, api_client, store):
        response = api_client.get("/api/v1/stores/pizza-roma/public/")
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["settings"]["accepts_transfer"] is True
        assert "immediate_cancel_minutes" not in data["settings"]


class TestMembers:
    def test_list_members(self, owner_client, store, courier):
        data = owner_client.get(store_url(store, "members/")).json()["data"]
        assert {m["role"] for m in data} == {"OWNER", "DELIVERY"}

    def test_delivery_members(self, owner_client, store, courier):
        data = owner_client.get(store_url(store, "delivery-members/")).json()["data"]
        assert [m["email"] for m in data] == ["courier@example.com"]

    def test_change_role(self, owner_client, store, make_member):
        _, membership = make_member(MemberRole.CASHIER)
        response = owner_client.patch(
            store_url(store, f"members/{membership.id}/"), {"role": "ADMIN"}, format="json"
        )
        assert response.json()["data"]["role"] == "ADMIN"

    def test_owner_role_is_locked(self, auth_client_for, make_member, store, owner):
        admin, _ = make_member(MemberRole.ADMIN)
        owner_membership = store.members.get(user=owner)
        response = auth_client_for(admin).patch(
            store_url(store, f"members/{owner_membership.id}/"), {"role": "CASHIER"}, format="json"
        )
        assert response.status_code == 403

    def test_remove_member(self, owner_client, store, make_member):
        _, membership = make_member(MemberRole.CASHIER)
        response = owner_client.delete(store_url(store, f"members/{membership.id}/"))
        assert response.status_code == 200
        membership.refresh_from_db()
        assert membership.is_active is False

    def test_cannot_remove_owner(self, auth_client_for, make_member, store, owner):
        admin, _ = make_member(MemberRole.ADMIN)
        owner_membership = store.members.get(user=owner)
        response = auth_client_for(admin).delete(
            store_url(store, f"members/{owner_membership.id}/")
        )
        assert response.status_code == 403
        assert response.json()["message"] == "Cannot remove the owner"
