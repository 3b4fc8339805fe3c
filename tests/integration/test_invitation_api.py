"""Integration tests for staff invitations."""

from __future__ import annotations

import pytest

from modules.invitations.models import Invitation
from modules.stores.constants import MemberRole
from modules.stores.models import StoreMember

pytestmark = pytest.mark.integration


def invitations_url(store, suffix=""):
    return f"/api/v1/stores/{store.id}/invitations/{suffix}"


@pytest.fixture()
def invite(owner_client, store):
    def _invite(email="newbie@example.com", role="CASHIER"):
        response = owner_client.post(
            invitations_url(store), {"email": email, "role": role}, format="json"
        )
        assert response.status_code == 201
        return Invitation.objects.get(id=response.json()["data"]["id"])

    return _invite


class TestStoreSide:
    def test_create_returns_link(self, owner_client, store):
        response = owner_client.post(
            invitations_url(store), {"email": "NewBie@Example.com", "role": "DELIVERY"}, format="json"
        )
        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Invitation sent"
        data = body["data"]
        assert data["email"] == "newbie@example.com"
        assert data["store_name"] == "Pizza Roma"
        token = Invitation.objects.get(id=data["id"]).token
        assert data["invitation_link"].endswith(f"/invite/{token}")

    def test_owner_role_is_not_invitable(self, owner_client, store):
        response = owner_client.post(
            invitations_url(store), {"email": "x@example.com", "role": "OWNER"}, format="json"
        )
        assert response.status_code == 400
        assert response.json()["errors"]["role"] == ["Role must be ADMIN, CASHIER, or DELIVERY"]

    def test_pending_duplicate_is_409(self, owner_client, store, invite):
        invite()
        response = owner_client.post(
            invitations_url(store), {"email": "newbie@example.com", "role": "CASHIER"}, format="json"
        )
        assert response.status_code == 409

    def test_list_resend_and_cancel(self, owner_client, store, invite):
        invitation = invite()
        listed = owner_client.get(invitations_url(store)).json()["data"]
        assert [i["email"] for i in listed] == ["newbie@example.com"]

        resent = owner_client.post(invitations_url(store, f"{invitation.id}/resend/"))
        assert resent.status_code == 200
        invitation.refresh_from_db()
        assert resent.json()["data"]["invitation_link"].endswith(invitation.token)

        assert owner_client.delete(invitations_url(store, f"{invitation.id}/")).status_code == 200
        assert not Invitation.objects.filter(id=invitation.id).exists()

    def test_cashier_cannot_invite(self, auth_client_for, make_member, store):
        cashier, _ = make_member(MemberRole.CASHIER)
        response = auth_client_for(cashier).post(
            invitations_url(store), {"email": "x@example.com", "role": "CASHIER"}, format="json"
        )
        assert response.status_code == 403


class TestInviteeSide:
    def test_public_lookup(self, api_client, invite):
        invitation = invite()
        data = api_client.get(f"/api/v1/invitations/{invitation.token}/").json()["data"]
        assert data["store"]["name"] == "Pizza Roma"
        assert data["user_exists"] is False

    def test_accept_with_new_account(self, api_client, store, invite):
        invitation = invite()
        response = api_client.post(
            "/api/v1/invitations/accept/",
            {"token": invitation.token, "name": "New Bie", "password": "secret123"},
            format="json",
        )
        assert response.status_code == 201
        data = response.json()["data"]
        assert data["role"] == "CASHIER"
        assert data["store"]["slug"] == "pizza-roma"
        assert data["token"]

        again = api_client.get(f"/api/v1/invitations/{invitation.token}/")
        assert again.status_code == 400
        assert again.json()["message"] == "This invitation has already been used"

    def test_accept_with_existing_account(self, auth_client_for, store, invite):
        from modules.accounts.models import User

        user = User.objects.create_user(
            email="newbie@example.com", password="secret123", name="New Bie"
        )
        invitation = invite(role="DELIVERY")
        response = auth_client_for(user).post(
            "/api/v1/invitations/accept-existing/", {"token": invitation.token}, format="json"
        )
        assert response.status_code == 200
        assert StoreMember.objects.get(store=store, user=user).role == "DELIVERY"

    def test_accept_existing_requires_authentication(self, api_client, invite):
        invitation = invite()
        response = api_client.post(
            "/api/v1/invitations/accept-existing/", {"token": invitation.token}, format="json"
        )
        assert response.status_code == 401
