"""Unit tests for login and profile management."""

from __future__ import annotations

import pytest
from rest_framework_simplejwt.tokens import AccessToken

from modules.accounts.dtos import ChangePasswordDTO, LoginDTO, UpdateProfileDTO
from modules.accounts.exceptions import IncorrectPassword, InvalidCredentials
from modules.accounts.services import AuthService

pytestmark = pytest.mark.unit


class TestLogin:
    def test_returns_token_and_active_memberships(self, owner, store):
        session = AuthService().login(LoginDTO(email="OWNER@example.com", password="secret123"))

        assert session.user == owner
        assert [m.store for m in session.memberships] == [store]
        claims = AccessToken(session.token)
        assert claims["user_id"] == str(owner.id)
        assert claims["email"] == "owner@example.com"

    def test_wrong_password(self, owner):
        with pytest.raises(InvalidCredentials) as exc_info:
            AuthService().login(LoginDTO(email=owner.email, password="wrong"))
        assert exc_info.value.status_code == 401

    def test_unknown_email_same_error(self):
        with pytest.raises(InvalidCredentials):
            AuthService().login(LoginDTO(email="ghost@example.com", password="x"))

    def test_inactive_user_cannot_login(self, owner):
        owner.is_active = False
        owner.save()
        with pytest.raises(InvalidCredentials):
            AuthService().login(LoginDTO(email=owner.email, password="secret123"))


class TestProfile:
    def test_update_only_given_fields(self, owner):
        user = AuthService().update_profile(owner.id, UpdateProfileDTO(phone="699999999"))
        assert user.phone == "699999999"
        assert user.name == "Store Owner"

    def test_change_password(self, owner):
        AuthService().change_password(
            owner.id, ChangePasswordDTO(current_password="secret123", new_password="newsecret")
        )
        owner.refresh_from_db()
        assert owner.check_password("newsecret")

    def test_change_password_checks_current(self, owner):
        with pytest.raises(IncorrectPassword):
            AuthService().change_password(
                owner.id, ChangePasswordDTO(current_password="nope", new_password="newsecret")
            )
