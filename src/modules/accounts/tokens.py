"""Bearer token issuing (SimpleJWT access tokens)."""

from __future__ import annotations

from rest_framework_simplejwt.tokens import AccessToken

from modules.accounts.models import User


def issue_access_token(user: User) -> str:
    """Return a signed access token carrying ``user_id`` and ``email``."""
    token = AccessToken.for_user(user)
    token["email"] = user.email
    return str(token)
