"""Real-time hub exceptions."""

from __future__ import annotations

from modules.core.exceptions import UnauthorizedError


class HubAuthenticationError(UnauthorizedError):
    default_message = "Authentication required"
