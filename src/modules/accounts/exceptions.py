"""Account domain exceptions."""

from __future__ import annotations

from modules.core.exceptions import (
    BadRequestError,
    ConflictError,
    NotFoundError,
    UnauthorizedError,
)


class EmailAlreadyRegistered(ConflictError):
    default_message = "Email already registered"


class InvalidCredentials(UnauthorizedError):
    default_message = "Invalid email or password"


class IncorrectPassword(BadRequestError):
    default_message = "Current password is incorrect"


class UserNotFound(NotFoundError):
    default_message = "User not found"
