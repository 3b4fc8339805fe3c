"""Application error taxonomy.

Every business-rule violation raised by a service is one of these.
The DRF exception handler (``modules.core.exception_handler``) maps
``status_code`` onto the HTTP response, so views never translate
domain errors themselves.
"""

from __future__ import annotations

from typing import Any, Optional


class AppError(Exception):
    """Base class for expected, client-facing errors."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, errors: Any = None) -> None:
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)


class ValidationError(AppError):
    """Input failed validation; ``errors`` holds per-field messages."""

    status_code = 400
    default_message = "Validation failed"


class BadRequestError(AppError):
    """A business rule rejected the request."""

    status_code = 400
    default_message = "Bad request"


class UnauthorizedError(AppError):
    status_code = 401
    default_message = "Unauthorized"


class ForbiddenError(AppError):
    status_code = 403
    default_message = "Forbidden"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Resource not found"


class ConflictError(AppError):
    status_code = 409
    default_message = "Resource already exists"
