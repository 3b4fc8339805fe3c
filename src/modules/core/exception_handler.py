"""DRF exception handler rendering the error envelope.

Every error leaves the API as::

    {"success": false, "message": "...", "errors": ...}

``errors`` is only present when there is field-level detail.  Unexpected
exceptions are logged and returned as a generic 500; the exception text
is exposed only when ``DEBUG`` is on.
"""

from __future__ import annotations

from typing import Any, Optional

import structlog
from django.conf import settings
from django.db import IntegrityError
from pydantic import ValidationError as PydanticValidationError
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from modules.core.exceptions import AppError

logger = structlog.get_logger(__name__)


def _error_body(message: str, errors: Any = None) -> dict[str, Any]:
    body: dict[str, Any] = {"success": False, "message": message}
    if errors:
        body["errors"] = errors
    return body


def _pydantic_errors(exc: PydanticValidationError) -> list[dict[str, str]]:
    return [
        {
            "field": ".".join(str(part) for part in error["loc"]),
            "message": error["msg"],
        }
        for error in exc.errors()
    ]


def envelope_exception_handler(exc: Exception, context: dict) -> Optional[Response]:
    if isinstance(exc, AppError):
        return Response(_error_body(exc.message, exc.errors), status=exc.status_code)

    if isinstance(exc, PydanticValidationError):
        return Response(
            _error_body("Validation failed", _pydantic_errors(exc)),
            status=status.HTTP_400_BAD_REQUEST,
        )

    if isinstance(exc, IntegrityError):
        logger.warning("request.integrity_error", error=str(exc))
        return Response(
            _error_body("A record with this value already exists"),
            status=status.HTTP_409_CONFLICT,
        )

    # DRF's own handler converts Http404/PermissionDenied and sets auth headers.
    response = exception_handler(exc, context)
    if response is not None:
        if isinstance(exc, exceptions.ValidationError):
            response.data = _error_body("Validation failed", exc.detail)
        else:
            detail = getattr(exc, "detail", None)
            response.data = _error_body(str(detail) if detail else str(exc))
        return response

    logger.exception("request.unhandled_error", error_type=type(exc).__name__)
    message = "Internal server error"
    if settings.DEBUG:
        message = f"{type(exc).__name__}: {exc}"
    return Response(_error_body(message), status=status.HTTP_500_INTERNAL_SERVER_ERROR)
