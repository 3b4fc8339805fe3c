"""Success envelope helpers: ``{"success": true, "data": ...}``."""

from __future__ import annotations

from typing import Any, Optional

from rest_framework import status
from rest_framework.response import Response


def success_response(
    data: Any = None,
    status_code: int = status.HTTP_200_OK,
    message: Optional[str] = None,
) -> Response:
    body: dict[str, Any] = {"success": True}
    if message:
        body["message"] = message
    if data is not None:
        body["data"] = data
    return Response(body, status=status_code)


def created_response(data: Any, message: Optional[str] = None) -> Response:
    return success_response(data, status.HTTP_201_CREATED, message)
