"""Liveness endpoint: database, cache and realtime hub status."""

import time
from typing import Any, Callable, Dict

import structlog
from django.core.cache import cache
from django.db import DatabaseError, connections
from django.http import HttpRequest, JsonResponse
from django.utils import timezone

from modules.realtime.hub import get_hub

logger = structlog.get_logger()


def _timed(probe: Callable[[], Dict[str, Any]]) -> Dict[str, Any]:
    start = time.monotonic()
    details = probe()
    return {
        "status": "up",
        "response_time_ms": round((time.monotonic() - start) * 1000, 2),
        **details,
    }


def _probe_database() -> Dict[str, Any]:
    conn = connections["default"]
    conn.ensure_connection()
    with conn.cursor() as cursor:
        cursor.execute("SELECT 1")
        cursor.fetchone()
    return {}


def _probe_cache() -> Dict[str, Any]:
    # Throttle counters live here; a dead cache disables rate limiting.
    cache.set("_health_check", "ok", 10)
    if cache.get("_health_check") != "ok":
        raise ConnectionError("Cache read failed")
    return {}


def health_check(request: HttpRequest) -> JsonResponse:
    services: Dict[str, Dict[str, Any]] = {}
    overall_healthy = True

    try:
        services["database"] = _timed(_probe_database)
    except DatabaseError:
        services["database"] = {"status": "down"}
        overall_healthy = False
        logger.error("health_check_db_failure")

    try:
        services["cache"] = _timed(_probe_cache)
    except Exception:
        services["cache"] = {"status": "down"}
        overall_healthy = False
        logger.error("health_check_cache_failure")

    try:
        services["realtime"] = {"status": "up", **get_hub().stats()}
    except RuntimeError:
        services["realtime"] = {"status": "down"}
        overall_healthy = False
        logger.error("health_check_realtime_failure")

    status_code = 200 if overall_healthy else 503
    logger.info(
        "health_check_completed", status="healthy" if overall_healthy else "unhealthy"
    )

    return JsonResponse(
        {
            "status": "healthy" if overall_healthy else "unhealthy",
            "timestamp": timezone.now().isoformat(),
            "services": services,
        },
        status=status_code,
    )
