"""Driving-time estimate from OpenRouteService, with a distance fallback.

Talks to the ``/v2/directions/driving-car`` endpoint (coordinates as
``[lng, lat]`` pairs) and normalizes the first route summary.  A single
timeout-bounded attempt is made; a missing API key or any transport or
payload error falls back to ``ceil(haversine_km * 3)`` minutes.  The
estimate never raises.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

import requests
import structlog
from django.conf import settings

from modules.delivery.constants import FALLBACK_MINUTES_PER_KM
from modules.delivery.geo import Coordinates, distance_km

logger = structlog.get_logger(__name__)

DIRECTIONS_PATH = "/v2/directions/driving-car"


@dataclass(frozen=True)
class RouteEstimate:
    duration_minutes: int
    distance_km: float


def fallback_minutes(distance: float) -> int:
    return math.ceil(distance * FALLBACK_MINUTES_PER_KM)


class DirectionsClient:
    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.api_key = settings.OPENROUTE_API_KEY if api_key is None else api_key
        self.base_url = (base_url or settings.OPENROUTE_BASE_URL).rstrip("/")
        self.timeout = timeout or settings.OPENROUTE_TIMEOUT_SECONDS

    def route_estimate(
        self, origin: Coordinates, destination: Coordinates
    ) -> RouteEstimate:
        straight_line = distance_km(origin, destination)
        fallback = RouteEstimate(fallback_minutes(straight_line), straight_line)

        if not self.api_key:
            logger.info("directions.fallback", reason="no_api_key", distance_km=straight_line)
            return fallback

        try:
            response = requests.post(
                f"{self.base_url}{DIRECTIONS_PATH}",
                json={
                    "coordinates": [
                        [origin.lng, origin.lat],
                        [destination.lng, destination.lat],
                    ]
                },
                headers={
                    "Authorization": self.api_key,
                    "Content-Type": "application/json",
                },
                timeout=self.timeout,
            )
            response.raise_for_status()
            summary = response.json()["routes"][0]["summary"]
            estimate = RouteEstimate(
                duration_minutes=math.ceil(summary["duration"] / 60),
                distance_km=round(summary["distance"] / 1000, 1),
            )
        except (requests.RequestException, ValueError, KeyError, IndexError, TypeError) as exc:
            logger.warning(
                "directions.fallback",
                reason=type(exc).__name__,
                distance_km=straight_line,
            )
            return fallback

        logger.info(
            "directions.route_estimated",
            duration_minutes=estimate.duration_minutes,
            distance_km=estimate.distance_km,
        )
        return estimate


def route_estimate(origin: Coordinates, destination: Coordinates) -> RouteEstimate:
    return DirectionsClient().route_estimate(origin, destination)
