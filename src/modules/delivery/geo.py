"""Great-circle distance between two coordinates."""

from __future__ import annotations

import math
from dataclasses import dataclass

EARTH_RADIUS_KM = 6371.0


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lng: float


def distance_km(origin: Coordinates, destination: Coordinates) -> float:
    """Haversine distance in kilometres, rounded to one decimal."""
    lat1, lat2 = math.radians(origin.lat), math.radians(destination.lat)
    d_lat = lat2 - lat1
    d_lng = math.radians(destination.lng - origin.lng)

    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(d_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return round(EARTH_RADIUS_KM * c, 1)
