"""Delivery domain constants."""

DAY_NAMES: tuple[str, ...] = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)

MIN_ZONE_DISTANCE_KM = 0.1

# Fallback ETA when no routing provider answers: minutes per km.
FALLBACK_MINUTES_PER_KM = 3
