"""Zero-padded ``HH:MM`` time-of-day values.

Slots store their bounds as ``HH:MM`` strings; every comparison and
duration calculation goes through minute-of-day integers.
"""

from __future__ import annotations

import re
from datetime import date, datetime, time

from django.core.validators import RegexValidator

TIME_OF_DAY_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")

time_of_day_validator = RegexValidator(
    TIME_OF_DAY_PATTERN, "Invalid time format (HH:MM)"
)


def parse_time_of_day(value: str) -> int:
    """Return minutes since midnight for ``HH:MM``."""
    if not isinstance(value, str) or not TIME_OF_DAY_PATTERN.match(value):
        raise ValueError(f"Invalid time format (HH:MM): {value!r}")
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def format_time_of_day(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def combine(day: date, value: str) -> datetime:
    """Naive datetime for ``value`` on ``day``."""
    minutes = parse_time_of_day(value)
    return datetime.combine(day, time(minutes // 60, minutes % 60))


def weekday_index(day: date) -> int:
    """Day of week with 0 = Sunday ... 6 = Saturday."""
    return day.isoweekday() % 7
