"""Delivery domain exceptions.

The scheduling errors are raised by ``SlotCapacityValidator`` in the
order they are checked; the first failing rule wins.
"""

from __future__ import annotations

from modules.core.exceptions import BadRequestError, ConflictError, NotFoundError


class ZoneNotFound(NotFoundError):
    default_message = "Delivery zone not found"


class SlotNotFound(NotFoundError):
    default_message = "Delivery slot not found"


class BlockedDateNotFound(NotFoundError):
    default_message = "Blocked date not found"


class OutsideCoverageArea(BadRequestError):
    default_message = "Delivery address is outside our coverage area"


class LastActiveZone(BadRequestError):
    default_message = "Cannot delete the last active delivery zone"


class LastActiveSlot(BadRequestError):
    default_message = "Cannot delete the last active delivery slot"


class InvalidSlotWindow(BadRequestError):
    default_message = "Start time must be before end time"


class SlotOverlap(BadRequestError):
    """An active slot on the same day already covers part of the window."""


class DateInPast(BadRequestError):
    default_message = "Cannot block a date in the past"


class DateAlreadyBlocked(ConflictError):
    default_message = "This date is already blocked"


class NoValidDates(BadRequestError):
    default_message = "No valid dates to block"


# ---------------------------------------------------------------------------
# Scheduled order validation
# ---------------------------------------------------------------------------


class InsufficientNotice(BadRequestError):
    """Scheduled start is closer than ``min_advance_hours``."""


class TooFarInAdvance(BadRequestError):
    """Scheduled start is beyond ``max_advance_days``."""


class DateNotAvailable(BadRequestError):
    default_message = "Selected date is not available"


class SlotNotAvailable(BadRequestError):
    default_message = "Selected time slot is not available"


class SlotFull(BadRequestError):
    default_message = "Selected time slot is full"
