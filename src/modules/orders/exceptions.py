"""Order domain exceptions.

Raised by the Service Layer when business rules are violated and
rendered by the API exception handler from their ``status_code``.
"""

from __future__ import annotations

from modules.core.exceptions import BadRequestError, NotFoundError


class OrderNotFound(NotFoundError):
    default_message = "Order not found"


class InvalidOrderStatus(BadRequestError):
    """An illegal status transition was attempted."""


class ProductsUnavailable(BadRequestError):
    default_message = "Some products are not available"


class MinimumOrderNotReached(BadRequestError):
    """Subtotal is below the zone's minimum order."""


class PaymentMethodNotAccepted(BadRequestError):
    default_message = "Payment method not accepted by this store"


class DeliveryPersonRequired(BadRequestError):
    default_message = "Order must be assigned to a delivery person first"


class NotADeliveryPerson(BadRequestError):
    default_message = "User is not a delivery person for this store"


class OrderAlreadyClosed(BadRequestError):
    """Delivered or cancelled orders cannot be reassigned or repaid."""


class NotATransferPayment(BadRequestError):
    default_message = "Order is not a transfer payment"


class PaymentAlreadyConfirmed(BadRequestError):
    default_message = "Payment is already confirmed"


class OrderAlreadyDelivered(BadRequestError):
    default_message = "Cannot cancel a delivered order"


class OrderAlreadyCancelled(BadRequestError):
    default_message = "Order is already cancelled"


class CancellationWindowExpired(BadRequestError):
    default_message = "Cancellation window has expired"
