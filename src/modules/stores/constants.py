"""Store domain constants."""

from django.db import models


class MemberRole(models.TextChoices):
    OWNER = "OWNER", "Owner"
    ADMIN = "ADMIN", "Admin"
    CASHIER = "CASHIER", "Cashier"
    DELIVERY = "DELIVERY", "Delivery"


class Currency(models.TextChoices):
    EUR = "EUR", "Euro"
    ARS = "ARS", "Argentine peso"


MANAGER_ROLES: frozenset[str] = frozenset({MemberRole.OWNER, MemberRole.ADMIN})
STAFF_ROLES: frozenset[str] = frozenset(
    {MemberRole.OWNER, MemberRole.ADMIN, MemberRole.CASHIER}
)
ALL_ROLES: frozenset[str] = frozenset(MemberRole.values)
