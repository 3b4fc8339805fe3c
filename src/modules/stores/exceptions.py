"""Store domain exceptions."""

from __future__ import annotations

from modules.core.exceptions import BadRequestError, ForbiddenError, NotFoundError


class StoreNotFound(NotFoundError):
    default_message = "Store not found"


class MemberNotFound(NotFoundError):
    default_message = "Member not found"


class StoreAccessDenied(ForbiddenError):
    default_message = "You do not have access to this store"


class RoleNotAllowed(ForbiddenError):
    default_message = "You do not have permission for this action"


class OwnerRoleLocked(ForbiddenError):
    default_message = "Cannot change the role of the owner"


class OwnerRoleNotAssignable(ForbiddenError):
    default_message = "Cannot assign owner role"


class OwnerNotRemovable(ForbiddenError):
    default_message = "Cannot remove the owner"


class SelfRemovalNotAllowed(ForbiddenError):
    default_message = "Cannot remove yourself"


class PaymentMethodRequired(BadRequestError):
    default_message = "At least one payment method must be accepted"
