"""Invitation domain exceptions."""

from __future__ import annotations

from modules.core.exceptions import BadRequestError, ConflictError, NotFoundError


class InvitationNotFound(NotFoundError):
    default_message = "Invitation not found"


class InvitationAlreadyUsed(BadRequestError):
    default_message = "This invitation has already been used"


class InvitationExpired(BadRequestError):
    default_message = "This invitation has expired"


class AlreadyMember(ConflictError):
    default_message = "User is already a member of this store"


class PendingInvitationExists(ConflictError):
    default_message = "There is already a pending invitation for this email"


class AccountAlreadyExists(ConflictError):
    default_message = "User already exists. Please login and accept the invitation."


class InvitationEmailMismatch(BadRequestError):
    default_message = "This invitation is for a different email address"


class UsedInvitationLocked(BadRequestError):
    """Used invitations can be neither cancelled nor resent."""
