"""Asynchronous invitation tasks."""

import structlog
from celery import shared_task

logger = structlog.get_logger(__name__)


@shared_task(name="invitations.send_invitation_email")
def send_invitation_email(email: str, store_name: str, invitation_link: str):
    """Notify the invitee.  Mail delivery is not wired yet; the event is logged."""
    logger.info(
        "invitation.email_queued",
        email=email,
        store_name=store_name,
    )
    return {"status": "logged", "email": email}
