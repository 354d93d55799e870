"""Notification dispatchers.

A dispatcher delivers one templated message to one person. Delivery is best
effort: `send` reports failure by returning False and never raises, so a
broken mail setup cannot undo an order transition.
"""

import logging

from django.conf import settings
from django.core.mail import send_mail

from . import templates

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """Interface: `send(template_id, params) -> bool`."""

    def send(self, template_id: str, params: dict) -> bool:
        raise NotImplementedError


class EmailNotificationDispatcher(NotificationDispatcher):
    """Render a template and send it with Django's mail backend.

    The recipient is taken from `params["recipient_email"]`.
    """

    def send(self, template_id: str, params: dict) -> bool:
        recipient = params.get("recipient_email")
        if not recipient:
            logger.warning("Notification %s skipped: no recipient e-mail", template_id)
            return False
        try:
            subject, body = templates.render(template_id, params)
            send_mail(subject, body, settings.DEFAULT_FROM_EMAIL, [recipient])
        except Exception:
            logger.exception(
                "Notification %s to %s failed", template_id, recipient
            )
            return False
        logger.info("Notification %s sent to %s", template_id, recipient)
        return True
