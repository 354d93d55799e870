"""Unread tracking for order chat.

A "volley" is a change of the speaking party. Only the first message of a
volley flips the other party's unread flag and starts the reminder deadline;
follow-up messages from the same sender change nothing.
"""

import logging
from datetime import timedelta

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from orders.exceptions import PreconditionFailed

from .models import Message

logger = logging.getLogger(__name__)

ROLES = (Message.SenderRole.CLIENT, Message.SenderRole.PROVIDER)


def other_role(role):
    if role == Message.SenderRole.CLIENT:
        return Message.SenderRole.PROVIDER
    return Message.SenderRole.CLIENT


def volley_patch(last_sender_role, sender_role, now):
    """Return the order fields to set for a new message, or None for a same-sender message."""
    if sender_role == last_sender_role:
        return None
    return {
        f"{other_role(sender_role)}_has_unread": True,
        "last_message_sender_role": sender_role,
        "notification_due_at": now
        + timedelta(seconds=settings.UNREAD_NOTIFICATION_DELAY_SECONDS),
    }


def record_message(ctx, order_id, *, sender_role, body):
    """Store a chat message and update the unread state of the order."""
    if sender_role not in ROLES:
        raise PreconditionFailed("Unknown sender role.")
    if not (body or "").strip():
        raise PreconditionFailed("Message must not be empty.")

    with transaction.atomic():
        order = ctx.store.get(order_id)
        message = ctx.store.insert_message(order.pk, sender_role=sender_role, body=body)

        observed = order.last_message_sender_role
        # A concurrent message may flip the sender first; evaluate once more against it.
        for _ in range(2):
            patch = volley_patch(observed, sender_role, timezone.now())
            if patch is None:
                break
            if ctx.store.conditional_update(
                order.pk, None, patch, last_message_sender_role=observed
            ):
                logger.debug("Order %s: %s started a new volley", order.pk, sender_role)
                break
            observed = ctx.store.get(order.pk).last_message_sender_role
        else:
            logger.warning(
                "Order %s: unread state not updated for %s message %s; the sender kept changing",
                order.pk,
                sender_role,
                message.pk,
            )
    return message


def mark_read(ctx, order_id, role):
    """Clear `role`'s unread flag and the pending reminder."""
    if role not in ROLES:
        raise PreconditionFailed("Unknown role.")
    flag = f"{role}_has_unread"
    ctx.store.conditional_update(
        order_id, None, {flag: False, "notification_due_at": None}, **{flag: True}
    )
    return ctx.store.get(order_id)
