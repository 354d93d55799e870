"""Send "you have a new message" reminders whose deadline has passed.

Meant to run every few minutes from cron. The deadline is set by the chat
tracker when the speaking party changes and cleared when the recipient reads
the conversation; this command clears it once the reminder went out.
"""

import logging

from django.core.management.base import BaseCommand
from django.utils import timezone

from chat.tracker import other_role
from notifications import templates
from orders.context import default_context
from orders.lifecycle import recipient_params
from orders.models import Order

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Send unread-message reminders whose notification time has passed."

    def add_arguments(self, parser):
        parser.add_argument(
            "--limit", type=int, default=500, help="Maximum number of orders to process."
        )

    def handle(self, *args, **options):
        ctx = default_context()
        now = timezone.now()
        due = (
            Order.objects.select_related("provider")
            .filter(notification_due_at__lt=now)
            .order_by("notification_due_at")[: options["limit"]]
        )

        sent = failed = 0
        for order in due:
            sender = order.last_message_sender_role
            if sender:
                if sender == Order.Role.CLIENT:
                    sender_name = order.client_name
                else:
                    sender_name = order.provider.get_full_name() or order.provider.username
                params = recipient_params(order, other_role(sender), sender_name=sender_name)
                if ctx.notifier.send(templates.NEW_MESSAGE, params):
                    sent += 1
                else:
                    failed += 1
            # Cleared even when sending failed; a deadline set meanwhile is left alone.
            ctx.store.conditional_update(
                order.pk,
                None,
                {"notification_due_at": None},
                notification_due_at=order.notification_due_at,
            )

        summary = f"Reminders: {sent} sent, {failed} failed."
        logger.info(summary)
        self.stdout.write(self.style.SUCCESS(summary))
