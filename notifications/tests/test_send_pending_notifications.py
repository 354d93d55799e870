from datetime import timedelta
from decimal import Decimal
from io import StringIO

from django.contrib.auth import get_user_model
from django.core import mail
from django.core.management import call_command
from django.test import TestCase
from django.utils import timezone

from orders.models import Order

User = get_user_model()


class SendPendingNotificationsTests(TestCase):
    def setUp(self):
        self.actor = User.objects.create_user("actor", "actor@mail.de", "pass1234")
        self.cust = User.objects.create_user("cust", "cust@mail.de", "pass1234")

    def make_order(self, code, due, sender=Order.Role.CLIENT):
        return Order.objects.create(
            order_code=code,
            service_type=Order.ServiceType.VOICE_OVER,
            client_user=self.cust,
            client_name="Cust",
            client_email="cust@mail.de",
            provider=self.actor,
            total_price=Decimal("40.00"),
            status=Order.Status.IN_PROGRESS,
            last_message_sender_role=sender,
            provider_has_unread=sender == Order.Role.CLIENT,
            client_has_unread=sender == Order.Role.PROVIDER,
            notification_due_at=due,
        )

    def test_due_reminders_are_sent_and_cleared(self):
        now = timezone.now()
        to_provider = self.make_order("VO-1", now - timedelta(minutes=1))
        to_client = self.make_order("VO-2", now - timedelta(minutes=2), sender=Order.Role.PROVIDER)
        later = self.make_order("VO-3", now + timedelta(minutes=10))

        out = StringIO()
        call_command("send_pending_notifications", stdout=out)

        self.assertIn("Reminders: 2 sent, 0 failed.", out.getvalue())
        recipients = sorted(m.to[0] for m in mail.outbox)
        self.assertEqual(recipients, ["actor@mail.de", "cust@mail.de"])
        provider_mail = next(m for m in mail.outbox if m.to == ["actor@mail.de"])
        self.assertIn("Cust sent you a message", provider_mail.body)

        for order in (to_provider, to_client):
            order.refresh_from_db()
            self.assertIsNone(order.notification_due_at)
        later.refresh_from_db()
        self.assertIsNotNone(later.notification_due_at)

    def test_unread_flag_survives_reminder(self):
        order = self.make_order("VO-1", timezone.now() - timedelta(minutes=1))
        call_command("send_pending_notifications", stdout=StringIO())
        order.refresh_from_db()
        self.assertTrue(order.provider_has_unread)

    def test_nothing_due(self):
        out = StringIO()
        call_command("send_pending_notifications", stdout=out)
        self.assertIn("Reminders: 0 sent, 0 failed.", out.getvalue())
        self.assertEqual(mail.outbox, [])
