from smtplib import SMTPException
from unittest.mock import patch

from django.core import mail
from django.test import TestCase

from notifications import templates
from notifications.dispatcher import EmailNotificationDispatcher
from notifications.effects import committing


class EmailDispatcherTests(TestCase):
    def setUp(self):
        self.dispatcher = EmailNotificationDispatcher()
        self.params = {
            "order_code": "VO-1",
            "recipient_email": "cust@mail.de",
            "recipient_name": "Cust",
            "provider_name": "Actor",
            "total_price": "80.00",
        }

    def test_send_renders_template(self):
        self.assertTrue(self.dispatcher.send(templates.ORDER_CONFIRMATION, self.params))
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ["cust@mail.de"])
        self.assertEqual(mail.outbox[0].subject, "Your order VO-1 with Actor")
        self.assertIn("Total: 80.00", mail.outbox[0].body)

    def test_missing_recipient_returns_false(self):
        params = dict(self.params, recipient_email="")
        self.assertFalse(self.dispatcher.send(templates.ORDER_CONFIRMATION, params))
        self.assertEqual(mail.outbox, [])

    def test_unknown_placeholders_are_kept(self):
        subject, body = templates.render(templates.NEW_MESSAGE, {"order_code": "SW-2"})
        self.assertEqual(subject, "New message on order SW-2")
        self.assertIn("{sender_name}", body)

    def test_mail_failure_returns_false(self):
        with patch("notifications.dispatcher.send_mail", side_effect=SMTPException("down")):
            with self.assertLogs("notifications.dispatcher", level="ERROR"):
                ok = self.dispatcher.send(templates.ORDER_CONFIRMATION, self.params)
        self.assertFalse(ok)


class CommittingTests(TestCase):
    def setUp(self):
        self.params = {"order_code": "VO-1", "recipient_email": "cust@mail.de"}

    def test_sends_after_commit(self):
        with self.captureOnCommitCallbacks(execute=True) as callbacks:
            with committing(EmailNotificationDispatcher()) as effects:
                effects.notify(templates.NEW_MESSAGE, self.params)
                self.assertEqual(mail.outbox, [])
        self.assertEqual(len(callbacks), 1)
        self.assertEqual(len(mail.outbox), 1)

    def test_nothing_sent_on_rollback(self):
        with self.captureOnCommitCallbacks(execute=True) as callbacks:
            with self.assertRaises(RuntimeError):
                with committing(EmailNotificationDispatcher()) as effects:
                    effects.notify(templates.NEW_MESSAGE, self.params)
                    raise RuntimeError("boom")
        self.assertEqual(callbacks, [])
        self.assertEqual(mail.outbox, [])
