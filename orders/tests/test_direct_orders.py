from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import patch

from django.contrib.auth import get_user_model
from django.core import mail
from django.test import override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from profiles.models import Profile
from orders.models import Order

User = get_user_model()


def create_provider(username="actor", **fields):
    user = User.objects.create_user(username, f"{username}@example.com", "pass1234")
    Profile.objects.create(user=user, type="provider", **fields)
    return user


@override_settings(STRIPE_SECRET_KEY="sk_test_123", DIRECT_ORDER_MINIMUM_FEE="10.00")
class DirectOrderTests(APITestCase):
    def setUp(self):
        self.actor = create_provider(
            base_rate_per_word=Decimal("2.00"),
            broadcast_multiplier=Decimal("1.50"),
        )
        self.url = reverse("order-direct")
        self.script = " ".join(["word"] * 10)

    def payload(self, **overrides):
        data = {
            "provider": self.actor.id,
            "client_name": "Sara",
            "client_email": "sara@example.com",
            "script": self.script,
            "usage": "web",
            "payment_method": "bank",
        }
        data.update(overrides)
        return data

    def test_bank_order_awaits_payment_and_notifies_both(self):
        with self.captureOnCommitCallbacks(execute=True):
            res = self.client.post(self.url, self.payload(), format="json")
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertEqual(res.data["status"], "Awaiting Payment")
        self.assertEqual(res.data["total_price"], "20.00")
        self.assertEqual(res.data["payment_method"], "bank")
        self.assertEqual(res.data["price_message"], "")

        recipients = sorted(m.to[0] for m in mail.outbox)
        self.assertEqual(recipients, ["actor@example.com", "sara@example.com"])

    def test_broadcast_usage_and_video_sync(self):
        res = self.client.post(
            self.url, self.payload(usage="broadcast", video_sync=True), format="json"
        )
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        # 10 words x 2.00 x 1.5 + 500 video sync
        self.assertEqual(res.data["total_price"], "530.00")

    def test_minimum_fee_applied(self):
        res = self.client.post(self.url, self.payload(script="just three words"), format="json")
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertEqual(res.data["total_price"], "10.00")
        self.assertIn("Minimum order fee", res.data["price_message"])
        self.assertIn("6.00", res.data["price_message"])

    def test_provider_without_rate_400(self):
        free = create_provider("free")
        res = self.client.post(self.url, self.payload(provider=free.id), format="json")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(Order.objects.count(), 0)

    @patch("payments.gateways.stripe.PaymentIntent")
    def test_card_order_starts_in_progress(self, intent_api):
        intent_api.retrieve.return_value = SimpleNamespace(status="succeeded", amount=2000, currency="mad")
        res = self.client.post(
            self.url,
            self.payload(payment_method="stripe", payment_intent_id="pi_123"),
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertEqual(res.data["status"], "In Progress")
        intent_api.retrieve.assert_called_once_with("pi_123", api_key="sk_test_123")
        self.assertEqual(Order.objects.get().payment_intent_id, "pi_123")

    @patch("payments.gateways.stripe.PaymentIntent")
    def test_unconfirmed_card_charge_creates_nothing_402(self, intent_api):
        intent_api.retrieve.return_value = SimpleNamespace(
            status="requires_payment_method", amount=2000, currency="mad"
        )
        res = self.client.post(
            self.url,
            self.payload(payment_method="stripe", payment_intent_id="pi_123"),
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_402_PAYMENT_REQUIRED)
        self.assertEqual(Order.objects.count(), 0)

    @patch("payments.gateways.stripe.PaymentIntent")
    def test_card_charge_below_price_creates_nothing_402(self, intent_api):
        intent_api.retrieve.return_value = SimpleNamespace(status="succeeded", amount=1000, currency="mad")
        res = self.client.post(
            self.url,
            self.payload(payment_method="stripe", payment_intent_id="pi_small"),
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_402_PAYMENT_REQUIRED)
        self.assertEqual(Order.objects.count(), 0)

    @patch("payments.gateways.stripe.PaymentIntent")
    def test_card_charge_reused_for_second_order_400(self, intent_api):
        intent_api.retrieve.return_value = SimpleNamespace(status="succeeded", amount=2000, currency="mad")
        payload = self.payload(payment_method="stripe", payment_intent_id="pi_123")
        self.assertEqual(self.client.post(self.url, payload, format="json").status_code, 201)

        res = self.client.post(self.url, payload, format="json")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["detail"].code, "payment_intent_reused")
        self.assertEqual(Order.objects.count(), 1)

    def test_card_without_intent_400(self):
        res = self.client.post(self.url, self.payload(payment_method="stripe"), format="json")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("payment_intent_id", res.data)


@override_settings(STRIPE_SECRET_KEY="sk_test_123", DIRECT_ORDER_MINIMUM_FEE="10.00")
class QuotePreviewTests(APITestCase):
    def setUp(self):
        self.actor = create_provider(base_rate_per_word=Decimal("1.25"))
        self.url = reverse("quote")

    def test_quote_returns_price_without_creating_order(self):
        res = self.client.post(
            self.url, {"provider": self.actor.id, "script": "one two three four five six seven eight"},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["word_count"], 8)
        self.assertEqual(res.data["price"], "10.00")
        self.assertEqual(res.data["computed_price"], "10.00")
        self.assertFalse(res.data["minimum_fee_applied"])
        self.assertNotIn("client_secret", res.data)
        self.assertEqual(Order.objects.count(), 0)

    @patch("payments.gateways.stripe.PaymentIntent")
    def test_quote_can_open_payment_intent(self, intent_api):
        intent_api.create.return_value = SimpleNamespace(id="pi_9", client_secret="pi_9_secret")
        res = self.client.post(
            self.url,
            {"provider": self.actor.id, "script": "hello there", "create_payment_intent": True},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertTrue(res.data["minimum_fee_applied"])
        self.assertEqual(res.data["client_secret"], "pi_9_secret")
        _, kwargs = intent_api.create.call_args
        self.assertEqual(kwargs["amount"], 1000)
        self.assertEqual(kwargs["currency"], "mad")
