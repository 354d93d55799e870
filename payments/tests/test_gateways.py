from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import patch

import stripe
from django.test import SimpleTestCase, override_settings

from orders.exceptions import PaymentGatewayError
from payments.gateways import StripePaymentGateway, to_minor_units


class MinorUnitsTests(SimpleTestCase):
    def test_conversion(self):
        self.assertEqual(to_minor_units(Decimal("12.5")), 1250)
        self.assertEqual(to_minor_units("10.00"), 1000)
        self.assertEqual(to_minor_units(Decimal("0.005")), 1)


class StripeGatewayTests(SimpleTestCase):
    @override_settings(STRIPE_SECRET_KEY="")
    def test_missing_key_raises(self):
        with self.assertRaises(PaymentGatewayError):
            StripePaymentGateway().create_intent(Decimal("10.00"), "mad")

    @patch("payments.gateways.stripe.PaymentIntent")
    def test_create_intent(self, intent_api):
        intent_api.create.return_value = SimpleNamespace(id="pi_1", client_secret="pi_1_secret")
        intent = StripePaymentGateway(api_key="sk_test_123").create_intent(Decimal("80.00"), "mad")

        self.assertEqual(intent.intent_id, "pi_1")
        self.assertEqual(intent.client_secret, "pi_1_secret")
        kwargs = intent_api.create.call_args.kwargs
        self.assertEqual(kwargs["amount"], 8000)
        self.assertEqual(kwargs["currency"], "mad")
        self.assertEqual(kwargs["api_key"], "sk_test_123")

    @patch("payments.gateways.stripe.PaymentIntent")
    def test_retrieve_charge(self, intent_api):
        gateway = StripePaymentGateway(api_key="sk_test_123")
        intent_api.retrieve.return_value = SimpleNamespace(status="succeeded", amount=8000, currency="MAD")
        charge = gateway.retrieve_charge("pi_1")
        self.assertTrue(charge.succeeded)
        self.assertEqual(charge.amount, 8000)
        self.assertEqual(charge.currency, "mad")
        intent_api.retrieve.assert_called_once_with("pi_1", api_key="sk_test_123")

        intent_api.retrieve.return_value = SimpleNamespace(
            status="requires_payment_method", amount=8000, currency="mad"
        )
        self.assertFalse(gateway.retrieve_charge("pi_1").succeeded)

    @patch("payments.gateways.stripe.PaymentIntent")
    def test_stripe_error_becomes_gateway_error(self, intent_api):
        intent_api.retrieve.side_effect = stripe.StripeError("network down")
        with self.assertRaises(PaymentGatewayError):
            StripePaymentGateway(api_key="sk_test_123").retrieve_charge("pi_1")
