"""Payment gateways.

The lifecycle only needs two things from a card processor: a client secret for
a one-time charge of a given amount, and the state of a charge by intent id
(whether it succeeded, for how much and in which currency).
`StripePaymentGateway` implements both with the Stripe SDK.
"""

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

import stripe
from django.conf import settings

from orders.exceptions import PaymentGatewayError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PaymentIntent:
    intent_id: str
    client_secret: str


@dataclass(frozen=True)
class Charge:
    intent_id: str
    succeeded: bool
    amount: int
    currency: str


def to_minor_units(amount) -> int:
    """Convert a decimal amount to the smallest currency unit (e.g. 12.5 -> 1250)."""
    return int((Decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class PaymentGateway:
    """Interface for card payment processors."""

    def create_intent(self, amount, currency: str) -> PaymentIntent:
        raise NotImplementedError

    def retrieve_charge(self, intent_id: str) -> Charge:
        """Return the charge behind an intent; `amount` is in minor units."""
        raise NotImplementedError


class StripePaymentGateway(PaymentGateway):
    def __init__(self, api_key=None):
        self.api_key = api_key if api_key is not None else settings.STRIPE_SECRET_KEY

    def _require_key(self):
        if not self.api_key:
            raise PaymentGatewayError("Stripe secret key not found.")

    def create_intent(self, amount, currency: str) -> PaymentIntent:
        self._require_key()
        try:
            intent = stripe.PaymentIntent.create(
                amount=to_minor_units(amount),
                currency=currency,
                automatic_payment_methods={"enabled": True},
                api_key=self.api_key,
            )
        except stripe.StripeError as exc:
            logger.warning("Stripe rejected payment intent for %s %s: %s", amount, currency, exc)
            raise PaymentGatewayError() from exc
        return PaymentIntent(intent_id=intent.id, client_secret=intent.client_secret)

    def retrieve_charge(self, intent_id: str) -> Charge:
        self._require_key()
        try:
            intent = stripe.PaymentIntent.retrieve(intent_id, api_key=self.api_key)
        except stripe.StripeError as exc:
            logger.warning("Could not retrieve payment intent %s: %s", intent_id, exc)
            raise PaymentGatewayError() from exc
        return Charge(
            intent_id=intent_id,
            succeeded=intent.status == "succeeded",
            amount=int(intent.amount),
            currency=str(intent.currency).lower(),
        )
