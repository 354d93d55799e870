"""Order lifecycle.

One function per transition. Each function

1. reads the order and checks the transition table against the status it
   observed (and, optionally, the status the caller last saw),
2. writes the new state with an UPDATE guarded by that observed status,
3. queues its notifications, which are sent only after the commit.

Precondition failures and lost races raise the typed errors from
`orders.exceptions`; nothing is written in either case.
"""

import logging

from django.conf import settings
from django.db.models import F

from notifications import templates
from notifications.effects import committing
from payments.gateways import to_minor_units

from . import payouts, pricing
from .exceptions import (
    PaymentFailed,
    PaymentIntentReused,
    PreconditionFailed,
    TransitionConflict,
)
from .models import Order
from .transitions import get_transition

logger = logging.getLogger(__name__)

S = Order.Status


# ----------------------------- helpers -----------------------------

def _display_name(user) -> str:
    return user.get_full_name() or user.username


def _params(order, **extra) -> dict:
    params = {
        "order_id": order.pk,
        "order_code": order.order_code,
        "service_type": order.get_service_type_display(),
        "client_name": order.client_name,
        "client_email": order.client_email,
        "provider_name": _display_name(order.provider),
        "total_price": order.total_price,
    }
    params.update(extra)
    return params


def _to_client(order, **extra) -> dict:
    return _params(
        order, recipient_email=order.client_email, recipient_name=order.client_name, **extra
    )


def _to_provider(order, **extra) -> dict:
    return _params(
        order,
        recipient_email=order.provider.email,
        recipient_name=_display_name(order.provider),
        **extra,
    )


def recipient_params(order, role, **extra) -> dict:
    """Notification params addressed to the order's client or provider."""
    if role == Order.Role.PROVIDER:
        return _to_provider(order, **extra)
    return _to_client(order, **extra)


def _provider_profile(user):
    profile = getattr(user, "profile", None)
    if profile is None or not profile.is_provider:
        raise PreconditionFailed("The selected user is not a provider.")
    return profile


def _check(order, name, expected_status=None):
    """Validate that `name` may run from the order's observed status."""
    if expected_status is not None and expected_status != order.status:
        raise TransitionConflict(
            f"The order status is now '{order.status}', not '{expected_status}'."
        )
    transition = get_transition(name)
    if not transition.allows(order.status):
        raise PreconditionFailed(
            f"'{name}' is not allowed while the order is '{order.status}'."
        )
    return transition


def _write(ctx, order, patch, **guards):
    if not ctx.store.conditional_update(order.pk, order.status, patch, **guards):
        logger.info("Order %s changed concurrently (expected %r)", order.pk, order.status)
        raise TransitionConflict()


def _require_price(order):
    if order.total_price is None:
        raise PreconditionFailed("The order has no price yet.")


def _verify_card_charge(ctx, payment_intent_id, amount):
    """Check that the intent charged exactly `amount` and paid no other order."""
    if ctx.store.payment_intent_used(payment_intent_id):
        raise PaymentIntentReused()
    charge = ctx.payment_gateway.retrieve_charge(payment_intent_id)
    if not charge.succeeded:
        raise PaymentFailed()
    if (
        charge.amount != to_minor_units(amount)
        or charge.currency != settings.PAYMENT_CURRENCY.lower()
    ):
        logger.warning(
            "Payment intent %s charged %s %s, expected %s %s",
            payment_intent_id,
            charge.amount,
            charge.currency,
            to_minor_units(amount),
            settings.PAYMENT_CURRENCY,
        )
        raise PaymentFailed("The payment amount does not match the order total.")


# ----------------------------- creation -----------------------------

def create_quote_request(
    ctx,
    *,
    provider,
    service_type,
    client_name,
    client_email,
    script="",
    client_user=None,
    client_phone="",
    client_company="",
    usage=None,
    quote_est_duration=None,
    quote_video_type=None,
    quote_footage_choice=None,
):
    """Create an order that waits for the provider's offer."""
    profile = _provider_profile(provider)
    if not profile.offers_service(service_type):
        raise PreconditionFailed("This provider does not offer the requested service.")

    word_count = pricing.count_words(script)
    if service_type == Order.ServiceType.VOICE_OVER and word_count and profile.base_rate_per_word:
        raise PreconditionFailed(
            "This voice-over can be priced directly; place a direct order instead."
        )

    with committing(ctx.notifier) as effects:
        order = ctx.store.insert_order(
            service_type=service_type,
            provider=provider,
            client_user=client_user,
            client_name=client_name,
            client_email=client_email.lower(),
            client_phone=client_phone or "",
            client_company=client_company or "",
            script=script or "",
            word_count=word_count,
            usage=usage,
            quote_est_duration=quote_est_duration,
            quote_video_type=quote_video_type,
            quote_footage_choice=quote_footage_choice,
            status=S.AWAITING_OFFER,
            total_price=None,
            revisions_allowed=profile.revisions_allowed,
        )
        effects.notify(templates.NEW_QUOTE_REQUEST, _to_provider(order))
    logger.info("Quote request %s created for provider %s", order.order_code, provider.pk)
    return order


def quote_direct_order(
    ctx, *, provider, script, usage="web", video_sync=False, with_payment_intent=False
):
    """Price a direct voice-over order and optionally open a card payment for it."""
    profile = _provider_profile(provider)
    quote = pricing.quote_voice_over(profile, script, usage=usage, video_sync=video_sync)
    intent = None
    if with_payment_intent:
        if quote.price <= 0:
            raise PreconditionFailed("Nothing to pay for an empty script.")
        intent = ctx.payment_gateway.create_intent(quote.price, settings.PAYMENT_CURRENCY)
    return quote, intent


def create_direct_order(
    ctx,
    *,
    provider,
    client_name,
    client_email,
    script,
    payment_method,
    usage="web",
    video_sync=False,
    payment_intent_id=None,
    client_user=None,
    client_phone="",
    client_company="",
):
    """Create a priced voice-over order without a quote step.

    Card orders are only created after the gateway confirms the charge and
    start `In Progress`; bank orders start `Awaiting Payment`.
    """
    profile = _provider_profile(provider)
    if not profile.offers_service(Order.ServiceType.VOICE_OVER):
        raise PreconditionFailed("This provider does not offer voice-over.")

    quote = pricing.quote_voice_over(profile, script, usage=usage, video_sync=video_sync)
    if quote.price <= 0:
        raise PreconditionFailed("The order price could not be computed; request a quote instead.")

    if payment_method == Order.PaymentMethod.STRIPE:
        if not payment_intent_id:
            raise PreconditionFailed("A payment intent id is required for card payments.")
        _verify_card_charge(ctx, payment_intent_id, quote.price)
        status = S.IN_PROGRESS
    elif payment_method == Order.PaymentMethod.BANK:
        payment_intent_id = None
        status = S.AWAITING_PAYMENT
    else:
        raise PreconditionFailed("Unknown payment method.")

    with committing(ctx.notifier) as effects:
        order = ctx.store.insert_order(
            service_type=Order.ServiceType.VOICE_OVER,
            provider=provider,
            client_user=client_user,
            client_name=client_name,
            client_email=client_email.lower(),
            client_phone=client_phone or "",
            client_company=client_company or "",
            script=script,
            word_count=quote.word_count,
            usage=usage,
            video_sync=video_sync,
            total_price=quote.price,
            payment_method=payment_method,
            payment_intent_id=payment_intent_id,
            status=status,
            revisions_allowed=profile.revisions_allowed,
        )
        effects.notify(
            templates.NEW_DIRECT_ORDER,
            _to_provider(
                order,
                word_count=order.word_count,
                usage=order.usage,
                payment_method=payment_method,
            ),
        )
        effects.notify(templates.ORDER_CONFIRMATION, _to_client(order))
    logger.info("Direct order %s created (%s, %s)", order.order_code, payment_method, status)
    return order, quote


# ----------------------------- offers -----------------------------

def send_offer(ctx, order_id, *, title, price, agreement="", expected_status=None):
    """Append a new offer to the order's log and move it to `offer_made`."""
    if not (title or "").strip():
        raise PreconditionFailed("Please provide an offer title.")
    if price is None or price <= 0:
        raise PreconditionFailed("Please enter a valid price.")

    order = ctx.store.get(order_id)
    transition = _check(order, "send_offer", expected_status)
    is_update = order.status == S.OFFER_MADE

    with committing(ctx.notifier) as effects:
        offer = ctx.store.insert_offer(
            order.pk, title=title.strip(), price=price, agreement=agreement
        )
        _write(ctx, order, {"status": transition.target})
        effects.notify(
            templates.OFFER_UPDATED if is_update else templates.NEW_OFFER,
            _to_client(
                order,
                offer_title=offer.title,
                offer_price=offer.price,
                offer_agreement=offer.agreement or "No agreement details provided.",
            ),
        )
    return offer


def accept_offer(ctx, order_id, *, offer_id=None, expected_status=None):
    """Accept the latest offer: its price becomes the order's total price."""
    order = ctx.store.get(order_id)
    transition = _check(order, "accept_offer", expected_status)
    latest = ctx.store.latest_offer(order.pk)
    if latest is None:
        raise PreconditionFailed("There is no offer to accept.")
    if offer_id is not None and int(offer_id) != latest.pk:
        raise TransitionConflict("A newer offer has been made. Please review it first.")

    with committing(ctx.notifier) as effects:
        # Guarding on the counter keeps a concurrent new offer from being skipped.
        _write(
            ctx,
            order,
            {"status": transition.target, "total_price": latest.price},
            offer_sequence=latest.sequence,
        )
        order.total_price = latest.price
        effects.notify(templates.OFFER_ACCEPTED, _to_provider(order))
    return ctx.store.get(order.pk)


# ----------------------------- payment -----------------------------

def create_payment_intent(ctx, order_id):
    """Ask the gateway for a client secret to charge the order's total price."""
    order = ctx.store.get(order_id)
    _require_price(order)
    if order.status != S.AWAITING_PAYMENT:
        raise PreconditionFailed("The order is not awaiting payment.")
    return ctx.payment_gateway.create_intent(order.total_price, settings.PAYMENT_CURRENCY)


def pay_by_card(ctx, order_id, *, payment_intent_id, expected_status=None):
    """Record a successful card charge and start the work."""
    order = ctx.store.get(order_id)
    transition = _check(order, "pay_by_card", expected_status)
    _require_price(order)
    if not payment_intent_id:
        raise PreconditionFailed("A payment intent id is required.")
    _verify_card_charge(ctx, payment_intent_id, order.total_price)

    with committing(ctx.notifier) as effects:
        _write(
            ctx,
            order,
            {
                "status": transition.target,
                "payment_method": Order.PaymentMethod.STRIPE,
                "payment_intent_id": payment_intent_id,
            },
        )
        effects.notify(templates.PAYMENT_RECEIVED, _to_provider(order))
    return ctx.store.get(order.pk)


def mark_bank_paid(ctx, order_id, *, expected_status=None):
    """The client declares a bank transfer as sent.

    Providers with direct payment confirm the transfer themselves; for all
    others the platform admin does.
    """
    order = ctx.store.get(order_id)
    _check(order, "mark_bank_paid", expected_status)
    _require_price(order)

    profile = getattr(order.provider, "profile", None)
    direct = bool(profile and profile.direct_payment_enabled)
    target = S.AWAITING_ACTOR_CONFIRMATION if direct else S.AWAITING_ADMIN_CONFIRMATION

    with committing(ctx.notifier) as effects:
        _write(
            ctx,
            order,
            {"status": target, "payment_method": Order.PaymentMethod.BANK, "paid_directly": direct},
        )
        if direct:
            effects.notify(templates.BANK_TRANSFER_MARKED, _to_provider(order))
    return ctx.store.get(order.pk)


def _confirm_payment(ctx, order_id, name, expected_status):
    order = ctx.store.get(order_id)
    transition = _check(order, name, expected_status)
    with committing(ctx.notifier) as effects:
        _write(ctx, order, {"status": transition.target})
        effects.notify(templates.WORK_STARTED, _to_client(order))
    return ctx.store.get(order.pk)


def confirm_bank_payment(ctx, order_id, *, expected_status=None):
    """The provider confirms that the client's transfer arrived."""
    return _confirm_payment(ctx, order_id, "confirm_bank_payment", expected_status)


def admin_confirm_payment(ctx, order_id, *, expected_status=None):
    """Staff confirm a transfer to the platform account."""
    return _confirm_payment(ctx, order_id, "admin_confirm_payment", expected_status)


# ----------------------------- delivery -----------------------------

def deliver(ctx, order_id, *, file_url, expected_status=None):
    """Add a new delivery version and ask the client for approval."""
    if not (file_url or "").strip():
        raise PreconditionFailed("Please attach a file or a link.")
    order = ctx.store.get(order_id)
    transition = _check(order, "deliver", expected_status)

    with committing(ctx.notifier) as effects:
        delivery = ctx.store.insert_delivery(order.pk, file_url=file_url.strip())
        _write(ctx, order, {"status": transition.target})
        effects.notify(
            templates.NEW_DELIVERY,
            _to_client(order, version_number=delivery.version_number, file_url=delivery.file_url),
        )
    return delivery


def accept_delivery(ctx, order_id, *, expected_status=None):
    """Complete the order and fix what the platform owes the provider."""
    order = ctx.store.get(order_id)
    transition = _check(order, "accept_delivery", expected_status)
    with committing(ctx.notifier):
        _write(ctx, order, {"status": transition.target, **payouts.completion_patch(order)})
    logger.info("Order %s completed", order.order_code)
    return ctx.store.get(order.pk)


def request_revision(ctx, order_id, *, expected_status=None):
    """Send the latest delivery back for rework, if revisions are left."""
    order = ctx.store.get(order_id)
    transition = _check(order, "request_revision", expected_status)
    if order.revisions_used >= order.revisions_allowed:
        raise PreconditionFailed("No revisions remaining.")

    with committing(ctx.notifier) as effects:
        _write(
            ctx,
            order,
            {"status": transition.target, "revisions_used": F("revisions_used") + 1},
            revisions_used=order.revisions_used,
        )
        effects.notify(
            templates.REVISION_REQUESTED,
            _to_provider(order, revisions_left=order.revisions_allowed - order.revisions_used - 1),
        )
    return ctx.store.get(order.pk)


def cancel_order(ctx, order_id, *, expected_status=None):
    order = ctx.store.get(order_id)
    transition = _check(order, "cancel", expected_status)
    with committing(ctx.notifier):
        _write(ctx, order, {"status": transition.target})
    logger.info("Order %s cancelled from %r", order.order_code, order.status)
    return ctx.store.get(order.pk)


# ----------------------------- review -----------------------------

def submit_review(ctx, order_id, *, client, rating, comment=""):
    """Create the client's review of a completed order (once)."""
    order = ctx.store.get(order_id)
    if order.status != S.COMPLETED:
        raise PreconditionFailed("Only completed orders can be reviewed.")
    if not 1 <= int(rating) <= 5:
        raise PreconditionFailed("Rating must be between 1 and 5.")
    return ctx.store.insert_review(order=order, client=client, rating=int(rating), comment=comment)
