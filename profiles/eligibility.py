"""Direct-payment eligibility.

A provider may ask to be paid directly by clients (bank transfer to the
provider's own account) once they have completed enough orders with a good
enough average rating. `evaluate` is a pure function; `request_direct_payment`
is the one-way provider action. Enabling is done by staff in the admin.
"""

import logging

from django.conf import settings
from django.db.models import Avg
from rest_framework.exceptions import ValidationError

from orders.models import Order
from reviews.models import Review

logger = logging.getLogger(__name__)

NOT_ELIGIBLE = "not_eligible"
ELIGIBLE_CAN_REQUEST = "eligible_can_request"
REQUESTED_PENDING = "requested_pending"
ENABLED = "enabled"


def evaluate(completed_order_count, average_rating, *, requested=False, enabled=False):
    """Return the direct-payment state for the given aggregates.

    The rating threshold is strict: an average of exactly the minimum does not
    qualify. A provider without reviews (average_rating None) never qualifies.
    """
    if enabled:
        return ENABLED
    if requested:
        return REQUESTED_PENDING
    if average_rating is None:
        return NOT_ELIGIBLE
    if (
        completed_order_count >= settings.DIRECT_PAYMENT_MIN_COMPLETED_ORDERS
        and average_rating > settings.DIRECT_PAYMENT_MIN_AVERAGE_RATING
    ):
        return ELIGIBLE_CAN_REQUEST
    return NOT_ELIGIBLE


def provider_aggregates(user):
    """Return (completed_order_count, average_rating) for a provider user.

    The average is rounded to one decimal and is None without reviews.
    """
    completed = Order.objects.filter(
        provider=user, status=Order.Status.COMPLETED
    ).count()
    avg = Review.objects.filter(provider=user).aggregate(avg=Avg("rating"))["avg"]
    return completed, (round(float(avg), 1) if avg is not None else None)


def evaluate_profile(profile):
    """Evaluate a provider profile against its live aggregates."""
    completed, avg = provider_aggregates(profile.user)
    return evaluate(
        completed,
        avg,
        requested=profile.direct_payment_requested,
        enabled=profile.direct_payment_enabled,
    )


def request_direct_payment(profile):
    """Flag the profile as having requested direct payment.

    Only allowed while the provider is eligible and has not requested yet. The
    flag is never cleared here.
    """
    state = evaluate_profile(profile)
    if state != ELIGIBLE_CAN_REQUEST:
        raise ValidationError(
            {"detail": f"Direct payment cannot be requested (state: {state})."}
        )
    type(profile).objects.filter(pk=profile.pk, direct_payment_requested=False).update(
        direct_payment_requested=True
    )
    profile.direct_payment_requested = True
    logger.info("Provider %s requested direct payment", profile.user_id)
    return REQUESTED_PENDING
