"""Provider payouts.

The platform collects card payments and bank transfers to its own account and
pays the provider once the client has accepted the delivery. The marketplace
takes no commission, so the payout is the order's total price. Orders paid by
bank transfer straight to the provider are marked `direct` and never owed.
"""

import logging
from decimal import Decimal

from django.db.models import Count, Sum

from .exceptions import PreconditionFailed
from .models import Order

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")
P = Order.PayoutStatus


def completion_patch(order) -> dict:
    """Payout fields to write when `order` is completed."""
    if order.paid_directly:
        return {"payout_status": P.DIRECT, "provider_payout_amount": ZERO}
    return {"payout_status": P.UNPAID, "provider_payout_amount": order.total_price}


def _owed(qs):
    return qs.filter(status=Order.Status.COMPLETED, payout_status=P.UNPAID)


def pending_payouts():
    """Unpaid payouts summed per provider, largest amount first."""
    rows = (
        _owed(Order.objects.all())
        .values(
            "provider",
            "provider__username",
            "provider__email",
            "provider__profile__bank_holder_name",
            "provider__profile__bank_iban",
        )
        .annotate(completed_orders=Count("id"), total_due=Sum("provider_payout_amount"))
        .order_by("-total_due", "provider")
    )
    return [
        {
            "provider_id": row["provider"],
            "username": row["provider__username"],
            "email": row["provider__email"],
            "bank_holder_name": row["provider__profile__bank_holder_name"] or "",
            "bank_iban": row["provider__profile__bank_iban"] or "",
            "completed_orders": row["completed_orders"],
            "total_due": row["total_due"] or ZERO,
        }
        for row in rows
    ]


def provider_earnings(user):
    """What the platform still owes `user` and the payouts already made."""
    owed = _owed(Order.objects.filter(provider=user)).aggregate(
        total=Sum("provider_payout_amount"), count=Count("id")
    )
    history = Order.objects.filter(provider=user, payout_status=P.PAID).order_by(
        "-paid_out_at", "-id"
    )
    return {
        "total_owed": owed["total"] or ZERO,
        "unpaid_order_count": owed["count"],
        "history": history,
    }


def mark_payouts_paid(ctx, *, provider_id=None, order_ids=None):
    """Mark the unpaid payouts of a provider (or of the given orders) as paid.

    Returns (number of orders, total amount). Raises PreconditionFailed when
    nothing was owed.
    """
    filters = {}
    if provider_id is not None:
        filters["provider_id"] = provider_id
    if order_ids is not None:
        filters["pk__in"] = list(order_ids)
    if not filters:
        raise ValueError("Pass a provider_id or order_ids.")

    marked = ctx.store.mark_payouts_paid(**filters)
    if not marked:
        raise PreconditionFailed("There are no unpaid payouts to mark as paid.")
    total = sum((amount or ZERO for _, amount in marked), ZERO)
    logger.info("Marked %d payout(s) as paid, total %s", len(marked), total)
    return len(marked), total
