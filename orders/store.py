"""Record store for orders and their append-only children.

All status changes go through `conditional_update`, an UPDATE guarded by the
status the caller observed. Offer and delivery numbers come from per-order
counters that are incremented atomically in the same transaction as the
insert, so concurrent inserts can never share a number. A card payment
intent id belongs to at most one order; a clash raises `PaymentIntentReused`.
"""

import secrets

from django.db import IntegrityError, transaction
from django.db.models import F
from django.utils import timezone
from rest_framework.exceptions import NotFound

from chat.models import Message
from deliveries.models import Delivery
from offers.models import Offer
from reviews.models import Review

from .exceptions import AlreadyReviewed, PaymentIntentReused
from .models import Order
from .signals import order_changed

CODE_PREFIXES = {
    Order.ServiceType.VOICE_OVER: "VO",
    Order.ServiceType.SCRIPTWRITING: "SW",
    Order.ServiceType.VIDEO_EDITING: "VE",
}


def generate_order_code(service_type: str) -> str:
    millis = int(timezone.now().timestamp() * 1000)
    return f"{CODE_PREFIXES[service_type]}-{millis}-{secrets.token_hex(2).upper()}"


class OrderRecordStore:
    # ------------------------------ orders ------------------------------

    def get(self, order_id) -> Order:
        try:
            return Order.objects.select_related("provider", "provider__profile").get(pk=order_id)
        except Order.DoesNotExist:
            raise NotFound("Order not found.")

    def insert_order(self, **fields) -> Order:
        status = fields.get("status")
        if status is not None and status not in Order.Status.values:
            raise ValueError(f"Unknown order status: {status!r}")
        fields.setdefault("order_code", generate_order_code(fields["service_type"]))
        try:
            with transaction.atomic():
                return Order.objects.create(**fields)
        except IntegrityError:
            self._raise_if_intent_used(fields.get("payment_intent_id"))
            raise

    def conditional_update(self, order_id, expected_status, patch, **guards) -> bool:
        """Apply `patch` only if the order still has `expected_status` (and `guards`).

        `expected_status=None` skips the status guard. Returns False when no row
        matched, i.e. someone else changed the order first.
        """
        patch = dict(patch)
        if "status" in patch and patch["status"] not in Order.Status.values:
            raise ValueError(f"Unknown order status: {patch['status']!r}")
        patch.setdefault("updated_at", timezone.now())

        qs = Order.objects.filter(pk=order_id, **guards)
        if expected_status is not None:
            qs = qs.filter(status=expected_status)
        try:
            with transaction.atomic():
                updated = qs.update(**patch)
        except IntegrityError:
            self._raise_if_intent_used(patch.get("payment_intent_id"))
            raise
        if not updated:
            return False
        self._changed(order_id, sorted(k for k in patch if k != "updated_at"))
        return True

    def payment_intent_used(self, intent_id) -> bool:
        return Order.objects.filter(payment_intent_id=intent_id).exists()

    def _raise_if_intent_used(self, intent_id):
        if intent_id and self.payment_intent_used(intent_id):
            raise PaymentIntentReused()

    def mark_payouts_paid(self, **filters):
        """Mark unpaid payouts of completed orders matching `filters` as paid.

        Returns the (order_id, provider_payout_amount) pairs that were marked.
        """
        now = timezone.now()
        with transaction.atomic():
            due = list(
                Order.objects.select_for_update()
                .filter(
                    status=Order.Status.COMPLETED,
                    payout_status=Order.PayoutStatus.UNPAID,
                    **filters,
                )
                .order_by("pk")
                .values_list("pk", "provider_payout_amount")
            )
            if due:
                Order.objects.filter(
                    pk__in=[pk for pk, _ in due], payout_status=Order.PayoutStatus.UNPAID
                ).update(payout_status=Order.PayoutStatus.PAID, paid_out_at=now, updated_at=now)
        for pk, _ in due:
            self._changed(pk, ["paid_out_at", "payout_status"])
        return due

    # ------------------------- append-only children -------------------------

    def _allocate(self, order_id, counter: str) -> int:
        # The UPDATE keeps the order row locked until the transaction ends.
        Order.objects.filter(pk=order_id).update(**{counter: F(counter) + 1})
        return Order.objects.filter(pk=order_id).values_list(counter, flat=True).get()

    def insert_offer(self, order_id, *, title, price, agreement="") -> Offer:
        with transaction.atomic():
            sequence = self._allocate(order_id, "offer_sequence")
            offer = Offer.objects.create(
                order_id=order_id,
                sequence=sequence,
                title=title,
                agreement=agreement or "",
                price=price,
            )
        self._changed(order_id, ["offers"])
        return offer

    def latest_offer(self, order_id):
        return Offer.objects.filter(order_id=order_id).order_by("-sequence").first()

    def insert_delivery(self, order_id, *, file_url) -> Delivery:
        with transaction.atomic():
            version = self._allocate(order_id, "delivery_sequence")
            delivery = Delivery.objects.create(
                order_id=order_id, version_number=version, file_url=file_url
            )
        self._changed(order_id, ["deliveries"])
        return delivery

    def latest_delivery(self, order_id):
        return Delivery.objects.filter(order_id=order_id).order_by("-version_number").first()

    def insert_message(self, order_id, *, sender_role, body) -> Message:
        message = Message.objects.create(order_id=order_id, sender_role=sender_role, body=body)
        self._changed(order_id, ["messages"])
        return message

    def insert_review(self, *, order, client, rating, comment="") -> Review:
        try:
            with transaction.atomic():
                return Review.objects.create(
                    order=order,
                    client=client,
                    provider_id=order.provider_id,
                    rating=rating,
                    comment=comment or "",
                )
        except IntegrityError:
            existing = Review.objects.filter(order=order, client=client).first()
            if existing is None:
                raise
            raise AlreadyReviewed(review=existing)

    # ------------------------------ observers ------------------------------

    def subscribe(self, order_id, callback):
        """Call `callback(order_id, changed)` after every committed change of the order.

        Returns a function that removes the subscription.
        """
        target = int(order_id)

        def receiver(sender, order_id=None, changed=None, **kwargs):
            if order_id is not None and int(order_id) == target:
                callback(target, changed)

        order_changed.connect(receiver, weak=False)
        return lambda: order_changed.disconnect(receiver)

    def _changed(self, order_id, changed):
        transaction.on_commit(
            lambda: order_changed.send(sender=Order, order_id=order_id, changed=changed),
            robust=True,
        )
