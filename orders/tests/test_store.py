import threading
import unittest
from decimal import Decimal
from unittest.mock import patch

from django.contrib.auth import get_user_model
from django.db import IntegrityError, connection, transaction
from django.test import TestCase, TransactionTestCase

from deliveries.models import Delivery
from orders.exceptions import AlreadyReviewed, PaymentIntentReused
from orders.models import Order
from orders.store import OrderRecordStore, generate_order_code
from reviews.models import Review

User = get_user_model()


def create_order(provider, **fields):
    defaults = dict(
        service_type=Order.ServiceType.VOICE_OVER,
        client_name="Client",
        client_email="cust@example.com",
        provider=provider,
        total_price=Decimal("10.00"),
    )
    defaults.update(fields)
    return OrderRecordStore().insert_order(**defaults)


class OrderRecordStoreTests(TestCase):
    def setUp(self):
        self.store = OrderRecordStore()
        self.actor = User.objects.create_user("actor", "actor@example.com", "pass1234")
        self.order = create_order(self.actor)

    def test_order_code_prefix_by_service(self):
        self.assertTrue(generate_order_code("voice_over").startswith("VO-"))
        self.assertTrue(generate_order_code("scriptwriting").startswith("SW-"))
        self.assertTrue(generate_order_code("video_editing").startswith("VE-"))
        self.assertTrue(self.order.order_code.startswith("VO-"))

    def test_conditional_update_matches_observed_status(self):
        ok = self.store.conditional_update(
            self.order.id, Order.Status.AWAITING_OFFER, {"status": Order.Status.OFFER_MADE}
        )
        self.assertTrue(ok)
        # second writer still believes the old status
        lost = self.store.conditional_update(
            self.order.id, Order.Status.AWAITING_OFFER, {"status": Order.Status.CANCELLED}
        )
        self.assertFalse(lost)
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, Order.Status.OFFER_MADE)

    def test_unknown_status_rejected(self):
        with self.assertRaises(ValueError):
            self.store.conditional_update(self.order.id, None, {"status": "shipped"})
        with self.assertRaises(ValueError):
            create_order(self.actor, status="shipped")

    def test_offer_sequence_is_monotonic(self):
        first = self.store.insert_offer(self.order.id, title="A", price=Decimal("100"))
        second = self.store.insert_offer(self.order.id, title="B", price=Decimal("120"))
        self.assertEqual((first.sequence, second.sequence), (1, 2))
        self.assertEqual(self.store.latest_offer(self.order.id), second)

    def test_delivery_versions_per_order(self):
        other = create_order(self.actor)
        v1 = self.store.insert_delivery(self.order.id, file_url="a")
        v2 = self.store.insert_delivery(self.order.id, file_url="b")
        w1 = self.store.insert_delivery(other.id, file_url="c")
        self.assertEqual([v1.version_number, v2.version_number, w1.version_number], [1, 2, 1])
        self.assertEqual(self.store.latest_delivery(self.order.id), v2)

    def test_second_review_reports_existing(self):
        cust = User.objects.create_user("cust", "cust@example.com", "pass1234")
        first = self.store.insert_review(order=self.order, client=cust, rating=5, comment="Top")
        with self.assertRaises(AlreadyReviewed) as ctx:
            self.store.insert_review(order=self.order, client=cust, rating=1)
        self.assertEqual(ctx.exception.review, first)
        self.assertEqual(Review.objects.count(), 1)
        self.assertEqual(Review.objects.get().rating, 5)

    def test_subscribe_sees_committed_changes_until_unsubscribed(self):
        seen = []
        unsubscribe = self.store.subscribe(self.order.id, lambda oid, changed: seen.append((oid, changed)))
        self.addCleanup(unsubscribe)

        with self.captureOnCommitCallbacks(execute=True):
            self.store.conditional_update(self.order.id, None, {"status": Order.Status.OFFER_MADE})
        with self.captureOnCommitCallbacks(execute=True):
            self.store.insert_delivery(create_order(self.actor).id, file_url="x")
        self.assertEqual(seen, [(self.order.id, ["status"])])

        unsubscribe()
        with self.captureOnCommitCallbacks(execute=True):
            self.store.conditional_update(self.order.id, None, {"status": Order.Status.CANCELLED})
        self.assertEqual(len(seen), 1)

    def test_payment_intent_pays_one_order(self):
        create_order(self.actor, payment_intent_id="pi_1", status=Order.Status.IN_PROGRESS)
        with self.assertRaises(PaymentIntentReused):
            create_order(self.actor, payment_intent_id="pi_1", status=Order.Status.IN_PROGRESS)
        with self.assertRaises(PaymentIntentReused):
            self.store.conditional_update(self.order.id, None, {"payment_intent_id": "pi_1"})
        self.order.refresh_from_db()
        self.assertIsNone(self.order.payment_intent_id)
        self.assertEqual(Order.objects.filter(payment_intent_id="pi_1").count(), 1)

    def test_orders_without_intent_do_not_clash(self):
        create_order(self.actor)
        create_order(self.actor)
        self.assertEqual(Order.objects.filter(payment_intent_id__isnull=True).count(), 3)

    def test_mark_payouts_paid_only_touches_unpaid_completed_orders(self):
        done = create_order(
            self.actor,
            status=Order.Status.COMPLETED,
            payout_status=Order.PayoutStatus.UNPAID,
            provider_payout_amount=Decimal("10.00"),
        )
        direct = create_order(
            self.actor,
            status=Order.Status.COMPLETED,
            payout_status=Order.PayoutStatus.DIRECT,
            provider_payout_amount=Decimal("0.00"),
        )
        marked = self.store.mark_payouts_paid(provider_id=self.actor.id)
        self.assertEqual(marked, [(done.id, Decimal("10.00"))])
        done.refresh_from_db()
        direct.refresh_from_db()
        self.assertEqual(done.payout_status, Order.PayoutStatus.PAID)
        self.assertIsNotNone(done.paid_out_at)
        self.assertEqual(direct.payout_status, Order.PayoutStatus.DIRECT)
        self.assertEqual(self.store.mark_payouts_paid(provider_id=self.actor.id), [])


class InterleavedDeliveryTests(TestCase):
    """Deliveries whose numbering overlaps: each allocation starts another insert
    before its own delivery row is written."""

    def setUp(self):
        self.store = OrderRecordStore()
        actor = User.objects.create_user("actor", "actor@example.com", "pass1234")
        self.order = create_order(actor, status=Order.Status.IN_PROGRESS)

    def test_overlapping_inserts_get_distinct_versions(self):
        real_allocate = self.store._allocate
        allocated = []

        def allocate_then_interleave(order_id, counter):
            number = real_allocate(order_id, counter)
            if len(allocated) < 5:
                allocated.append(number)
                self.store.insert_delivery(order_id, file_url=f"https://files/{number}-b.wav")
            return number

        with patch.object(self.store, "_allocate", side_effect=allocate_then_interleave):
            first = self.store.insert_delivery(self.order.id, file_url="https://files/a.wav")

        self.assertEqual(first.version_number, 1)
        versions = sorted(Delivery.objects.filter(order=self.order).values_list("version_number", flat=True))
        self.assertEqual(versions, [1, 2, 3, 4, 5, 6])
        self.order.refresh_from_db()
        self.assertEqual(self.order.delivery_sequence, 6)
        self.assertEqual(self.store.latest_delivery(self.order.id).version_number, 6)

    def test_duplicate_version_is_rejected_by_the_database(self):
        self.store.insert_delivery(self.order.id, file_url="https://files/a.wav")
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                Delivery.objects.create(order=self.order, version_number=1, file_url="https://files/b.wav")
        self.assertEqual(Delivery.objects.filter(order=self.order).count(), 1)


@unittest.skipUnless(connection.vendor == "postgresql", "needs row locking of a real database server")
class ConcurrentDeliveryTests(TransactionTestCase):
    def test_parallel_deliveries_get_distinct_versions(self):
        actor = User.objects.create_user("actor", "actor@example.com", "pass1234")
        order = create_order(actor, status=Order.Status.IN_PROGRESS)
        store = OrderRecordStore()
        errors = []

        def worker(n):
            try:
                store.insert_delivery(order.id, file_url=f"https://files/{n}.wav")
            except Exception as exc:
                errors.append(exc)
            finally:
                connection.close()

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(errors, [])
        versions = sorted(Delivery.objects.filter(order=order).values_list("version_number", flat=True))
        self.assertEqual(versions, list(range(1, 9)))
