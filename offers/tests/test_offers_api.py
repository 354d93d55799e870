from decimal import Decimal

from django.contrib.auth import get_user_model
from django.urls import reverse
from rest_framework import status
from rest_framework.authtoken.models import Token
from rest_framework.test import APITestCase

from profiles.models import Profile
from offers.models import Offer
from orders.models import Order

User = get_user_model()


def create_profile_with_type(user, t: str):
    return Profile.objects.create(user=user, type=t)


class OfferApiTests(APITestCase):
    def setUp(self):
        self.actor = User.objects.create_user("actor", "actor@example.com", "pass1234")
        create_profile_with_type(self.actor, "provider")
        self.actor_token = Token.objects.create(user=self.actor)

        self.cust = User.objects.create_user("cust", "cust@example.com", "pass1234")
        create_profile_with_type(self.cust, "client")
        self.cust_token = Token.objects.create(user=self.cust)

        self.other_actor = User.objects.create_user("other", "other@example.com", "pass1234")
        create_profile_with_type(self.other_actor, "provider")
        self.other_token = Token.objects.create(user=self.other_actor)

        self.order = Order.objects.create(
            order_code="SW-1",
            service_type=Order.ServiceType.SCRIPTWRITING,
            client_user=self.cust,
            client_name="Cust",
            client_email="cust@example.com",
            provider=self.actor,
        )
        self.url = reverse("order-offers", args=[self.order.id])
        self.accept_url = reverse("order-offer-accept", args=[self.order.id])

    def auth(self, token):
        self.client.credentials(HTTP_AUTHORIZATION=f"Token {token.key}")

    def make_offer(self, price, title="Offer"):
        self.auth(self.actor_token)
        return self.client.post(self.url, {"title": title, "price": price}, format="json")

    def test_provider_creates_offer_201(self):
        res = self.make_offer("99.50")
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertEqual(res.data["price"], "99.50")
        self.assertEqual(res.data["sequence"], 1)
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, Order.Status.OFFER_MADE)

    def test_client_cannot_make_offer_403(self):
        self.auth(self.cust_token)
        res = self.client.post(self.url, {"title": "x", "price": "10"}, format="json")
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

    def test_other_provider_403(self):
        self.auth(self.other_token)
        res = self.client.post(self.url, {"title": "x", "price": "10"}, format="json")
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

    def test_invalid_price_400(self):
        res = self.make_offer("0")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(Offer.objects.count(), 0)

    def test_blank_title_400(self):
        res = self.make_offer("10", title="   ")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_list_offers_in_sequence(self):
        self.make_offer("100.00")
        self.make_offer("90.00")
        self.auth(self.cust_token)
        res = self.client.get(self.url)
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual([o["price"] for o in res.data], ["100.00", "90.00"])

    def test_latest_offer_price_becomes_total(self):
        self.make_offer("100.00")
        latest = self.make_offer("120.00").data
        self.auth(self.cust_token)
        res = self.client.post(self.accept_url, {"offer_id": latest["id"]}, format="json")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["total_price"], "120.00")
        self.assertEqual(res.data["status"], "Awaiting Payment")

    def test_accepting_superseded_offer_409(self):
        first = self.make_offer("100.00").data
        self.make_offer("120.00")
        self.auth(self.cust_token)
        res = self.client.post(self.accept_url, {"offer_id": first["id"]}, format="json")
        self.assertEqual(res.status_code, status.HTTP_409_CONFLICT)
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, Order.Status.OFFER_MADE)
        self.assertIsNone(self.order.total_price)

    def test_no_new_offers_after_acceptance(self):
        self.make_offer("100.00")
        self.auth(self.cust_token)
        self.client.post(self.accept_url, {}, format="json")
        res = self.make_offer("80.00")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.order.refresh_from_db()
        self.assertEqual(self.order.total_price, Decimal("100.00"))
