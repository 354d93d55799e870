from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core import mail
from django.urls import reverse
from rest_framework import status
from rest_framework.authtoken.models import Token
from rest_framework.test import APITestCase

from profiles.models import Profile
from orders.models import Order

User = get_user_model()


def create_profile_with_type(user, t: str, **fields):
    return Profile.objects.create(user=user, type=t, **fields)


class QuoteRequestPostTests(APITestCase):
    def setUp(self):
        self.actor = User.objects.create_user("actor", "actor@example.com", "pass1234")
        create_profile_with_type(self.actor, "provider", offers_scriptwriting=True)

        self.cust = User.objects.create_user("cust", "cust@example.com", "pass1234")
        create_profile_with_type(self.cust, "client")
        self.cust_token = Token.objects.create(user=self.cust)

        self.url = reverse("order-list")

    def auth(self, token):
        self.client.credentials(HTTP_AUTHORIZATION=f"Token {token.key}")

    def payload(self, **overrides):
        data = {
            "provider": self.actor.id,
            "service_type": "scriptwriting",
            "client_name": "Sara",
            "client_email": "Sara@Example.com",
            "script": "A 60 second explainer about our app.",
            "quote_est_duration": "60s",
        }
        data.update(overrides)
        return data

    def test_anonymous_quote_request_201(self):
        with self.captureOnCommitCallbacks(execute=True):
            res = self.client.post(self.url, self.payload(), format="json")
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertEqual(res.data["status"], "awaiting_offer")
        self.assertIsNone(res.data["total_price"])
        self.assertTrue(res.data["order_code"].startswith("SW-"))
        # e-mail is stored lower-cased
        self.assertEqual(res.data["client_email"], "sara@example.com")
        self.assertIsNone(res.data["client_user"])

        # provider is told about the new request
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ["actor@example.com"])
        self.assertIn(res.data["order_code"], mail.outbox[0].subject)

    def test_authenticated_client_defaults_contact_from_account(self):
        self.cust.first_name, self.cust.last_name = "Cu", "Stomer"
        self.cust.save()
        self.auth(self.cust_token)
        data = self.payload()
        del data["client_name"], data["client_email"]
        res = self.client.post(self.url, data, format="json")
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertEqual(res.data["client_user"], self.cust.id)
        self.assertEqual(res.data["client_name"], "Cu Stomer")
        self.assertEqual(res.data["client_email"], "cust@example.com")

    def test_missing_contact_for_anonymous_400(self):
        data = self.payload()
        del data["client_email"]
        res = self.client.post(self.url, data, format="json")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("client_email", res.data)

    def test_revisions_allowed_is_copied_from_provider(self):
        self.actor.profile.revisions_allowed = 4
        self.actor.profile.save()
        res = self.client.post(self.url, self.payload(), format="json")
        self.assertEqual(res.data["revisions_allowed"], 4)

        # later profile changes do not touch the open order
        self.actor.profile.revisions_allowed = 0
        self.actor.profile.save()
        self.assertEqual(Order.objects.get(pk=res.data["id"]).revisions_allowed, 4)

    def test_service_not_offered_400(self):
        res = self.client.post(self.url, self.payload(service_type="video_editing"), format="json")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(Order.objects.count(), 0)

    def test_target_must_be_provider_400(self):
        res = self.client.post(self.url, self.payload(provider=self.cust.id), format="json")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unknown_provider_400(self):
        res = self.client.post(self.url, self.payload(provider=9999), format="json")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("provider", res.data)

    def test_voice_over_with_script_and_rate_must_use_direct_order(self):
        self.actor.profile.base_rate_per_word = Decimal("1.00")
        self.actor.profile.save()
        res = self.client.post(self.url, self.payload(service_type="voice_over"), format="json")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(Order.objects.count(), 0)

    def test_voice_over_without_rate_can_request_quote(self):
        res = self.client.post(self.url, self.payload(service_type="voice_over"), format="json")
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertTrue(res.data["order_code"].startswith("VO-"))
        self.assertEqual(res.data["word_count"], 7)
