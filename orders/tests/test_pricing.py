from decimal import Decimal
from types import SimpleNamespace

from django.test import SimpleTestCase, override_settings

from orders.pricing import count_words, quote_voice_over


def rate_card(rate="1.00", web="1.00", broadcast="2.00"):
    return SimpleNamespace(
        base_rate_per_word=Decimal(rate),
        web_multiplier=Decimal(web) if web is not None else None,
        broadcast_multiplier=Decimal(broadcast),
    )


@override_settings(DIRECT_ORDER_MINIMUM_FEE="10.00", VIDEO_SYNC_FEE="500.00", PAYMENT_CURRENCY="mad")
class PricingTests(SimpleTestCase):
    def test_count_words_splits_on_whitespace(self):
        self.assertEqual(count_words("  one\ttwo\nthree  "), 3)
        self.assertEqual(count_words(""), 0)
        self.assertEqual(count_words(None), 0)

    def test_usage_multiplier(self):
        script = " ".join(["w"] * 20)
        self.assertEqual(quote_voice_over(rate_card(), script, usage="web").price, Decimal("20.00"))
        self.assertEqual(quote_voice_over(rate_card(), script, usage="broadcast").price, Decimal("40.00"))

    def test_zero_multiplier_counts_as_one(self):
        quote = quote_voice_over(rate_card(web="0"), " ".join(["w"] * 20))
        self.assertEqual(quote.price, Decimal("20.00"))

    def test_video_sync_fee(self):
        quote = quote_voice_over(rate_card(), " ".join(["w"] * 20), video_sync=True)
        self.assertEqual(quote.price, Decimal("520.00"))

    def test_minimum_fee(self):
        quote = quote_voice_over(rate_card(rate="0.50"), "a b c")
        self.assertTrue(quote.minimum_fee_applied)
        self.assertEqual(quote.computed_price, Decimal("1.50"))
        self.assertEqual(quote.price, Decimal("10.00"))
        self.assertEqual(
            quote.message,
            "Minimum order fee of 10.00 MAD applied (calculated price was 1.50).",
        )

    def test_empty_script_is_not_raised_to_minimum(self):
        quote = quote_voice_over(rate_card(), "")
        self.assertEqual(quote.price, Decimal("0.00"))
        self.assertFalse(quote.minimum_fee_applied)

    def test_explicit_word_count(self):
        quote = quote_voice_over(rate_card(rate="0.10"), word_count=150)
        self.assertEqual(quote.word_count, 150)
        self.assertEqual(quote.price, Decimal("15.00"))
