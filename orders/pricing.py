"""Price calculation for direct voice-over orders.

price = words x rate per word x usage multiplier (+ video-sync fee)

A positive price below the minimum order fee is raised to the minimum fee and
the quote carries a message saying so.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from django.conf import settings

CENT = Decimal("0.01")


@dataclass(frozen=True)
class PriceQuote:
    word_count: int
    computed_price: Decimal
    price: Decimal
    minimum_fee_applied: bool = False
    message: str = ""


def count_words(script) -> int:
    return len((script or "").split())


def _money(value) -> Decimal:
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def _multiplier(value) -> Decimal:
    # Unset or zero multipliers count as 1, as on the provider's rate card.
    return Decimal(value) if value else Decimal("1")


def quote_voice_over(profile, script="", *, usage="web", video_sync=False, word_count=None):
    """Compute the direct-order price for a provider profile."""
    words = count_words(script) if word_count is None else int(word_count)
    multiplier = _multiplier(
        profile.web_multiplier if usage == "web" else profile.broadcast_multiplier
    )
    computed = Decimal(words) * Decimal(profile.base_rate_per_word or 0) * multiplier
    if video_sync:
        computed += Decimal(settings.VIDEO_SYNC_FEE)
    computed = _money(computed)

    minimum = _money(settings.DIRECT_ORDER_MINIMUM_FEE)
    if Decimal("0") < computed < minimum:
        return PriceQuote(
            word_count=words,
            computed_price=computed,
            price=minimum,
            minimum_fee_applied=True,
            message=(
                f"Minimum order fee of {minimum} {settings.PAYMENT_CURRENCY.upper()} applied "
                f"(calculated price was {computed})."
            ),
        )
    return PriceQuote(word_count=words, computed_price=computed, price=computed)
