"""Profiles app models.

Defines the Profile model that extends the base user with role information
(client/provider). Provider profiles also carry the pricing rates used for
direct voice-over orders, the revision allowance copied onto new orders, the
payout bank details and the direct-payment flags. String fields default to
empty strings to avoid nulls in API responses.
"""

from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models


class Profile(models.Model):
    """
    Profile for a single user.

    A profile is created at most once per user (OneToOne relationship).
    """

    class Type(models.TextChoices):
        CLIENT = "client", "client"
        PROVIDER = "provider", "provider"

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="profile",
    )
    file = models.CharField(max_length=255, blank=True, default="")
    location = models.CharField(max_length=255, blank=True, default="")
    tel = models.CharField(max_length=50, blank=True, default="")
    description = models.TextField(blank=True, default="")
    type = models.CharField(
        max_length=20,
        choices=Type.choices,
        blank=True,
        default="",
    )

    # Services and rates (providers only)
    offers_voice_over = models.BooleanField(default=True)
    offers_scriptwriting = models.BooleanField(default=False)
    offers_video_editing = models.BooleanField(default=False)
    base_rate_per_word = models.DecimalField(
        max_digits=8,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(0)],
    )
    web_multiplier = models.DecimalField(
        max_digits=5, decimal_places=2, default=Decimal("1.00"),
        validators=[MinValueValidator(0)],
    )
    broadcast_multiplier = models.DecimalField(
        max_digits=5, decimal_places=2, default=Decimal("1.00"),
        validators=[MinValueValidator(0)],
    )
    revisions_allowed = models.PositiveIntegerField(default=2)

    # Payout details
    bank_name = models.CharField(max_length=255, blank=True, default="")
    bank_holder_name = models.CharField(max_length=255, blank=True, default="")
    bank_iban = models.CharField(max_length=64, blank=True, default="")
    bank_account_number = models.CharField(max_length=64, blank=True, default="")
    direct_payment_enabled = models.BooleanField(default=False)
    direct_payment_requested = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        """Readable representation for admin and debugging."""
        return f"Profile<{self.user_id}:{self.user.username}>"

    @property
    def is_provider(self) -> bool:
        return self.type == self.Type.PROVIDER

    @property
    def is_client(self) -> bool:
        return self.type == self.Type.CLIENT

    def offers_service(self, service_type: str) -> bool:
        """Return True if the provider accepts orders of the given service type."""
        return bool(getattr(self, f"offers_{service_type}", False))
