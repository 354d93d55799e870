"""Orders app models.

Defines the Order model, the aggregate of one client/provider engagement for
one service. The status is a closed set of values enforced both in Python and
by a database check constraint. The provider's revision allowance is
snapshotted at creation so later profile changes do not affect open orders.
A card payment intent pays at most one order.
"""

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models


class Order(models.Model):
    """Represents an order placed by a client with a provider."""

    class Status(models.TextChoices):
        AWAITING_OFFER = "awaiting_offer", "Awaiting Offer"
        OFFER_MADE = "offer_made", "Offer Made"
        AWAITING_PAYMENT = "Awaiting Payment", "Awaiting Payment"
        AWAITING_ACTOR_CONFIRMATION = "Awaiting Actor Confirmation", "Awaiting Actor Confirmation"
        AWAITING_ADMIN_CONFIRMATION = "Awaiting Admin Confirmation", "Awaiting Admin Confirmation"
        IN_PROGRESS = "In Progress", "In Progress"
        PENDING_APPROVAL = "Pending Approval", "Pending Approval"
        COMPLETED = "Completed", "Completed"
        CANCELLED = "Cancelled", "Cancelled"

    class ServiceType(models.TextChoices):
        VOICE_OVER = "voice_over", "Voice Over"
        SCRIPTWRITING = "scriptwriting", "Script Writing"
        VIDEO_EDITING = "video_editing", "Video Editing"

    class PaymentMethod(models.TextChoices):
        STRIPE = "stripe", "stripe"
        BANK = "bank", "bank"

    class Usage(models.TextChoices):
        WEB = "web", "web"
        BROADCAST = "broadcast", "broadcast"

    class Role(models.TextChoices):
        CLIENT = "client", "client"
        PROVIDER = "provider", "provider"

    class PayoutStatus(models.TextChoices):
        UNPAID = "unpaid", "unpaid"
        PAID = "paid", "paid"
        DIRECT = "direct", "paid directly"

    order_code = models.CharField(max_length=40, unique=True, editable=False)
    service_type = models.CharField(max_length=20, choices=ServiceType.choices)

    client_user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="orders_placed",
        null=True,
        blank=True,
    )
    client_name = models.CharField(max_length=200)
    client_email = models.EmailField()
    client_phone = models.CharField(max_length=50, blank=True, default="")
    client_company = models.CharField(max_length=200, blank=True, default="")
    provider = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="orders_received",
    )

    total_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(0)],
    )
    payment_method = models.CharField(
        max_length=10, choices=PaymentMethod.choices, null=True, blank=True
    )
    payment_intent_id = models.CharField(max_length=255, null=True, blank=True)
    # Bank transfer sent to the provider's own account, not to the platform
    paid_directly = models.BooleanField(default=False)

    # Scope: the script for voice-over, the project description otherwise
    script = models.TextField(blank=True, default="")
    word_count = models.PositiveIntegerField(default=0)
    usage = models.CharField(max_length=20, choices=Usage.choices, null=True, blank=True)
    video_sync = models.BooleanField(default=False)
    quote_est_duration = models.CharField(max_length=100, null=True, blank=True)
    quote_video_type = models.CharField(max_length=100, null=True, blank=True)
    quote_footage_choice = models.CharField(max_length=100, null=True, blank=True)

    status = models.CharField(
        max_length=32, choices=Status.choices, default=Status.AWAITING_OFFER
    )
    revisions_used = models.PositiveIntegerField(default=0)
    revisions_allowed = models.PositiveIntegerField(default=0)

    last_message_sender_role = models.CharField(
        max_length=10, choices=Role.choices, null=True, blank=True
    )
    client_has_unread = models.BooleanField(default=False)
    provider_has_unread = models.BooleanField(default=False)
    notification_due_at = models.DateTimeField(null=True, blank=True)

    # What the platform owes the provider, fixed when the order is completed
    payout_status = models.CharField(
        max_length=10, choices=PayoutStatus.choices, null=True, blank=True
    )
    provider_payout_amount = models.DecimalField(
        max_digits=10, decimal_places=2, null=True, blank=True
    )
    paid_out_at = models.DateTimeField(null=True, blank=True)

    # Store-side counters for numbering offers and deliveries
    offer_sequence = models.PositiveIntegerField(default=0, editable=False)
    delivery_sequence = models.PositiveIntegerField(default=0, editable=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("-created_at", "-id")
        constraints = [
            models.CheckConstraint(
                condition=models.Q(
                    status__in=[
                        "awaiting_offer",
                        "offer_made",
                        "Awaiting Payment",
                        "Awaiting Actor Confirmation",
                        "Awaiting Admin Confirmation",
                        "In Progress",
                        "Pending Approval",
                        "Completed",
                        "Cancelled",
                    ]
                ),
                name="order_status_valid",
            ),
            models.UniqueConstraint(
                fields=["payment_intent_id"],
                condition=models.Q(payment_intent_id__isnull=False),
                name="unique_payment_intent_per_order",
            ),
        ]

    def __str__(self) -> str:
        """Readable representation for admin and debugging."""
        return f"Order<{self.id} {self.order_code} {self.status}>"

    @property
    def revisions_left(self) -> int:
        return max(self.revisions_allowed - self.revisions_used, 0)

    def is_client(self, user) -> bool:
        """True if the user is this order's client (by account or by e-mail)."""
        if not user or not user.is_authenticated:
            return False
        if self.client_user_id is not None and self.client_user_id == user.id:
            return True
        return bool(user.email) and user.email.lower() == self.client_email.lower()

    def is_provider(self, user) -> bool:
        return bool(user and user.is_authenticated and self.provider_id == user.id)
