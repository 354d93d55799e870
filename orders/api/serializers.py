"""Orders API serializers.

Input serializers only validate the request shape; every state change is made
by `orders.lifecycle`. Output serializers render orders and price quotes.
"""

from django.contrib.auth import get_user_model
from rest_framework import serializers

from orders.models import Order

User = get_user_model()


# ------------------------------ helpers ------------------------------

def _fill_client_from_user(attrs, request):
    """Default the client's contact fields from the authenticated user."""
    user = getattr(request, "user", None)
    if user is not None and user.is_authenticated:
        attrs["client_user"] = user
        attrs.setdefault("client_name", user.get_full_name() or user.username)
        if user.email:
            attrs.setdefault("client_email", user.email)
    missing = [key for key in ("client_name", "client_email") if not attrs.get(key)]
    if missing:
        raise serializers.ValidationError({key: "This field is required." for key in missing})
    return attrs


class ProviderField(serializers.PrimaryKeyRelatedField):
    """User id of a provider (validated further by the lifecycle)."""

    def __init__(self, **kwargs):
        kwargs.setdefault("queryset", User.objects.select_related("profile"))
        super().__init__(**kwargs)


# ------------------------------ input ------------------------------

class ClientContactSerializer(serializers.Serializer):
    client_name = serializers.CharField(max_length=200, required=False)
    client_email = serializers.EmailField(required=False)
    client_phone = serializers.CharField(max_length=50, required=False, allow_blank=True)
    client_company = serializers.CharField(max_length=200, required=False, allow_blank=True)

    def validate(self, attrs):
        return _fill_client_from_user(attrs, self.context.get("request"))


class QuoteRequestCreateSerializer(ClientContactSerializer):
    """Input for POST /api/orders/ (a quote request)."""

    provider = ProviderField()
    service_type = serializers.ChoiceField(choices=Order.ServiceType.choices)
    script = serializers.CharField(required=False, allow_blank=True, default="")
    usage = serializers.ChoiceField(choices=Order.Usage.choices, required=False, allow_null=True)
    quote_est_duration = serializers.CharField(max_length=100, required=False, allow_null=True)
    quote_video_type = serializers.CharField(max_length=100, required=False, allow_null=True)
    quote_footage_choice = serializers.CharField(max_length=100, required=False, allow_null=True)


class DirectOrderCreateSerializer(ClientContactSerializer):
    """Input for POST /api/orders/direct/ (a priced voice-over order)."""

    provider = ProviderField()
    script = serializers.CharField()
    usage = serializers.ChoiceField(choices=Order.Usage.choices, default=Order.Usage.WEB)
    video_sync = serializers.BooleanField(default=False)
    payment_method = serializers.ChoiceField(choices=Order.PaymentMethod.choices)
    payment_intent_id = serializers.CharField(required=False, allow_blank=True)

    def validate(self, attrs):
        attrs = super().validate(attrs)
        if attrs["payment_method"] == Order.PaymentMethod.STRIPE and not attrs.get(
            "payment_intent_id"
        ):
            raise serializers.ValidationError(
                {"payment_intent_id": "Required for card payments."}
            )
        return attrs


class QuoteSerializer(serializers.Serializer):
    """Input for POST /api/quote/."""

    provider = ProviderField()
    script = serializers.CharField(allow_blank=True)
    usage = serializers.ChoiceField(choices=Order.Usage.choices, default=Order.Usage.WEB)
    video_sync = serializers.BooleanField(default=False)
    create_payment_intent = serializers.BooleanField(default=False)


class OrderActionSerializer(serializers.Serializer):
    """Optional status the caller last saw; a mismatch is reported as a conflict."""

    expected_status = serializers.ChoiceField(choices=Order.Status.choices, required=False)


class CardPaymentSerializer(OrderActionSerializer):
    payment_intent_id = serializers.CharField()


# ------------------------------ output ------------------------------

class OrderOutputSerializer(serializers.ModelSerializer):
    """Read serializer for returning a complete order representation."""

    provider_username = serializers.CharField(source="provider.username", read_only=True)
    revisions_left = serializers.IntegerField(read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "order_code",
            "service_type",
            "status",
            "client_user",
            "client_name",
            "client_email",
            "client_phone",
            "client_company",
            "provider",
            "provider_username",
            "total_price",
            "payment_method",
            "paid_directly",
            "payout_status",
            "provider_payout_amount",
            "script",
            "word_count",
            "usage",
            "video_sync",
            "quote_est_duration",
            "quote_video_type",
            "quote_footage_choice",
            "revisions_used",
            "revisions_allowed",
            "revisions_left",
            "last_message_sender_role",
            "client_has_unread",
            "provider_has_unread",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class PriceQuoteSerializer(serializers.Serializer):
    word_count = serializers.IntegerField()
    computed_price = serializers.DecimalField(max_digits=10, decimal_places=2)
    price = serializers.DecimalField(max_digits=10, decimal_places=2)
    minimum_fee_applied = serializers.BooleanField()
    message = serializers.CharField(allow_blank=True)


class PayoutHistorySerializer(serializers.ModelSerializer):
    class Meta:
        model = Order
        fields = [
            "id",
            "order_code",
            "total_price",
            "provider_payout_amount",
            "paid_out_at",
            "created_at",
        ]
        read_only_fields = fields


class ProviderEarningsSerializer(serializers.Serializer):
    total_owed = serializers.DecimalField(max_digits=12, decimal_places=2)
    unpaid_order_count = serializers.IntegerField()
    history = PayoutHistorySerializer(many=True)


class PendingPayoutSerializer(serializers.Serializer):
    """One row per provider with completed orders the platform has not paid out yet."""

    provider_id = serializers.IntegerField()
    username = serializers.CharField()
    email = serializers.CharField()
    bank_holder_name = serializers.CharField()
    bank_iban = serializers.CharField()
    completed_orders = serializers.IntegerField()
    total_due = serializers.DecimalField(max_digits=12, decimal_places=2)
