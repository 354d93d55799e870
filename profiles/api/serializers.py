"""Profiles API serializers.

Contains serializers for:
- reading a profile,
- partially updating a profile (owner-only),
- listing provider profiles (with their public rate card),
- listing client profiles (with `uploaded_at` alias),
- the direct-payment status of a provider.

Serializers ensure certain string fields never return `null` in responses, but
empty strings instead.
"""

from django.contrib.auth import get_user_model
from rest_framework import serializers

from ..models import Profile

User = get_user_model()

PROVIDER_FIELDS = [
    "offers_voice_over",
    "offers_scriptwriting",
    "offers_video_editing",
    "base_rate_per_word",
    "web_multiplier",
    "broadcast_multiplier",
    "revisions_allowed",
]

BANK_FIELDS = ["bank_name", "bank_holder_name", "bank_iban", "bank_account_number"]


# ------------------------------ helpers ------------------------------

def _apply_user_updates(user, data: dict):
    for attr, val in data.items():
        setattr(user, attr, val if val is not None else "")
    if data:
        user.save(update_fields=list(data))


def _coalesce_fields(data: dict, keys: set):
    for k in keys:
        if data.get(k) is None:
            data[k] = ""


# ------------------------------ serializers ------------------------------

class ProfilePatchSerializer(serializers.ModelSerializer):
    """Partial update of the caller's own profile.

    Service flags, rates, revisions and bank details only apply to providers.
    The direct-payment flags are never writable here.
    """

    first_name = serializers.CharField(
        source="user.first_name", required=False, allow_blank=True, allow_null=True
    )
    last_name = serializers.CharField(
        source="user.last_name", required=False, allow_blank=True, allow_null=True
    )
    email = serializers.EmailField(
        source="user.email", required=False, allow_blank=True, allow_null=True
    )
    username = serializers.CharField(source="user.username", read_only=True)

    class Meta:
        model = Profile
        fields = [
            "user",
            "username",
            "first_name",
            "last_name",
            "file",
            "location",
            "tel",
            "description",
            "type",
            "email",
            *PROVIDER_FIELDS,
            *BANK_FIELDS,
            "direct_payment_enabled",
            "direct_payment_requested",
            "created_at",
        ]
        read_only_fields = [
            "user",
            "username",
            "type",
            "direct_payment_enabled",
            "direct_payment_requested",
            "created_at",
        ]

    def validate(self, attrs):
        provider_only = set(PROVIDER_FIELDS) | set(BANK_FIELDS)
        touched = sorted(provider_only & set(attrs))
        if touched and not self.instance.is_provider:
            raise serializers.ValidationError(
                {field: "Only providers can set this field." for field in touched}
            )
        return attrs

    def update(self, instance: Profile, validated_data):
        """Handle nested user fields and normalize None -> ''."""
        _apply_user_updates(instance.user, validated_data.pop("user", {}))
        for attr, val in validated_data.items():
            setattr(instance, attr, val if val is not None else "")
        instance.save()
        return instance

    _no_null = {"first_name", "last_name", "location", "tel", "description", "file"}

    def to_representation(self, instance: Profile):
        data = super().to_representation(instance)
        _coalesce_fields(data, self._no_null)
        return data


class ProfileDetailSerializer(serializers.ModelSerializer):
    """Read-only detail serializer; bank details are only shown to their owner."""

    username = serializers.CharField(source="user.username", read_only=True)
    first_name = serializers.CharField(
        source="user.first_name", read_only=True, allow_blank=True
    )
    last_name = serializers.CharField(
        source="user.last_name", read_only=True, allow_blank=True
    )
    email = serializers.EmailField(source="user.email", read_only=True)

    class Meta:
        model = Profile
        fields = [
            "user",
            "username",
            "first_name",
            "last_name",
            "file",
            "location",
            "tel",
            "description",
            "type",
            "email",
            *PROVIDER_FIELDS,
            *BANK_FIELDS,
            "direct_payment_enabled",
            "created_at",
        ]
        read_only_fields = fields

    _no_null = {"first_name", "last_name", "location", "tel", "description"}

    def to_representation(self, instance: Profile):
        data = super().to_representation(instance)
        _coalesce_fields(data, self._no_null)
        request = self.context.get("request")
        if not request or request.user.id != instance.user_id:
            for field in BANK_FIELDS:
                data.pop(field, None)
        if not instance.is_provider:
            for field in PROVIDER_FIELDS + ["direct_payment_enabled"]:
                data.pop(field, None)
        return data


class ProviderProfileListSerializer(serializers.ModelSerializer):
    """List serializer for provider profiles (no nulls for selected fields)."""

    username = serializers.CharField(source="user.username", read_only=True)
    first_name = serializers.CharField(
        source="user.first_name", read_only=True, allow_blank=True
    )
    last_name = serializers.CharField(
        source="user.last_name", read_only=True, allow_blank=True
    )

    class Meta:
        model = Profile
        fields = [
            "user",
            "username",
            "first_name",
            "last_name",
            "file",
            "location",
            "description",
            "type",
            *PROVIDER_FIELDS,
        ]

    _no_null = {"first_name", "last_name", "location", "description"}

    def to_representation(self, instance):
        data = super().to_representation(instance)
        _coalesce_fields(data, self._no_null)
        return data


class ClientProfileListSerializer(serializers.ModelSerializer):
    """List serializer for client profiles with `uploaded_at` alias."""

    username = serializers.CharField(source="user.username", read_only=True)
    first_name = serializers.CharField(
        source="user.first_name", read_only=True, allow_blank=True
    )
    last_name = serializers.CharField(
        source="user.last_name", read_only=True, allow_blank=True
    )
    uploaded_at = serializers.DateTimeField(
        source="created_at", read_only=True, format="%Y-%m-%dT%H:%M:%S"
    )

    class Meta:
        model = Profile
        fields = [
            "user",
            "username",
            "first_name",
            "last_name",
            "file",
            "uploaded_at",
            "type",
        ]

    _no_null = {"first_name", "last_name", "type"}

    def to_representation(self, instance):
        data = super().to_representation(instance)
        _coalesce_fields(data, self._no_null)
        return data


class DirectPaymentStatusSerializer(serializers.Serializer):
    status = serializers.CharField()
    completed_order_count = serializers.IntegerField()
    average_rating = serializers.FloatField(allow_null=True)
    direct_payment_requested = serializers.BooleanField()
    direct_payment_enabled = serializers.BooleanField()
