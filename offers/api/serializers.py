"""Offers API serializers."""

from decimal import Decimal

from rest_framework import serializers

from offers.models import Offer
from orders.api.serializers import OrderActionSerializer


class OfferSerializer(serializers.ModelSerializer):
    """Read serializer for one entry of an order's offer log."""

    class Meta:
        model = Offer
        fields = ["id", "order", "sequence", "title", "agreement", "price", "created_at"]
        read_only_fields = fields


class OfferCreateSerializer(OrderActionSerializer):
    title = serializers.CharField(max_length=200)
    price = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=Decimal("0.01")
    )
    agreement = serializers.CharField(required=False, allow_blank=True, default="")


class OfferAcceptSerializer(OrderActionSerializer):
    """`offer_id` is the offer the client looked at; it must still be the latest."""

    offer_id = serializers.IntegerField(required=False)
