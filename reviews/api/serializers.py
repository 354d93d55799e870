"""Reviews API serializers.

Reviews are written once per order by its client and never edited, so there
is only a create input and a read representation.
"""

from rest_framework import serializers

from reviews.models import Review


class ReviewCreateSerializer(serializers.Serializer):
    """Input serializer for reviewing a completed order."""

    rating = serializers.IntegerField(min_value=1, max_value=5, required=True)
    comment = serializers.CharField(allow_blank=True, required=False, default="")


class ReviewOutputSerializer(serializers.ModelSerializer):
    """Read serializer for returning a review."""

    class Meta:
        model = Review
        fields = [
            "id",
            "order",
            "client",
            "provider",
            "rating",
            "comment",
            "created_at",
        ]
