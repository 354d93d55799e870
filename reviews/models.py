"""Reviews app models.

Defines the Review model. A client can leave at most one review per order,
and only once the order is completed. Ratings are constrained between 1 and 5.
"""

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


class Review(models.Model):
    """Represents a client's review of the provider of one order."""

    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="reviews",
    )
    client = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="reviews_written",
    )
    provider = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="reviews_received",
    )

    rating = models.IntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(5)]
    )
    comment = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["order", "client"],
                name="unique_review_per_order_and_client",
            ),
            models.CheckConstraint(
                condition=models.Q(rating__gte=1, rating__lte=5),
                name="review_rating_range",
            ),
        ]
        ordering = ("-created_at", "-id")

    def __str__(self) -> str:
        """Readable representation for admin and debugging."""
        return (
            f"Review<{self.id} order {self.order_id} {self.client_id}->{self.provider_id} "
            f"{self.rating}>"
        )
