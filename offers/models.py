"""Offers app models.

Defines the Offer model. Offers form an append-only log per order: a provider
revises a quote by adding a new offer, never by editing one. The per-order
`sequence` orders the log and is unique for each order.
"""

from django.core.validators import MinValueValidator
from django.db import models


class Offer(models.Model):
    """A priced proposal made by the provider for a quote request."""

    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="offers",
    )
    sequence = models.PositiveIntegerField()
    title = models.CharField(max_length=200)
    agreement = models.TextField(blank=True, default="")
    price = models.DecimalField(
        max_digits=10, decimal_places=2, validators=[MinValueValidator(0)]
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "offers"
        ordering = ["order", "sequence"]
        constraints = [
            models.UniqueConstraint(
                fields=["order", "sequence"], name="unique_offer_sequence_per_order"
            )
        ]

    def __str__(self):
        return f"{self.title} (#{self.sequence} for order #{self.order_id})"
