"""Deliveries app models.

Every hand-over of work is stored as a new Delivery with the next version
number of its order (1, 2, 3, ...). Version numbers are unique per order.
"""

from django.db import models


class Delivery(models.Model):
    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="deliveries",
    )
    version_number = models.PositiveIntegerField()
    file_url = models.CharField(max_length=500)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["order", "version_number"]
        verbose_name_plural = "deliveries"
        constraints = [
            models.UniqueConstraint(
                fields=["order", "version_number"],
                name="unique_delivery_version_per_order",
            )
        ]

    def __str__(self) -> str:
        return f"Delivery<order {self.order_id} v{self.version_number}>"
