"""Chat app models.

Messages exchanged between the client and the provider of an order. The
unread flags and the reminder due time live on the Order itself.
"""

from django.db import models


class Message(models.Model):
    class SenderRole(models.TextChoices):
        CLIENT = "client", "client"
        PROVIDER = "provider", "provider"

    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="messages",
    )
    sender_role = models.CharField(max_length=10, choices=SenderRole.choices)
    body = models.TextField()

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("created_at", "id")

    def __str__(self) -> str:
        return f"Message<{self.id} order {self.order_id} from {self.sender_role}>"
