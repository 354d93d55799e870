"""Change notifications for orders.

`order_changed` is sent after a committed write to an order (status update,
new offer, new delivery, unread-flag change). Receivers get `order_id` and the
list of `changed` field names.
"""

from django.dispatch import Signal

order_changed = Signal()
