"""Shared pieces for endpoints nested under /api/orders/{pk}/."""

from django.shortcuts import get_object_or_404

from orders.models import Order


class OrderScopedMixin:
    """Resolve the order from the URL and run the view's permissions against it.

    Permission classes of the nested views are object permissions on the
    Order, not on the nested rows.
    """

    def get_order(self):
        if getattr(self, "_order", None) is None:
            order = get_object_or_404(
                Order.objects.select_related("provider", "provider__profile"),
                pk=self.kwargs["pk"],
            )
            self.check_object_permissions(self.request, order)
            self._order = order
        return self._order
