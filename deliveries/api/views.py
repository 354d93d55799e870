"""Deliveries API views.

The provider hands in work as numbered versions; every POST creates the next
version and puts the order into review by the client.
"""

from rest_framework import generics, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from deliveries.models import Delivery
from orders import lifecycle
from orders.api.mixins import OrderScopedMixin
from orders.api.permissions import IsOrderParticipant, IsOrderProvider
from orders.context import default_context
from .serializers import DeliveryCreateSerializer, DeliverySerializer


class DeliveryListCreateAPIView(OrderScopedMixin, generics.ListCreateAPIView):
    """GET: deliveries of the order (participants); POST: new version (provider only)."""

    pagination_class = None

    def get_permissions(self):
        if self.request.method == "POST":
            return [IsAuthenticated(), IsOrderProvider()]
        return [IsAuthenticated(), IsOrderParticipant()]

    def get_serializer_class(self):
        return DeliverySerializer if self.request.method == "GET" else DeliveryCreateSerializer

    def get_queryset(self):
        return Delivery.objects.filter(order=self.get_order()).order_by("version_number")

    def create(self, request, *args, **kwargs):
        order = self.get_order()
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        delivery = lifecycle.deliver(default_context(), order.pk, **serializer.validated_data)
        return Response(DeliverySerializer(delivery).data, status=status.HTTP_201_CREATED)
