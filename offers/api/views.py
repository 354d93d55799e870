"""Offers API views.

GET lists the offer log of an order (oldest first); POST lets the order's
provider add a new offer, which replaces the previous one as "latest". The
client accepts the latest offer on a dedicated endpoint.
"""

from rest_framework import generics, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from orders import lifecycle
from orders.api.mixins import OrderScopedMixin
from orders.api.permissions import IsOrderClient, IsOrderParticipant, IsOrderProvider
from orders.api.serializers import OrderOutputSerializer
from orders.context import default_context
from .serializers import OfferAcceptSerializer, OfferCreateSerializer, OfferSerializer


class OfferListCreateAPIView(OrderScopedMixin, generics.ListCreateAPIView):
    """GET: offers of the order (participants); POST: new offer (provider only)."""

    pagination_class = None

    def get_permissions(self):
        if self.request.method == "POST":
            return [IsAuthenticated(), IsOrderProvider()]
        return [IsAuthenticated(), IsOrderParticipant()]

    def get_serializer_class(self):
        if self.request.method == "GET":
            return OfferSerializer
        return OfferCreateSerializer

    def get_queryset(self):
        return self.get_order().offers.order_by("sequence")

    def create(self, request, *args, **kwargs):
        order = self.get_order()
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        offer = lifecycle.send_offer(default_context(), order.pk, **serializer.validated_data)
        return Response(OfferSerializer(offer).data, status=status.HTTP_201_CREATED)


class OfferAcceptAPIView(OrderScopedMixin, generics.GenericAPIView):
    """POST: accept the latest offer; its price becomes the order's total."""

    serializer_class = OfferAcceptSerializer
    permission_classes = [IsAuthenticated, IsOrderClient]

    def post(self, request, pk):
        order = self.get_order()
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = lifecycle.accept_offer(default_context(), order.pk, **serializer.validated_data)
        return Response(OrderOutputSerializer(order).data, status=status.HTTP_200_OK)
