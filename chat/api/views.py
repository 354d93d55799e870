"""Chat API views.

Messages of an order, visible to its client and provider. The sender role is
taken from who is asking, never from the payload.
"""

from rest_framework import generics, status
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from chat import tracker
from chat.models import Message
from orders.api.mixins import OrderScopedMixin
from orders.api.permissions import IsOrderParticipant
from orders.api.serializers import OrderOutputSerializer
from orders.context import default_context
from .serializers import MessageSerializer


def _role_of(order, user):
    if order.is_provider(user):
        return Message.SenderRole.PROVIDER
    if order.is_client(user):
        return Message.SenderRole.CLIENT
    raise PermissionDenied("Only the client or the provider of this order can chat.")


class MessageListCreateAPIView(OrderScopedMixin, generics.ListCreateAPIView):
    serializer_class = MessageSerializer
    permission_classes = [IsAuthenticated, IsOrderParticipant]
    pagination_class = None

    def get_queryset(self):
        return Message.objects.filter(order=self.get_order())

    def create(self, request, *args, **kwargs):
        order = self.get_order()
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        message = tracker.record_message(
            default_context(),
            order.pk,
            sender_role=_role_of(order, request.user),
            body=serializer.validated_data["body"],
        )
        return Response(MessageSerializer(message).data, status=status.HTTP_201_CREATED)


class MarkReadAPIView(OrderScopedMixin, generics.GenericAPIView):
    """POST: the caller has read the conversation; clears their unread flag."""

    permission_classes = [IsAuthenticated, IsOrderParticipant]

    def post(self, request, pk):
        order = self.get_order()
        order = tracker.mark_read(default_context(), order.pk, _role_of(order, request.user))
        return Response(OrderOutputSerializer(order).data, status=status.HTTP_200_OK)
