"""Orders API views.

List and create orders, return only orders that involve the authenticated
user (as client or provider). Every state change is delegated to
`orders.lifecycle`; the views only check who is asking and render the result.
Also provide count endpoints for in-progress and completed orders of a
provider, the price quote preview, the provider's earnings and the staff
payout endpoints.
"""

from django.contrib.auth import get_user_model
from django.db.models import Q
from rest_framework import generics, status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from orders import lifecycle, payouts
from orders.context import default_context
from orders.models import Order
from profiles.api.permissions import IsProviderUser
from .permissions import IsAdminStaff, IsOrderClient, IsOrderParticipant, IsOrderProvider
from .serializers import (
    CardPaymentSerializer,
    DirectOrderCreateSerializer,
    OrderActionSerializer,
    OrderOutputSerializer,
    PendingPayoutSerializer,
    PriceQuoteSerializer,
    ProviderEarningsSerializer,
    QuoteRequestCreateSerializer,
    QuoteSerializer,
)

User = get_user_model()


# ----------------------------- helpers (module-level) -----------------------------

def _user_orders_queryset(base_qs, user):
    """Orders the user takes part in, as client (account or e-mail) or provider."""
    if not user or not user.is_authenticated:
        return Order.objects.none()
    if user.is_staff:
        return base_qs
    involved = Q(client_user=user) | Q(provider=user)
    if user.email:
        involved |= Q(client_email__iexact=user.email)
    return base_qs.filter(involved)


def _provider_or_404(provider_id: int):
    """Return the provider user or (None, Response(404))."""
    try:
        user = User.objects.select_related("profile").get(id=provider_id)
    except User.DoesNotExist:
        return None, Response({"detail": "Provider not found."}, status=status.HTTP_404_NOT_FOUND)
    prof = getattr(user, "profile", None)
    if not prof or not prof.is_provider:
        return None, Response({"detail": "Provider not found."}, status=status.HTTP_404_NOT_FOUND)
    return user, None


def _count_orders(provider_id: int, status_value: str, key: str):
    count = Order.objects.filter(provider_id=provider_id, status=status_value).count()
    return Response({key: count}, status=status.HTTP_200_OK)


def _order_response(order, status_code=status.HTTP_200_OK):
    return Response(OrderOutputSerializer(order).data, status=status_code)


# --------------------------------------- views ---------------------------------------

class OrderListCreateAPIView(generics.ListCreateAPIView):
    """GET: list orders of the authenticated user (optionally ?status=...).
    POST: request a quote from a provider (no account needed).
    """

    queryset = Order.objects.select_related("provider", "client_user")

    def get_permissions(self):
        if self.request.method == "POST":
            return [AllowAny()]
        return [IsAuthenticated()]

    def get_serializer_class(self):
        return OrderOutputSerializer if self.request.method == "GET" else QuoteRequestCreateSerializer

    def get_queryset(self):
        qs = _user_orders_queryset(super().get_queryset(), self.request.user)
        wanted = self.request.query_params.get("status")
        if wanted:
            qs = qs.filter(status=wanted)
        return qs

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = lifecycle.create_quote_request(default_context(), **serializer.validated_data)
        return _order_response(order, status.HTTP_201_CREATED)


class DirectOrderCreateAPIView(generics.GenericAPIView):
    """POST: place a priced voice-over order, paid by card or bank transfer."""

    serializer_class = DirectOrderCreateSerializer
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order, quote = lifecycle.create_direct_order(default_context(), **serializer.validated_data)
        data = OrderOutputSerializer(order).data
        data["price_message"] = quote.message
        return Response(data, status=status.HTTP_201_CREATED)


class QuoteAPIView(generics.GenericAPIView):
    """POST: preview the direct-order price, optionally opening a card payment."""

    serializer_class = QuoteSerializer
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        params = dict(serializer.validated_data)
        quote, intent = lifecycle.quote_direct_order(
            default_context(),
            with_payment_intent=params.pop("create_payment_intent"),
            **params,
        )
        data = PriceQuoteSerializer(quote).data
        if intent is not None:
            data["payment_intent_id"] = intent.intent_id
            data["client_secret"] = intent.client_secret
        return Response(data, status=status.HTTP_200_OK)


class OrderDetailAPIView(generics.RetrieveAPIView):
    queryset = Order.objects.select_related("provider", "client_user")
    serializer_class = OrderOutputSerializer
    permission_classes = [IsAuthenticated, IsOrderParticipant]


class OrderActionAPIView(generics.GenericAPIView):
    """Base view for POST /api/orders/{pk}/<action>/.

    Subclasses name the lifecycle function in `operation` and restrict who may
    call it with `permission_classes`.
    """

    queryset = Order.objects.select_related("provider", "provider__profile")
    serializer_class = OrderActionSerializer
    operation = None

    def post(self, request, pk):
        order = self.get_object()
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        func = getattr(lifecycle, self.operation)
        result = func(default_context(), order.pk, **serializer.validated_data)
        return _order_response(result)


class PayByCardAPIView(OrderActionAPIView):
    permission_classes = [IsAuthenticated, IsOrderClient]
    serializer_class = CardPaymentSerializer
    operation = "pay_by_card"


class MarkBankPaidAPIView(OrderActionAPIView):
    permission_classes = [IsAuthenticated, IsOrderClient]
    operation = "mark_bank_paid"


class ConfirmBankPaymentAPIView(OrderActionAPIView):
    permission_classes = [IsAuthenticated, IsOrderProvider]
    operation = "confirm_bank_payment"


class AdminConfirmPaymentAPIView(OrderActionAPIView):
    permission_classes = [IsAuthenticated, IsAdminStaff]
    operation = "admin_confirm_payment"


class AcceptDeliveryAPIView(OrderActionAPIView):
    permission_classes = [IsAuthenticated, IsOrderClient]
    operation = "accept_delivery"


class RequestRevisionAPIView(OrderActionAPIView):
    permission_classes = [IsAuthenticated, IsOrderClient]
    operation = "request_revision"


class CancelOrderAPIView(OrderActionAPIView):
    permission_classes = [IsAuthenticated, IsAdminStaff]
    operation = "cancel_order"


class PaymentIntentAPIView(generics.GenericAPIView):
    """POST: open a card payment for the order's total price."""

    queryset = Order.objects.all()
    permission_classes = [IsAuthenticated, IsOrderClient]

    def post(self, request, pk):
        order = self.get_object()
        intent = lifecycle.create_payment_intent(default_context(), order.pk)
        return Response(
            {"payment_intent_id": intent.intent_id, "client_secret": intent.client_secret},
            status=status.HTTP_200_OK,
        )


class OrderCountAPIView(APIView):
    """GET /api/order-count/{provider_id}/ -> {"order_count": <int>}.
    Returns the number of in-progress orders for the given provider.
    """

    permission_classes = [IsAuthenticated]

    def get(self, request, provider_id: int):
        user, err = _provider_or_404(provider_id)
        if err:
            return err
        return _count_orders(user.id, Order.Status.IN_PROGRESS, "order_count")


class CompletedOrderCountAPIView(APIView):
    """GET /api/completed-order-count/{provider_id}/ -> {"completed_order_count": <int>}."""

    permission_classes = [IsAuthenticated]

    def get(self, request, provider_id: int):
        user, err = _provider_or_404(provider_id)
        if err:
            return err
        return _count_orders(user.id, Order.Status.COMPLETED, "completed_order_count")


class ProviderEarningsAPIView(APIView):
    """GET /api/earnings/ -> what the platform owes the caller and past payouts."""

    permission_classes = [IsAuthenticated, IsProviderUser]

    def get(self, request):
        data = ProviderEarningsSerializer(payouts.provider_earnings(request.user)).data
        return Response(data, status=status.HTTP_200_OK)


class PendingPayoutListAPIView(APIView):
    """GET /api/payouts/ -> unpaid payouts per provider (staff only)."""

    permission_classes = [IsAuthenticated, IsAdminStaff]

    def get(self, request):
        data = PendingPayoutSerializer(payouts.pending_payouts(), many=True).data
        return Response(data, status=status.HTTP_200_OK)


class MarkPayoutsPaidAPIView(APIView):
    """POST /api/payouts/{provider_id}/mark-paid/ -> record that the provider was paid."""

    permission_classes = [IsAuthenticated, IsAdminStaff]

    def post(self, request, provider_id: int):
        user, err = _provider_or_404(provider_id)
        if err:
            return err
        count, total = payouts.mark_payouts_paid(default_context(), provider_id=user.id)
        return Response(
            {"provider_id": user.id, "orders_marked": count, "total_paid": f"{total:.2f}"},
            status=status.HTTP_200_OK,
        )
