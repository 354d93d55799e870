"""Reviews API views.

List reviews (auth required) with filtering by provider_id and client_id and
ordering by created_at or rating. Reviews are created through the order they
belong to, once the order is completed.
"""

from rest_framework import generics, status
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from orders import lifecycle
from orders.api.mixins import OrderScopedMixin
from orders.api.permissions import IsOrderClient
from orders.context import default_context
from orders.exceptions import AlreadyReviewed
from reviews.models import Review
from .serializers import ReviewCreateSerializer, ReviewOutputSerializer


# ----------------------------- helpers (module-level) -----------------------------

def _apply_filters_and_ordering(qs, params):
    """Filter by ids and apply ordering; raises ValidationError on bad input."""
    for param, field in (("provider_id", "provider_id"), ("client_id", "client_id")):
        v = params.get(param)
        if v:
            if not v.isdigit():
                raise ValidationError({param: "Must be an integer."})
            qs = qs.filter(**{field: int(v)})

    ordering = params.get("ordering")
    if ordering:
        allowed = {"created_at", "-created_at", "rating", "-rating"}
        if ordering not in allowed:
            raise ValidationError(
                {"ordering": "Allowed values: created_at, -created_at, rating, -rating."}
            )
        qs = qs.order_by(ordering, "-id")
    else:
        qs = qs.order_by("-created_at", "-id")

    return qs


# --------------------------------------- views ---------------------------------------

class ReviewListAPIView(generics.ListAPIView):
    """GET: list reviews (filter/order)."""

    queryset = Review.objects.all().select_related("provider", "client")
    serializer_class = ReviewOutputSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        return _apply_filters_and_ordering(super().get_queryset(), self.request.query_params)


class OrderReviewCreateAPIView(OrderScopedMixin, generics.GenericAPIView):
    """POST: review a completed order (client only, once).

    A second attempt answers 409 with the review that already exists.
    """

    serializer_class = ReviewCreateSerializer
    permission_classes = [IsAuthenticated, IsOrderClient]

    def post(self, request, pk):
        order = self.get_order()
        ser = self.get_serializer(data=request.data)
        ser.is_valid(raise_exception=True)
        try:
            review = lifecycle.submit_review(
                default_context(), order.pk, client=request.user, **ser.validated_data
            )
        except AlreadyReviewed as exc:
            return Response(
                {"detail": exc.detail, "review": ReviewOutputSerializer(exc.review).data},
                status=exc.status_code,
            )
        return Response(ReviewOutputSerializer(review).data, status=status.HTTP_201_CREATED)
