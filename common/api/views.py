from django.db.models import Avg
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework import status

from orders.models import Order
from profiles.models import Profile
from reviews.models import Review


class BaseInfoAPIView(APIView):
    """
    GET /api/base-info/

    Returns platform-wide aggregate statistics:
    - review_count: total number of reviews
    - average_rating: average rating across all reviews (rounded to 1 decimal)
    - provider_profile_count: number of profiles with type="provider"
    - completed_order_count: number of completed orders

    Authentication: none
    Permissions: AllowAny
    """

    authentication_classes = []
    permission_classes = [AllowAny]

    def get(self, request):
        """If there are no reviews, average_rating is 0.0 (not null)."""
        avg = Review.objects.aggregate(avg=Avg("rating"))["avg"] or 0.0
        data = {
            "review_count": Review.objects.count(),
            "average_rating": round(float(avg), 1),
            "provider_profile_count": Profile.objects.filter(type=Profile.Type.PROVIDER).count(),
            "completed_order_count": Order.objects.filter(status=Order.Status.COMPLETED).count(),
        }
        return Response(data, status=status.HTTP_200_OK)
