from django.urls import path
from .views import OrderReviewCreateAPIView, ReviewListAPIView

urlpatterns = [
    path("reviews/", ReviewListAPIView.as_view(), name="review-list"),
    path("orders/<int:pk>/review/", OrderReviewCreateAPIView.as_view(), name="order-review"),
]
