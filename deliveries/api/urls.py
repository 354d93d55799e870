from django.urls import path
from .views import DeliveryListCreateAPIView

urlpatterns = [
    path("orders/<int:pk>/deliveries/", DeliveryListCreateAPIView.as_view(), name="order-deliveries"),
]
