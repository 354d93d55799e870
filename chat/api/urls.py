from django.urls import path
from .views import MarkReadAPIView, MessageListCreateAPIView

urlpatterns = [
    path("orders/<int:pk>/messages/", MessageListCreateAPIView.as_view(), name="order-messages"),
    path("orders/<int:pk>/mark-read/", MarkReadAPIView.as_view(), name="order-mark-read"),
]
