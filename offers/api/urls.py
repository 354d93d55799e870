from django.urls import path
from .views import OfferAcceptAPIView, OfferListCreateAPIView

urlpatterns = [
    path("orders/<int:pk>/offers/", OfferListCreateAPIView.as_view(), name="order-offers"),
    path("orders/<int:pk>/offers/accept/", OfferAcceptAPIView.as_view(), name="order-offer-accept"),
]
