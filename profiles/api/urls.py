from django.urls import path
from .views import (
    ClientProfileListView,
    DirectPaymentRequestView,
    DirectPaymentStatusView,
    ProfileView,
    ProviderProfileListView,
)

urlpatterns = [
    path("profile/<int:pk>/", ProfileView.as_view(), name="profile"),
    path("profile/<int:pk>/direct-payment/", DirectPaymentStatusView.as_view(), name="direct-payment-status"),
    path("direct-payment/request/", DirectPaymentRequestView.as_view(), name="direct-payment-request"),
    path("profiles/providers/", ProviderProfileListView.as_view(), name="provider-profiles"),
    path("profiles/clients/", ClientProfileListView.as_view(), name="client-profiles"),
]
