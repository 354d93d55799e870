from django.urls import path
from .views import (
    AcceptDeliveryAPIView,
    AdminConfirmPaymentAPIView,
    CancelOrderAPIView,
    CompletedOrderCountAPIView,
    ConfirmBankPaymentAPIView,
    DirectOrderCreateAPIView,
    MarkBankPaidAPIView,
    MarkPayoutsPaidAPIView,
    OrderCountAPIView,
    OrderDetailAPIView,
    OrderListCreateAPIView,
    PayByCardAPIView,
    PaymentIntentAPIView,
    PendingPayoutListAPIView,
    ProviderEarningsAPIView,
    QuoteAPIView,
    RequestRevisionAPIView,
)

urlpatterns = [
    path("quote/", QuoteAPIView.as_view(), name="quote"),
    path("orders/", OrderListCreateAPIView.as_view(), name="order-list"),
    path("orders/direct/", DirectOrderCreateAPIView.as_view(), name="order-direct"),
    path("orders/<int:pk>/", OrderDetailAPIView.as_view(), name="order-detail"),
    path("orders/<int:pk>/payment-intent/", PaymentIntentAPIView.as_view(), name="order-payment-intent"),
    path("orders/<int:pk>/pay/card/", PayByCardAPIView.as_view(), name="order-pay-card"),
    path("orders/<int:pk>/pay/bank/", MarkBankPaidAPIView.as_view(), name="order-pay-bank"),
    path("orders/<int:pk>/confirm-payment/", ConfirmBankPaymentAPIView.as_view(), name="order-confirm-payment"),
    path(
        "orders/<int:pk>/admin-confirm-payment/",
        AdminConfirmPaymentAPIView.as_view(),
        name="order-admin-confirm-payment",
    ),
    path("orders/<int:pk>/accept-delivery/", AcceptDeliveryAPIView.as_view(), name="order-accept-delivery"),
    path("orders/<int:pk>/request-revision/", RequestRevisionAPIView.as_view(), name="order-request-revision"),
    path("orders/<int:pk>/cancel/", CancelOrderAPIView.as_view(), name="order-cancel"),
    path("order-count/<int:provider_id>/", OrderCountAPIView.as_view(), name="order-count"),
    path(
        "completed-order-count/<int:provider_id>/",
        CompletedOrderCountAPIView.as_view(),
        name="completed-order-count",
    ),
    path("earnings/", ProviderEarningsAPIView.as_view(), name="provider-earnings"),
    path("payouts/", PendingPayoutListAPIView.as_view(), name="payout-list"),
    path(
        "payouts/<int:provider_id>/mark-paid/",
        MarkPayoutsPaidAPIView.as_view(),
        name="payout-mark-paid",
    ),
]
