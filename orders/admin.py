from django.contrib import admin, messages
from django.utils.html import format_html
from rest_framework.exceptions import APIException

from deliveries.models import Delivery
from offers.models import Offer

from . import lifecycle, payouts
from .context import default_context
from .models import Order

S = Order.Status

STATUS_COLORS = {
    S.AWAITING_OFFER: "#a855f7",
    S.OFFER_MADE: "#6366f1",
    S.AWAITING_PAYMENT: "#f59e0b",
    S.AWAITING_ACTOR_CONFIRMATION: "#f97316",
    S.AWAITING_ADMIN_CONFIRMATION: "#f97316",
    S.IN_PROGRESS: "#0ea5e9",
    S.PENDING_APPROVAL: "#14b8a6",
    S.COMPLETED: "#22c55e",
    S.CANCELLED: "#ef4444",
}


class OfferInline(admin.TabularInline):
    model = Offer
    extra = 0
    can_delete = False
    fields = ("sequence", "title", "price", "agreement", "created_at")
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


class DeliveryInline(admin.TabularInline):
    model = Delivery
    extra = 0
    can_delete = False
    fields = ("version_number", "file_url", "created_at")
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """
    Order overview:
    - list: code, status badge, client, provider, price, created
    - the status only changes through the actions, which run the lifecycle
    - provider payouts are recorded with the "mark payouts paid" action
    """
    list_display = (
        "id",
        "order_code",
        "service_type",
        "status_badge",
        "client_name",
        "client_email",
        "provider_username",
        "total_price",
        "payment_method",
        "payout_status",
        "created_at",
    )
    list_select_related = ("provider",)
    list_filter = ("status", "service_type", "payment_method", "payout_status", "created_at")
    date_hierarchy = "created_at"
    ordering = ("-created_at", "-id")
    search_fields = ("order_code", "client_name", "client_email", "provider__username")
    inlines = [OfferInline, DeliveryInline]
    actions = ("confirm_bank_transfer", "cancel_orders", "mark_payouts_paid")
    readonly_fields = [f.name for f in Order._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    def status_badge(self, obj):
        return format_html(
            '<span style="display:inline-block;padding:2px 8px;border-radius:999px;'
            'font-size:12px;font-weight:600;color:#fff;background:{};">{}</span>',
            STATUS_COLORS.get(obj.status, "#9ca3af"),
            obj.status,
        )
    status_badge.short_description = "status"
    status_badge.admin_order_field = "status"

    def provider_username(self, obj):
        return obj.provider.username if obj.provider_id else ""
    provider_username.short_description = "provider"

    def _run(self, request, queryset, operation, label):
        ctx = default_context()
        done = 0
        for order in queryset:
            try:
                operation(ctx, order.pk, expected_status=order.status)
            except APIException as exc:
                self.message_user(request, f"{order.order_code}: {exc}", messages.ERROR)
            else:
                done += 1
        self.message_user(request, f"{label}: {done} order(s).", messages.SUCCESS)

    @admin.action(description="Confirm bank transfer received")
    def confirm_bank_transfer(self, request, queryset):
        self._run(
            request,
            queryset.filter(status=S.AWAITING_ADMIN_CONFIRMATION),
            lifecycle.admin_confirm_payment,
            "Payment confirmed",
        )

    @admin.action(description="Cancel selected orders")
    def cancel_orders(self, request, queryset):
        self._run(request, queryset, lifecycle.cancel_order, "Cancelled")

    @admin.action(description="Mark provider payouts as paid")
    def mark_payouts_paid(self, request, queryset):
        try:
            count, total = payouts.mark_payouts_paid(
                default_context(), order_ids=queryset.values_list("pk", flat=True)
            )
        except APIException as exc:
            self.message_user(request, str(exc), messages.WARNING)
            return
        self.message_user(request, f"Payouts marked as paid: {count} order(s), {total}.", messages.SUCCESS)
