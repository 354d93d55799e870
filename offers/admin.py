from django.contrib import admin
from .models import Offer


@admin.register(Offer)
class OfferAdmin(admin.ModelAdmin):
    """
    Read-only view of the offer log; offers are never edited after creation.
    """
    list_display = ("id", "order_code", "sequence", "title", "price", "created_at")
    list_select_related = ("order",)
    search_fields = ("title", "agreement", "order__order_code", "order__provider__username")
    date_hierarchy = "created_at"
    ordering = ("-created_at", "-id")
    readonly_fields = ("order", "sequence", "title", "agreement", "price", "created_at")

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    def order_code(self, obj):
        return obj.order.order_code
    order_code.short_description = "order"
    order_code.admin_order_field = "order__order_code"
