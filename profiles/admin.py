import logging

from django.contrib import admin, messages

from .models import Profile

logger = logging.getLogger(__name__)


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    """
    Profile list with the provider's direct-payment flags and approve/decline actions.
    """
    list_display = (
        "id",
        "user_id_display",
        "user",
        "type",
        "base_rate_per_word",
        "direct_payment_requested",
        "direct_payment_enabled",
        "created_at",
    )
    list_select_related = ("user",)
    search_fields = ("user__username", "user__email", "type")
    list_filter = ("type", "direct_payment_requested", "direct_payment_enabled", "created_at")
    ordering = ("-created_at", "-id")
    autocomplete_fields = ("user",)
    readonly_fields = ("created_at",)
    actions = ("approve_direct_payment", "decline_direct_payment")

    def user_id_display(self, obj):
        return obj.user_id
    user_id_display.short_description = "user id"
    user_id_display.admin_order_field = "user__id"

    @admin.action(description="Approve direct payment for selected providers")
    def approve_direct_payment(self, request, queryset):
        updated = queryset.filter(type=Profile.Type.PROVIDER).update(
            direct_payment_enabled=True, direct_payment_requested=False
        )
        logger.info("Direct payment approved for %s provider(s) by %s", updated, request.user)
        self.message_user(request, f"Direct payment enabled for {updated} provider(s).", messages.SUCCESS)

    @admin.action(description="Decline direct-payment request")
    def decline_direct_payment(self, request, queryset):
        updated = queryset.filter(direct_payment_requested=True).update(direct_payment_requested=False)
        logger.info("Direct payment declined for %s provider(s) by %s", updated, request.user)
        self.message_user(request, f"Declined {updated} request(s).", messages.WARNING)
