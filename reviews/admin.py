from django.contrib import admin
from .models import Review


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ("id", "order", "client", "provider", "rating", "created_at")
    list_select_related = ("order", "client", "provider")
    list_filter = ("rating", "created_at")
    search_fields = ("order__order_code", "client__username", "provider__username", "comment")
    ordering = ("-created_at", "-id")
    readonly_fields = ("order", "client", "provider", "rating", "comment", "created_at")
