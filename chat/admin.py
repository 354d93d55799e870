from django.contrib import admin
from .models import Message


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    list_display = ("id", "order", "sender_role", "created_at")
    list_select_related = ("order",)
    list_filter = ("sender_role", "created_at")
    search_fields = ("order__order_code", "body")
    ordering = ("-created_at", "-id")
