from django.contrib import admin
from .models import Delivery


@admin.register(Delivery)
class DeliveryAdmin(admin.ModelAdmin):
    list_display = ("id", "order", "version_number", "file_url", "created_at")
    list_select_related = ("order",)
    search_fields = ("order__order_code", "file_url")
    ordering = ("-created_at", "-id")
    readonly_fields = ("order", "version_number", "file_url", "created_at")
