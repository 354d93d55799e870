from django.contrib import admin
from django.contrib.auth import get_user_model
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin

User = get_user_model()

# Replace the stock registration so the list shows the profile type.
if admin.site.is_registered(User):
    admin.site.unregister(User)


@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    """
    User list with id, profile type (client/provider) and admin flags.
    """
    list_display = (
        "id",
        "username",
        "email",
        "profile_type_display",
        "is_staff",
        "is_active",
        "date_joined",
        "last_login",
    )
    list_select_related = ("profile",)
    ordering = ("-date_joined", "-id")
    search_fields = ("username", "email", "profile__type")
    list_filter = ("is_staff", "is_active", "profile__type")

    def profile_type_display(self, obj):
        prof = getattr(obj, "profile", None)
        return getattr(prof, "type", "") or ""
    profile_type_display.short_description = "profile type"
    profile_type_display.admin_order_field = "profile__type"
