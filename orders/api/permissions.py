"""Orders API permissions.

Object-level permission classes deciding who may act on an order. The client
side of an order is its `client_user` or, for orders placed without an
account, any authenticated user with the order's e-mail address.
"""

from rest_framework.permissions import BasePermission


def _is_provider_user(user) -> bool:
    prof = getattr(user, "profile", None)
    return bool(prof and prof.is_provider)


class IsOrderClient(BasePermission):
    """Allows access only to the client of the order."""

    message = "Only the client of this order may do this."

    def has_object_permission(self, request, view, obj):
        return obj.is_client(request.user)


class IsOrderProvider(BasePermission):
    """Allows access only to the provider of the order.

    Requirements:
    - user is authenticated
    - user's profile.type == 'provider'
    - user is the provider of the Order instance
    """

    message = "Only the provider of this order may do this."

    def has_object_permission(self, request, view, obj):
        return obj.is_provider(request.user) and _is_provider_user(request.user)


class IsOrderParticipant(BasePermission):
    """Client, provider or staff may read the order."""

    message = "You are not involved in this order."

    def has_object_permission(self, request, view, obj):
        user = request.user
        if user and user.is_authenticated and user.is_staff:
            return True
        return obj.is_client(user) or obj.is_provider(user)


class IsAdminStaff(BasePermission):
    """Allows access only to authenticated staff (admin) users."""

    message = "Only admin staff users may do this."

    def has_permission(self, request, view):
        return bool(
            request.user and request.user.is_authenticated and request.user.is_staff
        )
