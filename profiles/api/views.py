"""Profiles API views.

Provides endpoints to retrieve a single profile (by user id) and to update the
owner's own profile. Also exposes list endpoints for provider and client
profiles and the provider's direct-payment status and request.
"""

from django.shortcuts import get_object_or_404
from rest_framework import generics, status
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .. import eligibility
from ..models import Profile
from .permissions import IsProfileOwner, IsProviderUser
from .serializers import (
    ClientProfileListSerializer,
    DirectPaymentStatusSerializer,
    ProfileDetailSerializer,
    ProfilePatchSerializer,
    ProviderProfileListSerializer,
)


def _direct_payment_payload(profile):
    completed, avg = eligibility.provider_aggregates(profile.user)
    state = eligibility.evaluate(
        completed,
        avg,
        requested=profile.direct_payment_requested,
        enabled=profile.direct_payment_enabled,
    )
    return DirectPaymentStatusSerializer(
        {
            "status": state,
            "completed_order_count": completed,
            "average_rating": avg,
            "direct_payment_requested": profile.direct_payment_requested,
            "direct_payment_enabled": profile.direct_payment_enabled,
        }
    ).data


class ProfileView(generics.RetrieveUpdateAPIView):
    """
    API endpoint for retrieving or partially updating a single profile.

    - GET `/api/profile/{pk}/` returns the profile for the given user id (`pk`).
    - PATCH `/api/profile/{pk}/` updates only the fields provided and is restricted
      to the owner of the profile (the authenticated user with id `pk`).
    """

    queryset = Profile.objects.select_related("user")
    permission_classes = [IsAuthenticated]
    http_method_names = ["get", "patch", "head", "options"]

    def get_permissions(self):
        """Require ownership for PATCH; otherwise authentication only."""
        if self.request.method == "PATCH":
            return [IsAuthenticated(), IsProfileOwner()]
        return [IsAuthenticated()]

    def get_serializer_class(self):
        if self.request.method == "PATCH":
            return ProfilePatchSerializer
        return ProfileDetailSerializer

    def get_object(self):
        """Return the profile by user id; PATCH is only allowed on one's own profile."""
        user_id = int(self.kwargs["pk"])
        if self.request.method == "PATCH" and self.request.user.id != user_id:
            raise PermissionDenied("You are only allowed to update your own profile.")
        obj = get_object_or_404(self.queryset, user_id=user_id)
        self.check_object_permissions(self.request, obj)
        return obj


class ProviderProfileListView(generics.ListAPIView):
    """GET `/api/profiles/providers/`; `?service=voice_over` limits to one service."""

    serializer_class = ProviderProfileListSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        qs = Profile.objects.select_related("user").filter(type=Profile.Type.PROVIDER)
        service = self.request.query_params.get("service")
        if service in ("voice_over", "scriptwriting", "video_editing"):
            qs = qs.filter(**{f"offers_{service}": True})
        return qs.order_by("user_id")


class ClientProfileListView(generics.ListAPIView):
    """GET `/api/profiles/clients/` returns profiles with `type="client"`."""

    serializer_class = ClientProfileListSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        return Profile.objects.select_related("user").filter(type=Profile.Type.CLIENT).order_by("user_id")


class DirectPaymentStatusView(APIView):
    """GET `/api/profile/{pk}/direct-payment/` -> eligibility state of the provider."""

    permission_classes = [IsAuthenticated]

    def get(self, request, pk: int):
        profile = get_object_or_404(
            Profile.objects.select_related("user"), user_id=pk, type=Profile.Type.PROVIDER
        )
        return Response(_direct_payment_payload(profile), status=status.HTTP_200_OK)


class DirectPaymentRequestView(APIView):
    """POST `/api/direct-payment/request/` -> the caller asks for direct payment."""

    permission_classes = [IsAuthenticated, IsProviderUser]

    def post(self, request):
        profile = request.user.profile
        eligibility.request_direct_payment(profile)
        return Response(_direct_payment_payload(profile), status=status.HTTP_200_OK)
