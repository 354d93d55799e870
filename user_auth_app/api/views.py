"""Auth API views.

Implements token-based registration and login. Registration also creates the
user's Profile with the requested `type` (client or provider).
"""

import logging

from django.db import transaction
from rest_framework import status
from rest_framework.authtoken.models import Token
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from profiles.models import Profile
from .serializers import LoginSerializer, RegistrationSerializer

logger = logging.getLogger(__name__)


def _token_payload(user, token, profile_type):
    return {
        "token": token.key,
        "username": user.username,
        "email": user.email,
        "user_id": user.id,
        "type": profile_type,
    }


class RegistrationView(APIView):
    """POST /api/registration/ -> create user, profile (type), return auth token."""

    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request, *args, **kwargs):
        serializer = RegistrationSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        profile_type = serializer.validated_data["type"]
        with transaction.atomic():
            user = serializer.save()
            Profile.objects.get_or_create(user=user, defaults={"type": profile_type})
            token, _ = Token.objects.get_or_create(user=user)
        logger.info("Registered %s user %s", profile_type, user.pk)
        return Response(_token_payload(user, token, profile_type), status=status.HTTP_201_CREATED)


class LoginView(APIView):
    """POST /api/login/ -> validate credentials and return auth token."""

    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request, *args, **kwargs):
        serializer = LoginSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        user = serializer.validated_data["user"]
        token, _ = Token.objects.get_or_create(user=user)
        prof = getattr(user, "profile", None)
        return Response(
            _token_payload(user, token, getattr(prof, "type", "")), status=status.HTTP_200_OK
        )
