"""
Authentication views.

This module provides API views for:
- The current user (read and profile update)
- The user directory (conversation partner picker)
- Presence reporting

Token issuance (login/refresh) is handled by SimpleJWT views wired in urls.py.
"""

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from authentication.models import Profile
from authentication.serializers import (
    DirectoryUserSerializer,
    PresenceUpdateSerializer,
    ProfileUpdateSerializer,
    UserSerializer,
)
from authentication.services import PresenceService, UserDirectoryService
from core.views import service_error_response


class CurrentUserView(APIView):
    """
    API view for the authenticated user.

    GET: Current user with profile display fields
    PATCH: Update first/last name, avatar URL or timezone

    URL: /api/v1/auth/me/
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Get current user",
        tags=["Auth - User"],
        responses={200: UserSerializer},
    )
    def get(self, request):
        return Response(UserSerializer(request.user).data)

    @extend_schema(
        summary="Update current user's profile",
        tags=["Auth - User"],
        request=ProfileUpdateSerializer,
        responses={200: UserSerializer},
    )
    def patch(self, request):
        profile, _ = Profile.objects.get_or_create(user=request.user)
        serializer = ProfileUpdateSerializer(profile, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()

        request.user.refresh_from_db()
        return Response(UserSerializer(request.user).data)


class UserDirectoryView(APIView):
    """
    List users the caller can start a conversation with.

    URL: /api/v1/auth/users/
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="List users",
        description="Active users other than the caller that have a profile name.",
        tags=["Auth - User"],
        responses={200: DirectoryUserSerializer(many=True)},
    )
    def get(self, request):
        result = UserDirectoryService.list_users(request.user)
        if not result.success:
            return service_error_response(result)
        return Response(DirectoryUserSerializer(result.data, many=True).data)


class PresenceView(APIView):
    """
    Report the caller's online status.

    URL: /api/v1/auth/presence/
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Update presence",
        tags=["Auth - User"],
        request=PresenceUpdateSerializer,
        responses={200: OpenApiResponse(description='{"success": true}')},
    )
    def post(self, request):
        serializer = PresenceUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = PresenceService.update_presence(
            request.user,
            is_online=serializer.validated_data["is_online"],
        )
        if not result.success:
            return service_error_response(result)
        return Response(result.data)
