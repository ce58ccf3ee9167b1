"""
Views for notification API.

ViewSets:
    NotificationViewSet: Inbox listing plus read-status actions

Endpoints:
    GET /api/v1/notifications/ - List user's notifications (?limit, ?unread_only)
    GET /api/v1/notifications/unread-count/ - Get unread count
    POST /api/v1/notifications/{id}/read/ - Mark single notification as read
    POST /api/v1/notifications/read-all/ - Mark all notifications as read
"""

from __future__ import annotations

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from drf_spectacular.utils import (
    extend_schema,
    OpenApiParameter,
    OpenApiResponse,
)

from core.views import service_error_response
from notifications.models import Notification
from notifications.serializers import (
    MarkAllReadResponseSerializer,
    NotificationListQuerySerializer,
    NotificationSerializer,
    UnreadCountSerializer,
)
from notifications.services import NotificationService


class NotificationViewSet(viewsets.GenericViewSet):
    """
    ViewSet for notification operations.

    Provides:
    - list: GET / - List user's notifications
    - unread_count: GET /unread-count/ - Get badge count
    - read: POST /{id}/read/ - Mark single as read
    - read_all: POST /read-all/ - Mark all as read

    Permissions:
    - All endpoints require authentication
    - Users can only read and mark their own notifications
    """

    permission_classes = [IsAuthenticated]
    serializer_class = NotificationSerializer
    lookup_value_regex = r"\d+"

    def get_queryset(self):
        return Notification.objects.filter(recipient=self.request.user)

    @extend_schema(
        operation_id="list_notifications",
        summary="List notifications",
        description="Newest first. Limit defaults to 50.",
        parameters=[
            OpenApiParameter(
                name="limit",
                type=int,
                location=OpenApiParameter.QUERY,
                description="Maximum number of notifications (1-100)",
                required=False,
            ),
            OpenApiParameter(
                name="unread_only",
                type=bool,
                location=OpenApiParameter.QUERY,
                description="Only return unread notifications",
                required=False,
            ),
        ],
        responses={200: NotificationSerializer(many=True)},
        tags=["Notifications - Inbox"],
    )
    def list(self, request):
        query = NotificationListQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        result = NotificationService.list_for_user(
            request.user,
            limit=query.validated_data["limit"],
            unread_only=query.validated_data["unread_only"],
        )
        return Response(self.get_serializer(result.data, many=True).data)

    @extend_schema(
        operation_id="get_unread_notification_count",
        summary="Get unread notification count",
        description="Get the count of unread notifications for badge display.",
        responses={200: UnreadCountSerializer},
        tags=["Notifications - Inbox"],
    )
    @action(detail=False, methods=["get"], url_path="unread-count")
    def unread_count(self, request):
        """
        Get count of unread notifications.

        Returns:
            {"unread_count": <int>}
        """
        count = NotificationService.unread_count(request.user)
        return Response(UnreadCountSerializer({"unread_count": count}).data)

    @extend_schema(
        operation_id="mark_notification_read",
        summary="Mark notification as read",
        description=(
            "Mark a single notification as read. "
            "This operation is idempotent - already-read notifications return success."
        ),
        request=None,
        responses={
            200: NotificationSerializer,
            403: OpenApiResponse(description="Notification belongs to another user"),
            404: OpenApiResponse(description="Notification not found"),
        },
        tags=["Notifications - Inbox"],
    )
    @action(detail=True, methods=["post"])
    def read(self, request, pk=None):
        notification = Notification.objects.filter(pk=pk).first()
        if notification is None:
            return Response(
                {"detail": "Not found."},
                status=status.HTTP_404_NOT_FOUND,
            )

        result = NotificationService.mark_as_read(notification, request.user)
        if not result.success:
            return service_error_response(result)

        return Response(self.get_serializer(result.data).data)

    @extend_schema(
        operation_id="mark_all_notifications_read",
        summary="Mark all notifications as read",
        description="Mark all unread notifications for the authenticated user as read.",
        request=None,
        responses={200: MarkAllReadResponseSerializer},
        tags=["Notifications - Inbox"],
    )
    @action(detail=False, methods=["post"], url_path="read-all")
    def read_all(self, request):
        """
        Mark all user's notifications as read.

        Returns:
            {"success": true, "updated": <int>}
        """
        result = NotificationService.mark_all_as_read(request.user)
        return Response(MarkAllReadResponseSerializer(result.data).data)
