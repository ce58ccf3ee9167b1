"""
Serializers for the notification API.

Provides:
- NotificationSerializer: Read-only notification rendering
- NotificationListQuerySerializer: ?limit and ?unread_only parameters
- UnreadCountSerializer / MarkAllReadResponseSerializer: Action responses
"""

from rest_framework import serializers

from notifications.models import Notification
from notifications.services import DEFAULT_LIST_LIMIT


class NotificationSerializer(serializers.ModelSerializer):
    """
    Serializer for Notification model.

    Usage:
        serializer = NotificationSerializer(notification)
        serializer = NotificationSerializer(notifications, many=True)
    """

    class Meta:
        model = Notification
        fields = [
            "id",
            "title",
            "message",
            "category",
            "is_read",
            "related_entity_id",
            "related_entity_type",
            "created_at",
        ]
        read_only_fields = fields


class NotificationListQuerySerializer(serializers.Serializer):
    """Query parameters for the notification list."""

    limit = serializers.IntegerField(
        required=False,
        default=DEFAULT_LIST_LIMIT,
        min_value=1,
        max_value=100,
    )
    unread_only = serializers.BooleanField(required=False, default=False)


class UnreadCountSerializer(serializers.Serializer):
    """
    Response serializer for unread count endpoint.

    Fields:
        unread_count: Integer count of unread notifications
    """

    unread_count = serializers.IntegerField()


class MarkAllReadResponseSerializer(serializers.Serializer):
    """
    Response serializer for mark all read endpoint.

    Fields:
        success: Always true
        updated: Number of notifications marked as read
    """

    success = serializers.BooleanField()
    updated = serializers.IntegerField()
