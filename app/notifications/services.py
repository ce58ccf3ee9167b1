"""
Notification service layer.

This module provides the business logic for the notification inbox.

Services:
    NotificationService: Notification creation, listing and read status

Design Principles:
    - Services are stateless (use class methods)
    - Expected failures return ServiceResult.failure()
    - notify() is fire-and-forget: it schedules delivery after the current
      transaction commits and never raises into the caller
    - The Celery task does the actual insert via create_notification()

Usage:
    from notifications.services import NotificationService

    # From another app's service, inside its transaction
    NotificationService.notify(
        recipient_id=member.id,
        title="Added to Launch Team",
        message='Alice added you to "Launch Team"',
        category=NotificationCategory.SYSTEM,
    )

    # Inbox
    result = NotificationService.list_for_user(user, unread_only=True)
    result = NotificationService.mark_as_read(notification, user)
    result = NotificationService.mark_all_as_read(user)
"""

from __future__ import annotations

import logging

from django.db import transaction

from authentication.models import User
from core.services import BaseService, ErrorCode, ServiceResult

from notifications.models import Notification, NotificationCategory

logger = logging.getLogger(__name__)

DEFAULT_LIST_LIMIT = 50


class NotificationService(BaseService):
    """
    Service for notification operations.

    Methods:
        notify: Schedule a notification for delivery (fire-and-forget)
        create_notification: Insert a notification row
        list_for_user: Newest-first notifications for a user
        unread_count: Number of unread notifications
        mark_as_read: Mark a single notification as read
        mark_all_as_read: Mark all user's unread notifications as read
    """

    @classmethod
    def notify(
        cls,
        recipient_id: int,
        title: str,
        message: str,
        category: str = NotificationCategory.SYSTEM,
        related_entity_id: str | None = None,
        related_entity_type: str | None = None,
    ) -> None:
        """
        Schedule a notification for delivery.

        The deliver_notification task is enqueued once the surrounding
        transaction commits (immediately when there is none), so a rolled
        back operation never notifies. Enqueue failures are logged.
        """
        payload = {
            "recipient_id": recipient_id,
            "title": title,
            "message": message,
            "category": str(category),
            "related_entity_id": related_entity_id,
            "related_entity_type": related_entity_type,
        }

        def enqueue() -> None:
            from notifications.tasks import deliver_notification

            try:
                deliver_notification.delay(**payload)
            except Exception as exc:
                cls.handle_exception(
                    exc,
                    f"Failed to enqueue notification for user {recipient_id}",
                    log_level=logging.WARNING,
                )

        transaction.on_commit(enqueue)

    @classmethod
    def create_notification(
        cls,
        recipient_id: int,
        title: str,
        message: str,
        category: str = NotificationCategory.SYSTEM,
        related_entity_id: str | None = None,
        related_entity_type: str | None = None,
    ) -> ServiceResult[Notification]:
        """
        Create a notification row.

        Returns:
            ServiceResult with created Notification

        Error codes:
            VALIDATION_ERROR: Blank title or message
            INVALID_ARGUMENT: Unknown category
            NOT_FOUND: Recipient does not exist
        """
        validation = cls.validate_required(title=title, message=message)
        if validation is not None:
            return validation

        if category not in NotificationCategory.values:
            return ServiceResult.failure(
                f"Unknown notification category: {category}",
                error_code=ErrorCode.INVALID_ARGUMENT,
            )

        recipient = User.objects.filter(pk=recipient_id).first()
        if recipient is None:
            return ServiceResult.failure(
                "Recipient not found",
                error_code=ErrorCode.NOT_FOUND,
            )

        notification = Notification.objects.create(
            recipient=recipient,
            title=title,
            message=message,
            category=category,
            related_entity_id=related_entity_id,
            related_entity_type=related_entity_type,
        )

        cls.get_logger().info(
            f"Created {category} notification {notification.id} for user {recipient.id}"
        )

        return ServiceResult.success(notification)

    @classmethod
    def list_for_user(
        cls,
        user: User,
        limit: int = DEFAULT_LIST_LIMIT,
        unread_only: bool = False,
    ) -> ServiceResult[list[Notification]]:
        """List a user's notifications, newest first."""
        queryset = Notification.objects.filter(recipient=user)
        if unread_only:
            queryset = queryset.filter(is_read=False)

        return ServiceResult.success(list(queryset.order_by("-created_at", "-id")[:limit]))

    @classmethod
    def unread_count(cls, user: User) -> int:
        return Notification.objects.filter(recipient=user, is_read=False).count()

    @classmethod
    def mark_as_read(
        cls,
        notification: Notification,
        user: User,
    ) -> ServiceResult[Notification]:
        """
        Mark a single notification as read.

        Validates that the user owns the notification before marking.
        Operation is idempotent - marking an already-read notification succeeds.

        Error codes:
            NOT_AUTHORIZED: User doesn't own the notification
        """
        if notification.recipient_id != user.id:
            cls.get_logger().warning(
                f"User {user.id} attempted to mark notification {notification.id} "
                f"owned by user {notification.recipient_id}"
            )
            return ServiceResult.failure(
                "Cannot mark notification you don't own",
                error_code=ErrorCode.NOT_AUTHORIZED,
            )

        if not notification.is_read:
            notification.is_read = True
            notification.save(update_fields=["is_read", "updated_at"])
            cls.get_logger().debug(f"Marked notification {notification.id} as read")

        return ServiceResult.success(notification)

    @classmethod
    def mark_all_as_read(cls, user: User) -> ServiceResult[dict]:
        """
        Mark all user's unread notifications as read in one update.

        Returns:
            ServiceResult with {"success": True, "updated": <count>}
        """
        count = Notification.objects.filter(
            recipient=user,
            is_read=False,
        ).update(is_read=True)

        cls.get_logger().info(
            f"Marked {count} notifications as read for user {user.id}"
        )

        return ServiceResult.success({"success": True, "updated": count})
