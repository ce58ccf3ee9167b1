"""
Notifications app: the in-app notification inbox.

This app provides:
- Notification model for storing user notifications
- NotificationService.notify for fire-and-forget delivery from other apps
- Celery task that writes the notification row
- REST API for listing notifications and marking them read

Usage:
    from notifications.models import NotificationCategory
    from notifications.services import NotificationService

    NotificationService.notify(
        recipient_id=user.id,
        title="New conversation",
        message="Alice started a conversation with you",
        category=NotificationCategory.SYSTEM,
        related_entity_id=str(conversation.id),
        related_entity_type="conversation",
    )
"""
