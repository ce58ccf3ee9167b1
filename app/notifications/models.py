"""
Notification system models.

Models:
    Notification: Individual in-app notification sent to a user

Design Decisions:
    - Notification inherits from BaseModel (timestamps, newest-first ordering)
    - The related entity is a loose (id, type) pair rather than a foreign
      key, so any app can point at its own records
    - Title and message are fully rendered strings, never templates
"""

from __future__ import annotations

from django.conf import settings
from django.db import models

from core.models import BaseModel


class NotificationCategory(models.TextChoices):
    """
    Categories of notifications.

    TASK: Work assigned or updated
    SYSTEM: Platform events (e.g. added to a conversation)
    REMINDER: Time-based nudges
    """

    TASK = "task", "Task"
    SYSTEM = "system", "System"
    REMINDER = "reminder", "Reminder"


class Notification(BaseModel):
    """
    Individual notification record for a user.

    Fields:
        recipient: User receiving the notification (scopes all queries)
        title: Short headline
        message: Body text
        category: One of NotificationCategory
        is_read: Whether recipient has read this notification
        related_entity_id: Id of the record the notification is about
        related_entity_type: Kind of that record (e.g. "conversation")

    Usage:
        unread = Notification.objects.filter(recipient=user, is_read=False)
    """

    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notifications",
        help_text="User receiving this notification",
    )

    title = models.CharField(
        max_length=255,
        help_text="Notification title",
    )

    message = models.TextField(
        help_text="Notification body",
    )

    category = models.CharField(
        max_length=20,
        choices=NotificationCategory.choices,
        default=NotificationCategory.SYSTEM,
        db_index=True,
        help_text="Notification category",
    )

    is_read = models.BooleanField(
        default=False,
        db_index=True,
        help_text="Whether recipient has read this notification",
    )

    related_entity_id = models.CharField(
        max_length=64,
        null=True,
        blank=True,
        help_text="ID of the related record (supports UUID and integer PKs)",
    )

    related_entity_type = models.CharField(
        max_length=50,
        null=True,
        blank=True,
        help_text="Type of the related record (e.g. 'conversation')",
    )

    class Meta:
        db_table = "notifications_notification"
        ordering = ["-created_at", "-id"]
        indexes = [
            # Primary query: user's unread notifications
            models.Index(
                fields=["recipient", "is_read", "-created_at"],
                name="notif_recipient_unread_idx",
            ),
        ]

    def __str__(self) -> str:
        read_status = "read" if self.is_read else "unread"
        return f"Notification({self.category}) -> User {self.recipient_id} [{read_status}]"
