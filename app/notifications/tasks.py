"""
Celery tasks for notification delivery.

Tasks:
    deliver_notification: Write an in-app notification row

Design:
    - Enqueued by NotificationService.notify() after the caller commits
    - Receives plain values (ids, strings) so it serializes as JSON
    - Validation failures (unknown recipient, bad category) are logged and
      not retried; database errors are retried with backoff

Usage:
    from notifications.tasks import deliver_notification

    deliver_notification.delay(
        recipient_id=user.id,
        title="Reminder",
        message="Standup in 5 minutes",
        category="reminder",
    )
"""

from __future__ import annotations

import logging

from celery import shared_task

from notifications.services import NotificationService

logger = logging.getLogger(__name__)


@shared_task(
    bind=True,
    autoretry_for=(Exception,),
    retry_backoff=True,
    retry_kwargs={"max_retries": 3},
)
def deliver_notification(
    self,
    recipient_id: int,
    title: str,
    message: str,
    category: str,
    related_entity_id: str | None = None,
    related_entity_type: str | None = None,
) -> int | None:
    """
    Insert the notification.

    Returns:
        The new notification id, or None when the payload was rejected
    """
    result = NotificationService.create_notification(
        recipient_id=recipient_id,
        title=title,
        message=message,
        category=category,
        related_entity_id=related_entity_id,
        related_entity_type=related_entity_type,
    )

    if not result.success:
        logger.warning(
            f"Dropped notification for user {recipient_id}: "
            f"{result.error} ({result.error_code})"
        )
        return None

    return result.data.id
