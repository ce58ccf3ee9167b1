"""
Celery configuration for the messaging backend.

Celery runs work that should not block a web request. Today that is
notification delivery (notifications.tasks.deliver_notification), which is
enqueued after the originating transaction commits.

This configuration uses Redis as both the message broker and result backend.
Tasks are auto-discovered from all installed Django apps.

Usage:
    from notifications.tasks import deliver_notification

    deliver_notification.delay(
        recipient_id=user.id,
        title="New conversation",
        message="Ada started a conversation with you",
        category="system",
    )

For more information, see:
https://docs.celeryq.dev/en/stable/django/first-steps-with-django.html
"""

import os

from celery import Celery

# Set the default Django settings module for the Celery worker
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("config")

# All Celery settings are prefixed with CELERY_ in settings.py
app.config_from_object("django.conf:settings", namespace="CELERY")

# Celery will look for a tasks.py module in each installed app
app.autodiscover_tasks()
