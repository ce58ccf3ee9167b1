"""
Chat application configuration.

This app provides the chat system with:
- Direct (1:1) and group conversations
- Text, image, voice, file and system messages with replies
- Edit and tombstone delete of own messages
- Read receipts and unread counts
"""

from django.apps import AppConfig


class ChatConfig(AppConfig):
    """Configuration for the chat application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "chat"
    verbose_name = "Chat"
