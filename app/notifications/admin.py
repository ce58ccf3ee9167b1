"""Django admin configuration for notification models."""

from django.contrib import admin

from notifications.models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    """Admin configuration for Notification."""

    list_display = [
        "id",
        "recipient",
        "title",
        "category",
        "is_read",
        "created_at",
    ]
    list_filter = ["category", "is_read"]
    search_fields = ["title", "recipient__email", "related_entity_id"]
    readonly_fields = ["created_at", "updated_at"]
    raw_id_fields = ["recipient"]
    date_hierarchy = "created_at"
    ordering = ["-created_at"]
