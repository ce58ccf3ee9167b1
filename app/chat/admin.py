"""
Django admin configuration for chat models.

Provides admin interfaces for:
- Conversation management
- Participant viewing
- Message moderation
- Read receipt inspection
"""

from django.contrib import admin

from chat.models import (
    Conversation,
    DirectConversationPair,
    Message,
    Participant,
    ReadReceipt,
)


class ParticipantInline(admin.TabularInline):
    """Inline display of participants in conversation admin."""

    model = Participant
    extra = 0
    readonly_fields = ["joined_at", "left_at", "last_read_at"]
    raw_id_fields = ["user"]


@admin.register(Conversation)
class ConversationAdmin(admin.ModelAdmin):
    """Admin interface for Conversation model."""

    list_display = [
        "id",
        "conversation_type",
        "name",
        "is_active",
        "created_at",
        "last_message_at",
    ]
    list_filter = ["conversation_type", "is_active", "created_at"]
    search_fields = ["name", "id"]
    readonly_fields = [
        "created_at",
        "updated_at",
        "last_message_at",
        "last_message",
    ]
    raw_id_fields = ["created_by", "avatar"]
    inlines = [ParticipantInline]
    ordering = ["-created_at"]


@admin.register(DirectConversationPair)
class DirectConversationPairAdmin(admin.ModelAdmin):
    """Admin interface for DirectConversationPair model."""

    list_display = ["conversation", "user_lower", "user_higher"]
    raw_id_fields = ["conversation", "user_lower", "user_higher"]


@admin.register(Participant)
class ParticipantAdmin(admin.ModelAdmin):
    """Admin interface for Participant model."""

    list_display = [
        "id",
        "conversation",
        "user",
        "role",
        "is_active",
        "joined_at",
        "left_at",
    ]
    list_filter = ["role", "is_active", "joined_at"]
    search_fields = ["user__email", "conversation__name"]
    readonly_fields = ["created_at", "updated_at", "joined_at"]
    raw_id_fields = ["conversation", "user"]
    ordering = ["-joined_at"]


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    """Admin interface for Message model."""

    list_display = [
        "id",
        "conversation",
        "sender",
        "message_type",
        "content_preview",
        "is_edited",
        "is_deleted",
        "created_at",
    ]
    list_filter = ["message_type", "is_deleted", "is_edited", "created_at"]
    search_fields = ["content", "sender__email"]
    readonly_fields = ["created_at", "updated_at", "edited_at", "deleted_at"]
    raw_id_fields = ["conversation", "sender", "attachment", "reply_to"]
    ordering = ["-created_at"]
    actions = ["restore_messages"]

    @admin.display(description="Content Preview")
    def content_preview(self, obj: Message) -> str:
        """Return truncated preview text for list display."""
        max_length = 50
        preview = obj.preview_text
        if len(preview) > max_length:
            return preview[:max_length] + "..."
        return preview

    @admin.action(description="Restore selected deleted messages")
    def restore_messages(self, request, queryset):
        restored = 0
        for message in queryset.filter(is_deleted=True):
            message.restore()
            restored += 1
        self.message_user(request, f"Restored {restored} message(s).")


@admin.register(ReadReceipt)
class ReadReceiptAdmin(admin.ModelAdmin):
    """Admin interface for ReadReceipt model."""

    list_display = ["id", "message", "user", "read_at"]
    raw_id_fields = ["message", "user"]
    ordering = ["-read_at"]
