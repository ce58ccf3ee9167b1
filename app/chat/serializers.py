"""
Serializers for chat API.

This module provides serializers for the chat system:
- Read serializers rendering the service layer's summary/view dataclasses
- Write serializers validating request bodies before they reach ChatService

Serializer Hierarchy:
    ConversationSummarySerializer: One row of the conversation list
    ParticipantSummarySerializer: Participant display identity with role

    MessageViewSerializer: Message with sender, reply preview and receipts
    ReplyPreviewSerializer / ReadReceiptSerializer: Nested message parts

    DirectConversationCreateSerializer: Start a direct conversation
    GroupConversationCreateSerializer: Create a group
    MessageSendSerializer: Tagged variant for text/image/voice/file sends
    MessageEditSerializer: Replace text content
    MessageListQuerySerializer: ?limit for message listing

Design Decisions:
    - Read and write serializers are separate for clarity
    - Business rules (blank content, membership, reply targets) live in the
      service layer; serializers only check shape
"""

from __future__ import annotations

from rest_framework import serializers

from authentication.serializers import DisplayIdentitySerializer
from chat.constants import MESSAGE_CONFIG
from chat.models import MessageType

# Message types a client may send; system messages are server-generated
SENDABLE_MESSAGE_TYPES = [
    (MessageType.TEXT, "Text"),
    (MessageType.IMAGE, "Image"),
    (MessageType.VOICE, "Voice"),
    (MessageType.FILE, "File"),
]

# Optional fields each attachment variant accepts
VARIANT_FIELDS = {
    MessageType.IMAGE.value: ("file_name", "file_size"),
    MessageType.VOICE.value: ("duration",),
    MessageType.FILE.value: ("file_name", "file_size"),
}


# =============================================================================
# Conversation Serializers
# =============================================================================


class ParticipantSummarySerializer(serializers.Serializer):
    """Participant display identity with role."""

    id = serializers.IntegerField(allow_null=True)
    name = serializers.CharField()
    avatar = serializers.CharField(allow_null=True)
    is_online = serializers.BooleanField()
    last_seen = serializers.DateTimeField(allow_null=True)
    role = serializers.CharField()


class ConversationSummarySerializer(serializers.Serializer):
    """
    Read serializer for ConversationSummary.

    For direct conversations name and avatar are the other participant's.
    """

    id = serializers.IntegerField()
    type = serializers.CharField(source="conversation_type")
    name = serializers.CharField()
    description = serializers.CharField()
    avatar = serializers.CharField(allow_null=True)
    created_by = serializers.IntegerField(allow_null=True)
    last_message_at = serializers.DateTimeField(allow_null=True)
    last_message = serializers.CharField()
    created_at = serializers.DateTimeField()
    unread_count = serializers.IntegerField()
    participants = ParticipantSummarySerializer(many=True)


class DirectConversationCreateSerializer(serializers.Serializer):
    """Body for starting a direct conversation."""

    other_user_id = serializers.IntegerField(
        help_text="User to start a direct conversation with",
    )


class GroupConversationCreateSerializer(serializers.Serializer):
    """
    Body for creating a group conversation.

    The creator is added automatically and may be omitted from
    participant_ids.
    """

    name = serializers.CharField(
        max_length=100,
        allow_blank=True,
        trim_whitespace=False,
        help_text="Group name (required, not blank)",
    )
    description = serializers.CharField(
        required=False,
        allow_blank=True,
        default="",
        help_text="Group description",
    )
    participant_ids = serializers.ListField(
        child=serializers.IntegerField(),
        allow_empty=True,
        help_text="Users to add as members",
    )


class ConversationCreatedSerializer(serializers.Serializer):
    conversation_id = serializers.IntegerField()


class MarkReadResponseSerializer(serializers.Serializer):
    marked_count = serializers.IntegerField()


# =============================================================================
# Message Serializers
# =============================================================================


class ReplyPreviewSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    sender_name = serializers.CharField()
    content = serializers.CharField()


class ReadReceiptSerializer(serializers.Serializer):
    user_id = serializers.IntegerField()
    user_name = serializers.CharField()
    read_at = serializers.DateTimeField()


class MessageViewSerializer(serializers.Serializer):
    """
    Read serializer for MessageView.

    reply_to is null when the message is not a reply or when the replied-to
    message has been deleted.
    """

    id = serializers.IntegerField()
    type = serializers.CharField(source="message_type")
    content = serializers.CharField()
    sender = DisplayIdentitySerializer()
    attachment_url = serializers.CharField(allow_null=True)
    file_name = serializers.CharField()
    file_size = serializers.IntegerField(allow_null=True)
    duration = serializers.IntegerField(allow_null=True)
    is_edited = serializers.BooleanField()
    edited_at = serializers.DateTimeField(allow_null=True)
    created_at = serializers.DateTimeField()
    reply_to = ReplyPreviewSerializer(allow_null=True)
    read_receipts = ReadReceiptSerializer(many=True)


class MessageListQuerySerializer(serializers.Serializer):
    """Query parameters for listing messages. Out-of-range limits are clamped."""

    limit = serializers.IntegerField(required=False)


class MessageSendSerializer(serializers.Serializer):
    """
    Serializer for sending messages.

    The body is a tagged variant keyed by "type":
        {"type": "text", "content": str, "reply_to_id"?: int}
        {"type": "image", "blob_ref": uuid, "file_name"?: str, "file_size"?: int, "reply_to_id"?: int}
        {"type": "voice", "blob_ref": uuid, "duration"?: int, "reply_to_id"?: int}
        {"type": "file", "blob_ref": uuid, "file_name"?: str, "file_size"?: int, "reply_to_id"?: int}

    Fields that do not belong to the chosen variant are dropped.
    """

    type = serializers.ChoiceField(choices=SENDABLE_MESSAGE_TYPES)
    content = serializers.CharField(
        required=False,
        allow_blank=True,
        max_length=MESSAGE_CONFIG.MAX_CONTENT_LENGTH,
        help_text="Message text (text messages)",
    )
    blob_ref = serializers.UUIDField(
        required=False,
        help_text="Uploaded blob reference (image, voice and file messages)",
    )
    file_name = serializers.CharField(required=False, allow_blank=True, max_length=255)
    file_size = serializers.IntegerField(required=False, min_value=0)
    duration = serializers.IntegerField(required=False, min_value=0)
    reply_to_id = serializers.IntegerField(required=False, allow_null=True)

    def validate(self, attrs: dict) -> dict:
        message_type = attrs["type"]
        reply_to_id = attrs.get("reply_to_id")

        if message_type == MessageType.TEXT:
            if "content" not in attrs:
                raise serializers.ValidationError(
                    {"content": "This field is required for text messages."}
                )
            return {
                "type": message_type,
                "content": attrs["content"],
                "reply_to_id": reply_to_id,
            }

        if "blob_ref" not in attrs:
            raise serializers.ValidationError(
                {"blob_ref": f"This field is required for {message_type} messages."}
            )

        variant = {
            "type": message_type,
            "blob_ref": attrs["blob_ref"],
            "reply_to_id": reply_to_id,
        }
        for name in VARIANT_FIELDS[message_type]:
            variant[name] = attrs.get(name)
        return variant


class MessageSentSerializer(serializers.Serializer):
    message_id = serializers.IntegerField()


class MessageEditSerializer(serializers.Serializer):
    """Body for editing a text message."""

    content = serializers.CharField(
        allow_blank=True,
        max_length=MESSAGE_CONFIG.MAX_CONTENT_LENGTH,
        help_text="New message content",
    )


class SuccessResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField()
