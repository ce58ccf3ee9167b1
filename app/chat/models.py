"""
Chat system models.

This module defines the data models for the chat system supporting:
- Direct (1:1) conversations between exactly two users
- Group conversations with an admin/member role split
- Text, image, voice, file and system messages with single replies
- Per-message read receipts

Models:
    Conversation: Container for messages between participants
    DirectConversationPair: Helper for enforcing uniqueness of direct conversations
    Participant: User participation in a conversation with role and read tracking
    Message: Individual message within a conversation
    ReadReceipt: Record that a user has read a message

Design Decisions:
    - Direct conversations have exactly two participants for their lifetime
    - Conversations are never hard deleted; deactivation flips is_active
    - Leaving deactivates the participant row, rejoining creates a new one
    - Message deletion is a tombstone; content stays in the database
    - Read receipts are write-once
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.conf import settings
from django.db import models
from django.db.models import F, Q
from django.utils import timezone

from chat.constants import MESSAGE_CONFIG, PREVIEW_LABELS
from core.model_mixins import SoftDeleteMixin
from core.models import BaseModel

if TYPE_CHECKING:
    from authentication.models import User


class ConversationType(models.TextChoices):
    """
    Type of conversation.

    DIRECT: Exactly two participants, unique per user pair
    GROUP: Named conversation with an admin creator and members
    """

    DIRECT = "direct", "Direct Message"
    GROUP = "group", "Group"


class ParticipantRole(models.TextChoices):
    """
    Role within a conversation.

    ADMIN: Creator of a group conversation
    MEMBER: Everyone else, including both sides of a direct conversation
    """

    ADMIN = "admin", "Admin"
    MEMBER = "member", "Member"


class MessageType(models.TextChoices):
    """
    Type of message content.

    TEXT: User-authored text message
    IMAGE, VOICE, FILE: Message carrying an uploaded attachment
    SYSTEM: Auto-generated event message (e.g. group created)
    """

    TEXT = "text", "Text"
    IMAGE = "image", "Image"
    VOICE = "voice", "Voice"
    FILE = "file", "File"
    SYSTEM = "system", "System"


ATTACHMENT_MESSAGE_TYPES = (MessageType.IMAGE, MessageType.VOICE, MessageType.FILE)


def attachment_preview_label(message_type: str, file_name: str | None = None) -> str:
    """
    Label shown in place of content for an attachment message.

    Returns:
        "📷 Image", "🎤 Voice message" or "📎 <file_name>"
    """
    if message_type == MessageType.IMAGE:
        return PREVIEW_LABELS.IMAGE
    if message_type == MessageType.VOICE:
        return PREVIEW_LABELS.VOICE
    return PREVIEW_LABELS.FILE.format(
        file_name=file_name or PREVIEW_LABELS.FILE_FALLBACK_NAME
    )


class Conversation(BaseModel):
    """
    A conversation between two or more users.

    Conversation Types:
        DIRECT: Exactly 2 participants, no name or description.
                Unique per user pair (enforced via DirectConversationPair).

        GROUP: Creator is admin, other participants are members.
               Carries a name, optional description and avatar.

    Lifecycle:
        Never hard deleted. deactivate() sets is_active=False, after which
        the conversation disappears from listings and rejects messages.

    Fields:
        conversation_type: Type of conversation (direct or group)
        name: Group name (empty for direct)
        description: Group description (empty for direct)
        avatar: Group avatar blob (null for direct)
        created_by: User who created the conversation
        is_active: False once deactivated
        last_message_at: Timestamp of most recent message (for sorting)
        last_message: Preview of the most recent message

    Relationships:
        participants: All Participant records for this conversation
        messages: All Message records for this conversation
        direct_pair: DirectConversationPair if type is DIRECT
    """

    conversation_type = models.CharField(
        max_length=10,
        choices=ConversationType.choices,
        default=ConversationType.GROUP,
        db_index=True,
        help_text="Type of conversation (direct or group)",
    )

    name = models.CharField(
        max_length=100,
        blank=True,
        default="",
        help_text="Name for group conversations (empty for direct)",
    )

    description = models.TextField(
        blank=True,
        default="",
        help_text="Description for group conversations",
    )

    avatar = models.ForeignKey(
        "media.StoredFile",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        help_text="Group avatar blob",
    )

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_conversations",
        help_text="User who created this conversation",
    )

    is_active = models.BooleanField(
        default=True,
        db_index=True,
        help_text="Inactive conversations are hidden and read-only",
    )

    last_message_at = models.DateTimeField(
        null=True,
        blank=True,
        db_index=True,
        help_text="Timestamp of most recent message (for sorting conversation lists)",
    )

    last_message = models.CharField(
        max_length=MESSAGE_CONFIG.PREVIEW_LENGTH,
        blank=True,
        default="",
        help_text="Preview of the most recent message",
    )

    class Meta:
        db_table = "chat_conversation"
        ordering = [F("last_message_at").desc(nulls_last=True), "-created_at"]
        indexes = [
            models.Index(
                fields=["conversation_type", "is_active"],
                name="chat_conv_type_active_idx",
            ),
            # Sort by last activity (active conversations only)
            models.Index(
                fields=["-last_message_at"],
                name="chat_conv_last_msg_idx",
                condition=Q(is_active=True),
            ),
        ]

    def __str__(self) -> str:
        """Return human-readable representation."""
        if self.conversation_type == ConversationType.DIRECT:
            return f"Direct({self.pk})"
        if self.name:
            return f"Group: {self.name}"
        return f"Group({self.pk})"

    @property
    def is_direct(self) -> bool:
        """Check if this is a direct (1:1) conversation."""
        return self.conversation_type == ConversationType.DIRECT

    @property
    def is_group(self) -> bool:
        """Check if this is a group conversation."""
        return self.conversation_type == ConversationType.GROUP

    def deactivate(self) -> None:
        """Hide the conversation from every listing and stop accepting messages."""
        self.is_active = False
        self.save(update_fields=["is_active", "updated_at"])

    def get_active_participants(self):
        """
        Get queryset of active participants.

        Returns:
            QuerySet of Participant objects where is_active is True
        """
        return self.participants.filter(is_active=True)

    def get_active_participant_for_user(self, user: User) -> Participant | None:
        """
        Get active participant record for a specific user.

        Args:
            user: User to find participant for

        Returns:
            Participant if user is active in conversation, None otherwise
        """
        return self.participants.filter(user=user, is_active=True).first()


class DirectConversationPair(models.Model):
    """
    Enforces uniqueness of direct conversations between two users.

    This helper table stores user pairs in canonical order (lower user_id first)
    so that, regardless of who initiates, there is only one direct
    conversation per pair. The unique constraint is also what resolves two
    concurrent create calls for the same pair.

    Fields:
        conversation: The direct conversation (OneToOne, serves as PK)
        user_lower: User with lower ID
        user_higher: User with higher ID

    Constraints:
        - UniqueConstraint(user_lower, user_higher): One conversation per pair
        - CheckConstraint(user_lower_id < user_higher_id): Enforce canonical order
    """

    conversation = models.OneToOneField(
        Conversation,
        on_delete=models.CASCADE,
        primary_key=True,
        related_name="direct_pair",
        help_text="The direct conversation this pair represents",
    )

    user_lower = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="+",
        help_text="User with lower ID in this conversation pair",
    )

    user_higher = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="+",
        help_text="User with higher ID in this conversation pair",
    )

    class Meta:
        db_table = "chat_direct_conversation_pair"
        constraints = [
            models.UniqueConstraint(
                fields=["user_lower", "user_higher"],
                name="unique_direct_conversation_pair",
            ),
            models.CheckConstraint(
                condition=Q(user_lower_id__lt=F("user_higher_id")),
                name="user_lower_less_than_higher",
            ),
        ]

    def __str__(self) -> str:
        """Return human-readable representation."""
        return f"DirectPair({self.user_lower_id}, {self.user_higher_id})"

    @staticmethod
    def canonical(user_a: User, user_b: User) -> tuple[User, User]:
        """Order two users as (lower id, higher id)."""
        return (user_a, user_b) if user_a.id < user_b.id else (user_b, user_a)


class Participant(BaseModel):
    """
    Tracks user participation in conversations.

    Membership Lifecycle:
        1. User joins: Participant created with is_active=True
        2. User leaves: is_active=False, left_at stamped (see leave())
        3. User rejoins: NEW Participant record created

    Fields:
        conversation: Conversation this participation belongs to
        user: User participating in the conversation
        role: admin (group creator) or member
        joined_at: When the user joined
        left_at: When the user left (NULL if still active)
        is_active: Whether this participation is current
        last_read_at: Last time user read messages (for unread counts)

    Constraints:
        - UniqueConstraint(conversation, user) WHERE is_active:
          Only one active participation per user per conversation
    """

    conversation = models.ForeignKey(
        Conversation,
        on_delete=models.CASCADE,
        related_name="participants",
        help_text="Conversation this participation belongs to",
    )

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="conversation_participations",
        help_text="User participating in the conversation",
    )

    role = models.CharField(
        max_length=10,
        choices=ParticipantRole.choices,
        default=ParticipantRole.MEMBER,
        help_text="Role in the conversation",
    )

    joined_at = models.DateTimeField(
        default=timezone.now,
        help_text="When the user joined this conversation",
    )

    left_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the user left (null if still active)",
    )

    is_active = models.BooleanField(
        default=True,
        help_text="Whether this participation is current",
    )

    last_read_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="Last time user marked conversation as read (for unread counts)",
    )

    class Meta:
        db_table = "chat_participant"
        ordering = ["joined_at", "id"]
        indexes = [
            models.Index(
                fields=["conversation", "is_active"],
                name="chat_part_conv_active_idx",
            ),
            models.Index(
                fields=["user", "is_active"],
                name="chat_part_user_active_idx",
            ),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["conversation", "user"],
                condition=Q(is_active=True),
                name="unique_active_participation",
            ),
        ]

    def __str__(self) -> str:
        """Return human-readable representation."""
        status = "active" if self.is_active else "left"
        return f"Participant: {self.user_id} in {self.conversation_id} ({self.role}) [{status}]"

    @property
    def is_admin(self) -> bool:
        return self.role == ParticipantRole.ADMIN

    def leave(self) -> None:
        """End this participation. A later rejoin creates a new row."""
        self.is_active = False
        self.left_at = timezone.now()
        self.save(update_fields=["is_active", "left_at", "updated_at"])


class Message(SoftDeleteMixin, BaseModel):
    """
    A message within a conversation.

    Message Types:
        TEXT: User-authored message with non-empty content
        IMAGE / VOICE / FILE: Message with an attachment blob
        SYSTEM: Event message, sent as the conversation creator

    Soft Delete Behavior:
        When is_deleted=True the content is preserved in the database but
        the message is left out of listings, unread counts and receipts.

    Threading:
        reply_to points at another message in the same conversation. The
        service layer validates this; the model does not.

    Fields:
        conversation: Conversation this message belongs to
        sender: User who sent the message (NULL if the user is gone)
        message_type: One of MessageType
        content: Message text (may be empty for attachment messages)
        attachment: Uploaded blob for image/voice/file messages
        file_name / file_size: Attachment metadata shown to clients
        duration: Voice message length in seconds
        reply_to: Message this one replies to
        is_edited / edited_at: Set on the first and every later edit
    """

    conversation = models.ForeignKey(
        Conversation,
        on_delete=models.CASCADE,
        related_name="messages",
        help_text="Conversation this message belongs to",
    )

    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="sent_messages",
        help_text="User who sent this message",
    )

    message_type = models.CharField(
        max_length=10,
        choices=MessageType.choices,
        default=MessageType.TEXT,
        db_index=True,
        help_text="Type of message",
    )

    content = models.TextField(
        blank=True,
        default="",
        help_text="Message text",
    )

    attachment = models.ForeignKey(
        "media.StoredFile",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="chat_messages",
        help_text="Attachment blob for image, voice and file messages",
    )

    file_name = models.CharField(
        max_length=255,
        blank=True,
        default="",
        help_text="Attachment file name",
    )

    file_size = models.PositiveBigIntegerField(
        null=True,
        blank=True,
        help_text="Attachment size in bytes",
    )

    duration = models.PositiveIntegerField(
        null=True,
        blank=True,
        help_text="Voice message length in seconds",
    )

    reply_to = models.ForeignKey(
        "self",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="replies",
        help_text="Message this message replies to",
    )

    is_edited = models.BooleanField(
        default=False,
        help_text="Whether the content was changed after sending",
    )

    edited_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the content was last changed",
    )

    class Meta:
        db_table = "chat_message"
        ordering = ["created_at", "id"]
        indexes = [
            # Messages in a conversation, newest-first windowing
            models.Index(
                fields=["conversation", "created_at", "id"],
                name="chat_msg_conv_cursor_idx",
            ),
            # Unread counting skips tombstones
            models.Index(
                fields=["conversation", "is_deleted", "created_at"],
                name="chat_msg_conv_unread_idx",
            ),
            models.Index(
                fields=["sender", "-created_at"],
                name="chat_msg_sender_idx",
            ),
        ]

    def __str__(self) -> str:
        """Return human-readable representation."""
        sender_str = f"User {self.sender_id}" if self.sender_id else "Unknown"
        preview = self.preview_text
        if len(preview) > 50:
            preview = preview[:50] + "..."
        deleted_str = " [deleted]" if self.is_deleted else ""
        return f"{sender_str}: {preview}{deleted_str}"

    @property
    def is_system_message(self) -> bool:
        """Check if this is a system-generated message."""
        return self.message_type == MessageType.SYSTEM

    @property
    def is_text_message(self) -> bool:
        """Check if this is a user-authored text message."""
        return self.message_type == MessageType.TEXT

    @property
    def has_attachment_type(self) -> bool:
        return self.message_type in ATTACHMENT_MESSAGE_TYPES

    @property
    def preview_text(self) -> str:
        """Content for text/system messages, the type label for attachments."""
        if self.has_attachment_type:
            return attachment_preview_label(self.message_type, self.file_name)
        return self.content


class ReadReceipt(models.Model):
    """
    Records that a user has read a message.

    Receipts are created by mark-read for messages the user had not read,
    never for the user's own messages or for system messages. They are
    never updated or deleted.

    Constraints:
        - UniqueConstraint(message, user): One receipt per reader per message
    """

    message = models.ForeignKey(
        Message,
        on_delete=models.CASCADE,
        related_name="read_receipts",
        help_text="Message that was read",
    )

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="read_receipts",
        help_text="User who read the message",
    )

    read_at = models.DateTimeField(
        default=timezone.now,
        help_text="When the message was marked read",
    )

    class Meta:
        db_table = "chat_read_receipt"
        ordering = ["read_at", "id"]
        constraints = [
            models.UniqueConstraint(
                fields=["message", "user"],
                name="unique_read_receipt",
            ),
        ]

    def __str__(self) -> str:
        return f"ReadReceipt: message {self.message_id} by {self.user_id}"
