"""
Chat system service layer.

This module provides the business logic for the chat system, encapsulating
all operations on conversations, messages and read receipts.

Services:
    ConversationService: Conversation creation and per-user listing
    MessageService: Send, list, edit and delete messages
    ReadReceiptService: Mark-read bookkeeping and unread counts
    ChatService: Actor-facing facade used by the API views

Design Principles:
    - Services are stateless (use class methods)
    - Every call takes the acting user explicitly
    - Expected failures return ServiceResult.failure() with an ErrorCode
    - Unexpected failures raise exceptions
    - Writes happen inside a single transaction per operation

Usage:
    from chat.services import ChatService

    result = ChatService.create_group_conversation(
        actor=user,
        name="Launch Team",
        description="",
        participant_ids=[user2.id, user3.id],
    )
    if result:
        conversation_id = result.data

    result = ChatService.send_message(user2, conversation_id, "kickoff at 9am")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone as dt_timezone
from typing import TYPE_CHECKING

from django.db import IntegrityError, models
from django.db.models import Count, F, OuterRef, Prefetch, Subquery, Value
from django.db.models.functions import Coalesce
from django.utils import timezone

from authentication.models import User
from authentication.services import (
    DisplayIdentity,
    require_actor,
    resolve_display_identity,
)
from chat.constants import MESSAGE_CONFIG, SYSTEM_MESSAGES
from chat.models import (
    ATTACHMENT_MESSAGE_TYPES,
    Conversation,
    ConversationType,
    DirectConversationPair,
    Message,
    MessageType,
    Participant,
    ParticipantRole,
    ReadReceipt,
)
from core.services import BaseService, ErrorCode, ServiceResult
from media.services import BlobStoreService
from notifications.models import NotificationCategory
from notifications.services import NotificationService

if TYPE_CHECKING:
    from collections.abc import Iterable

    from media.models import StoredFile

logger = logging.getLogger(__name__)

# Lower bound for "never read": every message is newer than this
_NEVER_READ = datetime(1970, 1, 1, tzinfo=dt_timezone.utc)


# =============================================================================
# Read models
# =============================================================================


@dataclass(frozen=True)
class ParticipantSummary:
    """Display identity of a conversation participant plus their role."""

    id: int | None
    name: str
    avatar: str | None
    is_online: bool
    last_seen: datetime | None
    role: str

    @classmethod
    def from_participant(cls, participant: Participant) -> ParticipantSummary:
        identity = resolve_display_identity(participant.user)
        return cls(
            id=identity.id,
            name=identity.name,
            avatar=identity.avatar,
            is_online=identity.is_online,
            last_seen=identity.last_seen,
            role=participant.role,
        )


@dataclass(frozen=True)
class ConversationSummary:
    """
    One row of a user's conversation list.

    For direct conversations name and avatar are the other participant's;
    for groups they are the conversation's own.
    """

    id: int
    conversation_type: str
    name: str
    description: str
    avatar: str | None
    created_by: int | None
    last_message_at: datetime | None
    last_message: str
    created_at: datetime
    unread_count: int
    participants: list[ParticipantSummary] = field(default_factory=list)


@dataclass(frozen=True)
class ReplyPreview:
    id: int
    sender_name: str
    content: str


@dataclass(frozen=True)
class ReceiptView:
    user_id: int
    user_name: str
    read_at: datetime


@dataclass(frozen=True)
class MessageView:
    """A message as shown in a conversation's message list."""

    id: int
    message_type: str
    content: str
    sender: DisplayIdentity
    attachment_url: str | None
    file_name: str
    file_size: int | None
    duration: int | None
    is_edited: bool
    edited_at: datetime | None
    created_at: datetime
    reply_to: ReplyPreview | None = None
    read_receipts: list[ReceiptView] = field(default_factory=list)


def _not_a_participant() -> ServiceResult:
    return ServiceResult.failure(
        "You are not a participant in this conversation",
        error_code=ErrorCode.NOT_AUTHORIZED,
    )


def _active_participant(conversation: Conversation, user: User) -> Participant | None:
    """Active participation of user, or None if absent or the conversation is inactive."""
    if not conversation.is_active:
        return None
    return conversation.get_active_participant_for_user(user)


# =============================================================================
# ConversationService
# =============================================================================


class ConversationService(BaseService):
    """
    Service for conversation lifecycle operations.

    Methods:
        create_direct: Create or retrieve direct conversation between two users
        create_group: Create a new group conversation
        list_for_actor: List the actor's active conversations with unread counts
    """

    @classmethod
    def _find_direct(cls, user_lower: User, user_higher: User) -> Conversation | None:
        pair = (
            DirectConversationPair.objects.select_related("conversation")
            .filter(user_lower=user_lower, user_higher=user_higher)
            .first()
        )
        return pair.conversation if pair else None

    @classmethod
    def create_direct(
        cls,
        actor: User,
        other_user: User,
    ) -> ServiceResult[Conversation]:
        """
        Create or retrieve a direct conversation between two users.

        Direct conversations are unique per user pair. If a conversation
        already exists between the two users, it is returned instead of
        creating a duplicate, whichever side asks.

        Implementation:
            1. Validate users are different
            2. Canonicalize order (lower user_id first)
            3. Look up existing DirectConversationPair
            4. If found, return existing conversation
            5. If not found, create conversation, pair and participants
               within one transaction
            6. If a concurrent call won the pair constraint, return its
               conversation

        Args:
            actor: User starting the conversation
            other_user: The other participant

        Returns:
            ServiceResult with Conversation (existing or new)

        Error codes:
            INVALID_ARGUMENT: Cannot create direct conversation with yourself
        """
        if actor.id == other_user.id:
            return ServiceResult.failure(
                "Cannot create a direct conversation with yourself",
                error_code=ErrorCode.INVALID_ARGUMENT,
            )

        user_lower, user_higher = DirectConversationPair.canonical(actor, other_user)

        existing = cls._find_direct(user_lower, user_higher)
        if existing:
            cls.get_logger().debug(
                f"Found existing direct conversation {existing.id} "
                f"between users {user_lower.id} and {user_higher.id}"
            )
            return ServiceResult.success(existing)

        try:
            with cls.atomic():
                conversation = Conversation.objects.create(
                    conversation_type=ConversationType.DIRECT,
                    created_by=actor,
                )

                DirectConversationPair.objects.create(
                    conversation=conversation,
                    user_lower=user_lower,
                    user_higher=user_higher,
                )

                for user in (actor, other_user):
                    Participant.objects.create(
                        conversation=conversation,
                        user=user,
                        role=ParticipantRole.MEMBER,
                    )

                NotificationService.notify(
                    recipient_id=other_user.id,
                    title="New conversation",
                    message=f"{resolve_display_identity(actor).name} started a conversation with you",
                    category=NotificationCategory.SYSTEM,
                    related_entity_id=str(conversation.id),
                    related_entity_type="conversation",
                )
        except IntegrityError:
            existing = cls._find_direct(user_lower, user_higher)
            if existing is None:
                raise
            logger.info(
                f"Concurrent direct conversation create for users "
                f"{user_lower.id} and {user_higher.id}, using {existing.id}"
            )
            return ServiceResult.success(existing)

        cls.get_logger().info(
            f"Created direct conversation {conversation.id} "
            f"between users {user_lower.id} and {user_higher.id}"
        )

        return ServiceResult.success(conversation)

    @classmethod
    def create_group(
        cls,
        actor: User,
        name: str,
        description: str = "",
        participants: Iterable[User] = (),
    ) -> ServiceResult[Conversation]:
        """
        Create a new group conversation.

        The creator becomes admin; every other listed user joins as member.
        The creator and duplicates are dropped from participants silently.
        A system message announces the group and becomes its preview.

        Args:
            actor: User creating the group (becomes admin)
            name: Required group name (cannot be blank)
            description: Optional description
            participants: Users to add as members

        Returns:
            ServiceResult with new Conversation

        Error codes:
            INVALID_ARGUMENT: Group name is blank
        """
        name = name.strip() if name else ""
        if not name:
            return ServiceResult.failure(
                "Group name is required",
                error_code=ErrorCode.INVALID_ARGUMENT,
            )

        members = []
        seen = {actor.id}
        for user in participants:
            if user.id in seen:
                continue
            seen.add(user.id)
            members.append(user)

        creator_name = resolve_display_identity(actor).name

        with cls.atomic():
            conversation = Conversation.objects.create(
                conversation_type=ConversationType.GROUP,
                name=name,
                description=description.strip() if description else "",
                created_by=actor,
            )

            Participant.objects.create(
                conversation=conversation,
                user=actor,
                role=ParticipantRole.ADMIN,
            )

            for member in members:
                Participant.objects.create(
                    conversation=conversation,
                    user=member,
                    role=ParticipantRole.MEMBER,
                )

            MessageService.create_system_message(
                conversation,
                SYSTEM_MESSAGES.GROUP_CREATED.format(name=name),
            )

            for member in members:
                NotificationService.notify(
                    recipient_id=member.id,
                    title=f"Added to {name}",
                    message=f'{creator_name} added you to "{name}"',
                    category=NotificationCategory.SYSTEM,
                    related_entity_id=str(conversation.id),
                    related_entity_type="conversation",
                )

        cls.get_logger().info(
            f"Created group conversation {conversation.id} "
            f"named '{name}' with {1 + len(members)} participants"
        )

        return ServiceResult.success(conversation)

    @classmethod
    def list_for_actor(cls, actor: User) -> ServiceResult[list[ConversationSummary]]:
        """
        List the actor's active conversations, most recently active first.

        Conversations without messages sort after those with messages;
        ties are broken by creation time, newest first.

        Participants (with profiles) are prefetched and unread counts come
        from a correlated count annotation, so the query count does not
        grow with the number of conversations.

        Returns:
            ServiceResult with list of ConversationSummary
        """
        participations = (
            Participant.objects.filter(
                user=actor,
                is_active=True,
                conversation__is_active=True,
            )
            .select_related("conversation", "conversation__avatar")
            .prefetch_related(
                Prefetch(
                    "conversation__participants",
                    queryset=Participant.objects.filter(is_active=True).select_related(
                        "user__profile"
                    ),
                    to_attr="active_participants",
                )
            )
            .annotate(unread=ReadReceiptService.unread_count_annotation())
            .order_by(
                F("conversation__last_message_at").desc(nulls_last=True),
                "-conversation__created_at",
                "-conversation_id",
            )
        )

        summaries = [
            cls._summarize(participation, actor) for participation in participations
        ]

        cls.get_logger().debug(
            f"Listed {len(summaries)} conversations for user {actor.id}"
        )
        return ServiceResult.success(summaries)

    @classmethod
    def _summarize(cls, participation: Participant, actor: User) -> ConversationSummary:
        conversation = participation.conversation
        members = conversation.active_participants

        if conversation.is_direct:
            other = next((p for p in members if p.user_id != actor.id), None)
            identity = resolve_display_identity(other.user if other else None)
            name, avatar = identity.name, identity.avatar
        else:
            name = conversation.name
            avatar = BlobStoreService.resolve_url(conversation.avatar)

        return ConversationSummary(
            id=conversation.id,
            conversation_type=conversation.conversation_type,
            name=name,
            description=conversation.description,
            avatar=avatar,
            created_by=conversation.created_by_id,
            last_message_at=conversation.last_message_at,
            last_message=conversation.last_message,
            created_at=conversation.created_at,
            unread_count=participation.unread,
            participants=[ParticipantSummary.from_participant(p) for p in members],
        )


# =============================================================================
# MessageService
# =============================================================================


class MessageService(BaseService):
    """
    Service for message operations.

    Methods:
        send_message: Send a text message
        send_file_message: Send an image, voice or file message
        list_messages: Newest window of non-deleted messages, oldest first
        edit_message: Replace the content of an own text message
        delete_message: Tombstone an own message
        create_system_message: Post an event message (internal)
    """

    @classmethod
    def _resolve_reply_to(
        cls,
        conversation: Conversation,
        reply_to_id: int | None,
    ) -> tuple[Message | None, ServiceResult | None]:
        if reply_to_id is None:
            return None, None
        reply_to = Message.objects.filter(
            id=reply_to_id,
            conversation=conversation,
        ).first()
        if reply_to is None:
            return None, ServiceResult.failure(
                "Reply target not found in this conversation",
                error_code=ErrorCode.INVALID_ARGUMENT,
            )
        return reply_to, None

    @classmethod
    def _record(cls, conversation: Conversation, **fields) -> Message:
        """
        Insert a message and move the conversation preview to it.

        Must be called inside a transaction.
        """
        message = Message.objects.create(conversation=conversation, **fields)

        conversation.last_message_at = message.created_at
        conversation.last_message = message.preview_text[: MESSAGE_CONFIG.PREVIEW_LENGTH]
        conversation.save(update_fields=["last_message_at", "last_message", "updated_at"])

        return message

    @classmethod
    def send_message(
        cls,
        actor: User,
        conversation: Conversation,
        content: str,
        reply_to_id: int | None = None,
    ) -> ServiceResult[Message]:
        """
        Send a text message to a conversation.

        Args:
            actor: User sending the message
            conversation: Target conversation
            content: Message text, stored as given
            reply_to_id: Optional ID of a message in the same conversation

        Returns:
            ServiceResult with new Message

        Error codes:
            NOT_AUTHORIZED: Actor is not active in an active conversation
            INVALID_ARGUMENT: Blank content, or reply target not in conversation
        """
        if _active_participant(conversation, actor) is None:
            return _not_a_participant()

        if not content or not content.strip():
            return ServiceResult.failure(
                "Message content cannot be empty",
                error_code=ErrorCode.INVALID_ARGUMENT,
            )

        reply_to, error = cls._resolve_reply_to(conversation, reply_to_id)
        if error is not None:
            return error

        with cls.atomic():
            message = cls._record(
                conversation,
                sender=actor,
                message_type=MessageType.TEXT,
                content=content,
                reply_to=reply_to,
            )

        cls.get_logger().debug(
            f"User {actor.id} sent message {message.id} "
            f"to conversation {conversation.id}"
        )

        return ServiceResult.success(message)

    @classmethod
    def send_file_message(
        cls,
        actor: User,
        conversation: Conversation,
        attachment: StoredFile | None,
        message_type: str,
        file_name: str | None = None,
        file_size: int | None = None,
        duration: int | None = None,
        reply_to_id: int | None = None,
    ) -> ServiceResult[Message]:
        """
        Send an image, voice or file message.

        file_name and file_size default to the blob's upload metadata.
        duration is only kept for voice messages.

        Error codes:
            NOT_AUTHORIZED: Actor is not active in an active conversation
            INVALID_ARGUMENT: Not an attachment type, blob not uploaded yet,
                or reply target not in conversation
            NOT_FOUND: Attachment does not exist
        """
        if _active_participant(conversation, actor) is None:
            return _not_a_participant()

        if message_type not in ATTACHMENT_MESSAGE_TYPES:
            return ServiceResult.failure(
                f"Unsupported attachment message type: {message_type}",
                error_code=ErrorCode.INVALID_ARGUMENT,
            )

        if attachment is None:
            return ServiceResult.failure(
                "Attachment not found",
                error_code=ErrorCode.NOT_FOUND,
            )

        if not attachment.is_uploaded:
            return ServiceResult.failure(
                "Attachment has not been uploaded yet",
                error_code=ErrorCode.INVALID_ARGUMENT,
            )

        reply_to, error = cls._resolve_reply_to(conversation, reply_to_id)
        if error is not None:
            return error

        with cls.atomic():
            message = cls._record(
                conversation,
                sender=actor,
                message_type=message_type,
                attachment=attachment,
                file_name=file_name or attachment.original_filename,
                file_size=file_size if file_size is not None else attachment.file_size,
                duration=duration if message_type == MessageType.VOICE else None,
                reply_to=reply_to,
            )

        cls.get_logger().debug(
            f"User {actor.id} sent {message_type} message {message.id} "
            f"to conversation {conversation.id}"
        )

        return ServiceResult.success(message)

    @classmethod
    def list_messages(
        cls,
        actor: User,
        conversation: Conversation,
        limit: int | None = None,
    ) -> ServiceResult[list[MessageView]]:
        """
        List the newest non-deleted messages, returned oldest first.

        Args:
            limit: Window size, clamped to MIN_LIST_LIMIT..MAX_LIST_LIMIT
                (DEFAULT_LIST_LIMIT when None)

        Error codes:
            NOT_AUTHORIZED: Actor is not active in an active conversation
        """
        if _active_participant(conversation, actor) is None:
            return _not_a_participant()

        if limit is None:
            limit = MESSAGE_CONFIG.DEFAULT_LIST_LIMIT
        limit = max(MESSAGE_CONFIG.MIN_LIST_LIMIT, min(limit, MESSAGE_CONFIG.MAX_LIST_LIMIT))

        newest = (
            Message.objects.filter(conversation=conversation, is_deleted=False)
            .select_related(
                "sender__profile",
                "attachment",
                "reply_to__sender__profile",
            )
            .prefetch_related(
                Prefetch(
                    "read_receipts",
                    queryset=ReadReceipt.objects.select_related("user__profile"),
                )
            )
            .order_by("-created_at", "-id")[:limit]
        )
        messages = list(newest)
        messages.reverse()

        return ServiceResult.success([cls._to_view(message) for message in messages])

    @classmethod
    def _to_view(cls, message: Message) -> MessageView:
        reply_preview = None
        reply_to = message.reply_to
        if reply_to is not None and not reply_to.is_deleted:
            reply_preview = ReplyPreview(
                id=reply_to.id,
                sender_name=resolve_display_identity(reply_to.sender).name,
                content=reply_to.preview_text,
            )

        receipts = []
        for receipt in message.read_receipts.all():
            receipts.append(
                ReceiptView(
                    user_id=receipt.user_id,
                    user_name=resolve_display_identity(receipt.user).name,
                    read_at=receipt.read_at,
                )
            )

        return MessageView(
            id=message.id,
            message_type=message.message_type,
            content=message.content,
            sender=resolve_display_identity(message.sender),
            attachment_url=BlobStoreService.resolve_url(message.attachment),
            file_name=message.file_name,
            file_size=message.file_size,
            duration=message.duration,
            is_edited=message.is_edited,
            edited_at=message.edited_at,
            created_at=message.created_at,
            reply_to=reply_preview,
            read_receipts=receipts,
        )

    @classmethod
    def edit_message(
        cls,
        actor: User,
        message: Message | None,
        new_content: str,
    ) -> ServiceResult[Message]:
        """
        Replace the content of the actor's own text message.

        Checks run in order: existence, ownership, type, tombstone, content.
        No edit history is kept.

        Error codes:
            NOT_FOUND: Message does not exist
            NOT_AUTHORIZED: Actor is not the sender
            INVALID_OPERATION: Not a text message, or already deleted
            INVALID_ARGUMENT: Blank content
        """
        if message is None:
            return ServiceResult.failure("Message not found", error_code=ErrorCode.NOT_FOUND)

        if message.sender_id != actor.id:
            cls.get_logger().warning(
                f"User {actor.id} attempted to edit message {message.id} "
                f"sent by {message.sender_id}"
            )
            return ServiceResult.failure(
                "You can only edit your own messages",
                error_code=ErrorCode.NOT_AUTHORIZED,
            )

        if not message.is_text_message:
            return ServiceResult.failure(
                "Only text messages can be edited",
                error_code=ErrorCode.INVALID_OPERATION,
            )

        if message.is_deleted:
            return ServiceResult.failure(
                "Cannot edit deleted messages",
                error_code=ErrorCode.INVALID_OPERATION,
            )

        if not new_content or not new_content.strip():
            return ServiceResult.failure(
                "Message content cannot be empty",
                error_code=ErrorCode.INVALID_ARGUMENT,
            )

        with cls.atomic():
            message.content = new_content
            message.is_edited = True
            message.edited_at = timezone.now()
            message.save(update_fields=["content", "is_edited", "edited_at", "updated_at"])

        cls.get_logger().info(f"User {actor.id} edited message {message.id}")

        return ServiceResult.success(message)

    @classmethod
    def delete_message(
        cls,
        actor: User,
        message: Message | None,
    ) -> ServiceResult[None]:
        """
        Tombstone the actor's own message.

        Content is kept; the message drops out of listings and unread
        counts. Deleting an already deleted message succeeds without change.

        Error codes:
            NOT_FOUND: Message does not exist
            NOT_AUTHORIZED: Actor is not the sender
            INVALID_OPERATION: System messages cannot be deleted
        """
        if message is None:
            return ServiceResult.failure("Message not found", error_code=ErrorCode.NOT_FOUND)

        if message.sender_id != actor.id:
            cls.get_logger().warning(
                f"User {actor.id} attempted to delete message {message.id} "
                f"sent by {message.sender_id}"
            )
            return ServiceResult.failure(
                "You can only delete your own messages",
                error_code=ErrorCode.NOT_AUTHORIZED,
            )

        if message.is_system_message:
            return ServiceResult.failure(
                "Cannot delete system messages",
                error_code=ErrorCode.INVALID_OPERATION,
            )

        if message.is_deleted:
            cls.get_logger().debug(f"Message {message.id} already deleted")
            return ServiceResult.success(None)

        with cls.atomic():
            message.soft_delete()

        cls.get_logger().info(
            f"User {actor.id} deleted message {message.id} "
            f"in conversation {message.conversation_id}"
        )

        return ServiceResult.success(None)

    @classmethod
    def create_system_message(cls, conversation: Conversation, content: str) -> Message:
        """
        Internal: Post a system event message.

        Sent as the conversation creator and moves the conversation
        preview. Must be called within an existing transaction.
        """
        return cls._record(
            conversation,
            sender_id=conversation.created_by_id,
            message_type=MessageType.SYSTEM,
            content=content,
        )


# =============================================================================
# ReadReceiptService
# =============================================================================


class ReadReceiptService(BaseService):
    """
    Service for read tracking.

    Unread definition (shared by counts and mark-read):
        Messages in the conversation newer than the participant's
        last_read_at (all of them if never read), excluding the
        participant's own messages, tombstones and system messages.

    Methods:
        mark_read: Stamp last_read_at and write receipts for unread messages
        unread_count: Count unread messages for one participation
        unread_count_annotation: Same count as a per-row annotation
    """

    @classmethod
    def unread_messages(
        cls,
        conversation_id: int,
        user_id: int,
        last_read_at: datetime | None,
    ) -> models.QuerySet[Message]:
        queryset = (
            Message.objects.filter(conversation_id=conversation_id, is_deleted=False)
            .exclude(message_type=MessageType.SYSTEM)
            .exclude(sender_id=user_id)
        )
        if last_read_at:
            queryset = queryset.filter(created_at__gt=last_read_at)
        return queryset

    @classmethod
    def unread_count(cls, participant: Participant) -> int:
        return cls.unread_messages(
            participant.conversation_id,
            participant.user_id,
            participant.last_read_at,
        ).count()

    @classmethod
    def unread_count_annotation(cls):
        """
        Unread count expression for a Participant queryset.

        Usage:
            Participant.objects.annotate(unread=ReadReceiptService.unread_count_annotation())
        """
        unread = (
            Message.objects.filter(
                conversation=OuterRef("conversation"),
                is_deleted=False,
                created_at__gt=Coalesce(
                    OuterRef("last_read_at"),
                    Value(_NEVER_READ),
                    output_field=models.DateTimeField(),
                ),
            )
            .exclude(message_type=MessageType.SYSTEM)
            .exclude(sender=OuterRef("user"))
            .order_by()
            .values("conversation")
            .annotate(total=Count("pk"))
            .values("total")
        )
        return Coalesce(
            Subquery(unread, output_field=models.IntegerField()),
            Value(0),
        )

    @classmethod
    def mark_read(cls, actor: User, conversation: Conversation) -> ServiceResult[int]:
        """
        Mark everything in the conversation as read for the actor.

        The participation row is locked for the duration so concurrent
        calls for the same user serialize. Receipts are only written for
        messages that were unread before this call, and never twice for
        the same (message, user).

        Returns:
            ServiceResult with the number of receipts created

        Error codes:
            NOT_AUTHORIZED: Actor is not active in an active conversation
        """
        if not conversation.is_active:
            return _not_a_participant()

        with cls.atomic():
            participant = (
                Participant.objects.select_for_update()
                .filter(conversation=conversation, user=actor, is_active=True)
                .first()
            )
            if participant is None:
                return _not_a_participant()

            previous_read_at = participant.last_read_at
            now = timezone.now()
            participant.last_read_at = now
            participant.save(update_fields=["last_read_at", "updated_at"])

            unread_ids = list(
                cls.unread_messages(conversation.id, actor.id, previous_read_at)
                .filter(created_at__lte=now)
                .values_list("id", flat=True)
            )
            already_read = set(
                ReadReceipt.objects.filter(
                    user=actor,
                    message_id__in=unread_ids,
                ).values_list("message_id", flat=True)
            )
            receipts = [
                ReadReceipt(message_id=message_id, user=actor, read_at=now)
                for message_id in unread_ids
                if message_id not in already_read
            ]
            ReadReceipt.objects.bulk_create(receipts, ignore_conflicts=True)

        cls.get_logger().debug(
            f"User {actor.id} marked conversation {conversation.id} as read "
            f"({len(receipts)} receipts)"
        )

        return ServiceResult.success(len(receipts))


# =============================================================================
# ChatService
# =============================================================================


class ChatService(BaseService):
    """
    Actor-facing facade over the chat services.

    Every method takes the acting user explicitly, rejects anonymous
    actors with NOT_AUTHENTICATED and turns ids into rows (NOT_FOUND when
    they do not resolve) before delegating.

    Usage:
        result = ChatService.mark_read(request.user, conversation_id)
        if not result:
            return service_error_response(result)
        return Response(result.data)  # {"marked_count": n}
    """

    @staticmethod
    def _get(queryset, pk):
        try:
            return queryset.filter(pk=pk).first()
        except (TypeError, ValueError):
            return None

    @classmethod
    def _get_conversation(cls, conversation_id) -> Conversation | None:
        return cls._get(Conversation.objects.all(), conversation_id)

    @classmethod
    def _get_message(cls, message_id) -> Message | None:
        return cls._get(Message.objects.select_related("conversation"), message_id)

    @staticmethod
    def _conversation_not_found() -> ServiceResult:
        return ServiceResult.failure(
            "Conversation not found",
            error_code=ErrorCode.NOT_FOUND,
        )

    @classmethod
    def list_conversations(cls, actor) -> ServiceResult[list[ConversationSummary]]:
        denied = require_actor(actor)
        if denied is not None:
            return denied
        return ConversationService.list_for_actor(actor)

    @classmethod
    def list_messages(
        cls,
        actor,
        conversation_id,
        limit: int | None = None,
    ) -> ServiceResult[list[MessageView]]:
        denied = require_actor(actor)
        if denied is not None:
            return denied

        conversation = cls._get_conversation(conversation_id)
        if conversation is None:
            return cls._conversation_not_found()

        return MessageService.list_messages(actor, conversation, limit)

    @classmethod
    def create_direct_conversation(cls, actor, other_user_id) -> ServiceResult[int]:
        """
        Start (or reopen) a direct conversation with another active user.

        Returns:
            ServiceResult with the conversation id
        """
        denied = require_actor(actor)
        if denied is not None:
            return denied

        other_user = cls._get(User.objects.filter(is_active=True), other_user_id)
        if other_user is None:
            return ServiceResult.failure("User not found", error_code=ErrorCode.NOT_FOUND)

        return ConversationService.create_direct(actor, other_user).map(lambda c: c.id)

    @classmethod
    def create_group_conversation(
        cls,
        actor,
        name: str,
        description: str = "",
        participant_ids: Iterable[int] = (),
    ) -> ServiceResult[int]:
        """
        Create a group conversation from user ids.

        Every id must belong to an active user, otherwise nothing is created.

        Returns:
            ServiceResult with the conversation id
        """
        denied = require_actor(actor)
        if denied is not None:
            return denied

        ordered_ids = list(dict.fromkeys(participant_ids))
        users_by_id = User.objects.filter(is_active=True).in_bulk(ordered_ids)
        missing = [user_id for user_id in ordered_ids if user_id not in users_by_id]
        if missing:
            return ServiceResult.failure(
                f"Users not found: {', '.join(str(user_id) for user_id in missing)}",
                error_code=ErrorCode.NOT_FOUND,
            )

        return ConversationService.create_group(
            actor,
            name,
            description,
            [users_by_id[user_id] for user_id in ordered_ids],
        ).map(lambda c: c.id)

    @classmethod
    def send_message(
        cls,
        actor,
        conversation_id,
        content: str,
        reply_to_id: int | None = None,
    ) -> ServiceResult[int]:
        denied = require_actor(actor)
        if denied is not None:
            return denied

        conversation = cls._get_conversation(conversation_id)
        if conversation is None:
            return cls._conversation_not_found()

        return MessageService.send_message(
            actor, conversation, content, reply_to_id
        ).map(lambda m: m.id)

    @classmethod
    def send_file_message(
        cls,
        actor,
        conversation_id,
        blob_ref,
        message_type: str,
        file_name: str | None = None,
        file_size: int | None = None,
        duration: int | None = None,
        reply_to_id: int | None = None,
    ) -> ServiceResult[int]:
        denied = require_actor(actor)
        if denied is not None:
            return denied

        conversation = cls._get_conversation(conversation_id)
        if conversation is None:
            return cls._conversation_not_found()

        attachment = BlobStoreService.get_stored_file(blob_ref)
        if attachment is None:
            return ServiceResult.failure("Attachment not found", error_code=ErrorCode.NOT_FOUND)

        return MessageService.send_file_message(
            actor,
            conversation,
            attachment,
            message_type,
            file_name=file_name,
            file_size=file_size,
            duration=duration,
            reply_to_id=reply_to_id,
        ).map(lambda m: m.id)

    @classmethod
    def mark_read(cls, actor, conversation_id) -> ServiceResult[dict]:
        denied = require_actor(actor)
        if denied is not None:
            return denied

        conversation = cls._get_conversation(conversation_id)
        if conversation is None:
            return cls._conversation_not_found()

        return ReadReceiptService.mark_read(actor, conversation).map(
            lambda count: {"marked_count": count}
        )

    @classmethod
    def delete_message(cls, actor, message_id) -> ServiceResult[dict]:
        denied = require_actor(actor)
        if denied is not None:
            return denied

        message = cls._get_message(message_id)
        return MessageService.delete_message(actor, message).map(
            lambda _: {"success": True}
        )

    @classmethod
    def edit_message(cls, actor, message_id, content: str) -> ServiceResult[dict]:
        denied = require_actor(actor)
        if denied is not None:
            return denied

        message = cls._get_message(message_id)
        return MessageService.edit_message(actor, message, content).map(
            lambda _: {"success": True}
        )

    @classmethod
    def request_upload_target(cls, actor) -> ServiceResult[dict]:
        """Issue a blob upload target for an attachment (see BlobStoreService)."""
        denied = require_actor(actor)
        if denied is not None:
            return denied
        return BlobStoreService.issue_upload_target(actor)
