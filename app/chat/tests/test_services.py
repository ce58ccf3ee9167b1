"""
Tests for chat services.

This module tests:
- ConversationService: direct dedup, group creation, listing and unread counts
- MessageService: membership gating, replies, attachments, edit and delete rules
- ReadReceiptService: mark-read idempotence and unread bookkeeping
- ChatService: actor checks and id resolution

Every failure path is asserted by ErrorCode, not by message text.
"""

from datetime import timedelta

import pytest
from django.contrib.auth.models import AnonymousUser
from django.utils import timezone
from freezegun import freeze_time

from chat.models import (
    Conversation,
    ConversationType,
    DirectConversationPair,
    Message,
    MessageType,
    Participant,
    ParticipantRole,
    ReadReceipt,
)
from chat.services import (
    ChatService,
    ConversationService,
    MessageService,
    ReadReceiptService,
)
from chat.tests.factories import (
    GroupConversationFactory,
    MessageFactory,
    ParticipantFactory,
)
from core.services import ErrorCode
from media.tests.factories import PendingStoredFileFactory, StoredFileFactory


def _participant(conversation, user):
    return Participant.objects.get(conversation=conversation, user=user, is_active=True)


# =============================================================================
# ConversationService
# =============================================================================


@pytest.mark.django_db
class TestCreateDirect:
    """Tests for ConversationService.create_direct."""

    def test_creates_conversation_with_two_members(self, alice, bob):
        result = ConversationService.create_direct(alice, bob)

        assert result.success
        conversation = result.data
        assert conversation.conversation_type == ConversationType.DIRECT
        assert conversation.created_by == alice
        roles = set(conversation.participants.values_list("role", flat=True))
        assert roles == {ParticipantRole.MEMBER}
        assert set(conversation.participants.values_list("user_id", flat=True)) == {
            alice.id,
            bob.id,
        }

    def test_returns_existing_for_either_side(self, alice, bob):
        """
        Direct conversations are unique per pair regardless of who asks.

        Why it matters: a second conversation between the same two people
        would split their history.
        """
        first = ConversationService.create_direct(alice, bob).data
        second = ConversationService.create_direct(bob, alice).data
        third = ConversationService.create_direct(alice, bob).data

        assert first.id == second.id == third.id
        assert Conversation.objects.filter(conversation_type="direct").count() == 1
        assert DirectConversationPair.objects.count() == 1

    def test_rejects_self(self, alice):
        result = ConversationService.create_direct(alice, alice)

        assert not result.success
        assert result.error_code == ErrorCode.INVALID_ARGUMENT
        assert not Conversation.objects.exists()

    def test_concurrent_create_returns_winner(self, alice, bob, mocker):
        """A lost race on the pair constraint returns the winning conversation."""
        winner = ConversationService.create_direct(alice, bob).data
        mocker.patch.object(
            ConversationService,
            "_find_direct",
            side_effect=[None, winner],
        )

        result = ConversationService.create_direct(bob, alice)

        assert result.success
        assert result.data == winner
        assert Conversation.objects.filter(conversation_type="direct").count() == 1

    def test_notifies_other_user_on_commit(
        self, alice, bob, mock_deliver, django_capture_on_commit_callbacks
    ):
        with django_capture_on_commit_callbacks(execute=True):
            conversation = ConversationService.create_direct(alice, bob).data

        mock_deliver.assert_called_once()
        kwargs = mock_deliver.call_args.kwargs
        assert kwargs["recipient_id"] == bob.id
        assert kwargs["related_entity_id"] == str(conversation.id)
        assert "Alice Anders" in kwargs["message"]

    def test_existing_conversation_does_not_notify(
        self, direct, alice, bob, mock_deliver, django_capture_on_commit_callbacks
    ):
        with django_capture_on_commit_callbacks(execute=True):
            ConversationService.create_direct(bob, alice)

        mock_deliver.assert_not_called()


@pytest.mark.django_db
class TestCreateGroup:
    """Tests for ConversationService.create_group."""

    def test_creator_is_admin_and_members_join(self, alice, bob, carol):
        conversation = ConversationService.create_group(
            alice, "Launch Team", participants=[bob, carol]
        ).data

        assert conversation.name == "Launch Team"
        assert _participant(conversation, alice).role == ParticipantRole.ADMIN
        assert _participant(conversation, bob).role == ParticipantRole.MEMBER
        assert _participant(conversation, carol).role == ParticipantRole.MEMBER
        assert conversation.participants.count() == 3

    def test_posts_system_message_as_preview(self, alice, bob):
        """
        A new group starts with a system message that becomes its preview.

        Why it matters: clients show the preview in the conversation list
        before anyone has said anything.
        """
        conversation = ConversationService.create_group(
            alice, "Launch Team", participants=[bob]
        ).data

        message = conversation.messages.get()
        assert message.message_type == MessageType.SYSTEM
        assert message.sender == alice
        assert message.content == 'Group "Launch Team" was created'
        conversation.refresh_from_db()
        assert conversation.last_message == 'Group "Launch Team" was created'
        assert conversation.last_message_at == message.created_at

    def test_creator_and_duplicates_dropped(self, alice, bob):
        conversation = ConversationService.create_group(
            alice, "Pairs", participants=[bob, alice, bob]
        ).data

        assert conversation.participants.count() == 2

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_blank_name_rejected(self, alice, bob, name):
        result = ConversationService.create_group(alice, name, participants=[bob])

        assert result.error_code == ErrorCode.INVALID_ARGUMENT
        assert not Conversation.objects.exists()

    def test_name_and_description_stripped(self, alice):
        conversation = ConversationService.create_group(
            alice, "  Launch Team ", description=" weekly sync  "
        ).data

        assert conversation.name == "Launch Team"
        assert conversation.description == "weekly sync"

    def test_creator_alone_is_allowed(self, alice):
        result = ConversationService.create_group(alice, "Notes to self")

        assert result.success
        assert result.data.participants.count() == 1

    def test_notifies_each_member(
        self, alice, bob, carol, mock_deliver, django_capture_on_commit_callbacks
    ):
        with django_capture_on_commit_callbacks(execute=True):
            ConversationService.create_group(alice, "Launch Team", participants=[bob, carol])

        recipients = {call.kwargs["recipient_id"] for call in mock_deliver.call_args_list}
        assert recipients == {bob.id, carol.id}
        assert all(
            call.kwargs["title"] == "Added to Launch Team"
            for call in mock_deliver.call_args_list
        )


@pytest.mark.django_db
class TestListForActor:
    """Tests for ConversationService.list_for_actor."""

    def test_only_active_memberships_in_active_conversations(self, alice, bob, direct, group):
        hidden = GroupConversationFactory(created_by=alice, name="Archived")
        hidden.deactivate()
        left = GroupConversationFactory(created_by=bob, name="Left")
        ParticipantFactory(conversation=left, user=alice).leave()

        ids = [summary.id for summary in ConversationService.list_for_actor(alice).data]

        assert set(ids) == {direct.id, group.id}

    def test_sorted_by_last_message_then_created(self, alice):
        with freeze_time("2026-03-01 09:00"):
            older = GroupConversationFactory(created_by=alice, name="Older")
        with freeze_time("2026-03-01 10:00"):
            newer = GroupConversationFactory(created_by=alice, name="Newer")
        with freeze_time("2026-03-01 11:00"):
            active = GroupConversationFactory(created_by=alice, name="Active")
        with freeze_time("2026-03-01 12:00"):
            MessageService.send_message(alice, older, "still here")

        names = [s.name for s in ConversationService.list_for_actor(alice).data]

        assert names == ["Older", "Active", "Newer"]

    def test_direct_summary_shows_other_participant(self, alice, bob, direct):
        bob.profile.avatar_url = "https://cdn.example.com/bob.png"
        bob.profile.save()

        summary = ConversationService.list_for_actor(alice).data[0]

        assert summary.name == "Bob Berg"
        assert summary.avatar == "https://cdn.example.com/bob.png"
        assert {p.id for p in summary.participants} == {alice.id, bob.id}

    def test_group_summary_uses_group_fields(self, alice, group):
        summary = ConversationService.list_for_actor(alice).data[0]

        assert summary.name == "Design Review"
        assert summary.avatar is None
        assert summary.created_by == alice.id
        roles = {p.id: p.role for p in summary.participants}
        assert roles[alice.id] == ParticipantRole.ADMIN

    def test_unread_count_excludes_own_deleted_and_system(self, alice, bob, group):
        MessageService.create_system_message(group, 'Group "Design Review" was created')
        MessageService.send_message(alice, group, "from alice")
        MessageService.send_message(bob, group, "from bob")
        deleted = MessageService.send_message(bob, group, "oops").data
        MessageService.delete_message(bob, deleted)

        summary = ConversationService.list_for_actor(alice).data[0]

        assert summary.unread_count == 1

    def test_unread_count_matches_single_participant_count(self, alice, bob, carol, group):
        MessageService.send_message(bob, group, "one")
        MessageService.send_message(carol, group, "two")

        summary = ConversationService.list_for_actor(alice).data[0]

        assert summary.unread_count == ReadReceiptService.unread_count(
            _participant(group, alice)
        ) == 2

    def test_query_count_does_not_grow_with_conversations(
        self, alice, bob, django_assert_max_num_queries
    ):
        for index in range(5):
            conversation = GroupConversationFactory(created_by=alice, name=f"Team {index}")
            ParticipantFactory(conversation=conversation, user=bob)
            MessageService.send_message(bob, conversation, f"hello {index}")

        with django_assert_max_num_queries(4):
            result = ConversationService.list_for_actor(alice)

        assert len(result.data) == 5


# =============================================================================
# MessageService
# =============================================================================


@pytest.mark.django_db
class TestSendMessage:
    """Tests for MessageService.send_message."""

    def test_stores_content_and_moves_preview(self, alice, group):
        with freeze_time("2026-03-02 09:00"):
            message = MessageService.send_message(alice, group, "kickoff at 9am").data

        assert message.content == "kickoff at 9am"
        assert message.message_type == MessageType.TEXT
        group.refresh_from_db()
        assert group.last_message == "kickoff at 9am"
        assert group.last_message_at == message.created_at

    def test_content_kept_as_typed(self, alice, group):
        """
        Surrounding whitespace is preserved.

        Why it matters: indented code snippets lose their layout if the
        text is trimmed before it is stored.
        """
        snippet = "    for row in rows:\n        print(row)\n"

        message = MessageService.send_message(alice, group, snippet).data

        message.refresh_from_db()
        assert message.content == snippet

    def test_preview_truncated(self, alice, group):
        MessageService.send_message(alice, group, "y" * 150)

        group.refresh_from_db()
        assert group.last_message == "y" * 100

    @pytest.mark.parametrize("content", ["", "   ", None])
    def test_blank_content_rejected(self, alice, group, content):
        result = MessageService.send_message(alice, group, content)

        assert result.error_code == ErrorCode.INVALID_ARGUMENT
        assert not Message.objects.exists()

    def test_non_participant_rejected(self, outsider, group):
        """
        Only active participants may post.

        Why it matters: conversation ids are guessable integers.
        """
        result = MessageService.send_message(outsider, group, "let me in")

        assert result.error_code == ErrorCode.NOT_AUTHORIZED

    def test_former_participant_rejected(self, bob, group):
        _participant(group, bob).leave()

        result = MessageService.send_message(bob, group, "bye")

        assert result.error_code == ErrorCode.NOT_AUTHORIZED

    def test_inactive_conversation_rejected(self, alice, group):
        group.deactivate()

        result = MessageService.send_message(alice, group, "anyone?")

        assert result.error_code == ErrorCode.NOT_AUTHORIZED

    def test_reply_in_same_conversation(self, alice, bob, group):
        original = MessageService.send_message(alice, group, "kickoff at 9am").data

        reply = MessageService.send_message(bob, group, "works", reply_to_id=original.id).data

        assert reply.reply_to == original

    def test_reply_to_other_conversation_rejected(self, alice, bob, group, direct):
        elsewhere = MessageService.send_message(alice, direct, "psst").data

        result = MessageService.send_message(bob, group, "re", reply_to_id=elsewhere.id)

        assert result.error_code == ErrorCode.INVALID_ARGUMENT
        assert not group.messages.exists()

    def test_reply_to_unknown_id_rejected(self, alice, group):
        result = MessageService.send_message(alice, group, "re", reply_to_id=999999)

        assert result.error_code == ErrorCode.INVALID_ARGUMENT


@pytest.mark.django_db
class TestSendFileMessage:
    """Tests for MessageService.send_file_message."""

    def test_image_defaults_metadata_from_blob(self, alice, group):
        blob = StoredFileFactory(uploader=alice, original_filename="whiteboard.jpg", file_size=8)

        message = MessageService.send_file_message(alice, group, blob, MessageType.IMAGE).data

        assert message.attachment == blob
        assert message.file_name == "whiteboard.jpg"
        assert message.file_size == 8
        assert message.content == ""
        group.refresh_from_db()
        assert group.last_message == "📷 Image"

    def test_file_preview_uses_file_name(self, alice, group):
        blob = StoredFileFactory(uploader=alice)

        MessageService.send_file_message(
            alice, group, blob, MessageType.FILE, file_name="q3.pdf", file_size=2048
        )

        group.refresh_from_db()
        assert group.last_message == "📎 q3.pdf"

    def test_duration_kept_for_voice_only(self, alice, group):
        blob = StoredFileFactory(uploader=alice)

        voice = MessageService.send_file_message(
            alice, group, blob, MessageType.VOICE, duration=14
        ).data
        image = MessageService.send_file_message(
            alice, group, blob, MessageType.IMAGE, duration=14
        ).data

        assert voice.duration == 14
        assert image.duration is None

    def test_attachment_uploaded_by_someone_else_is_accepted(self, alice, bob, group):
        blob = StoredFileFactory(uploader=bob)

        result = MessageService.send_file_message(alice, group, blob, MessageType.IMAGE)

        assert result.success

    @pytest.mark.parametrize("message_type", [MessageType.TEXT, MessageType.SYSTEM, "video"])
    def test_non_attachment_type_rejected(self, alice, group, message_type):
        blob = StoredFileFactory(uploader=alice)

        result = MessageService.send_file_message(alice, group, blob, message_type)

        assert result.error_code == ErrorCode.INVALID_ARGUMENT

    def test_pending_blob_rejected(self, alice, group):
        blob = PendingStoredFileFactory(uploader=alice)

        result = MessageService.send_file_message(alice, group, blob, MessageType.FILE)

        assert result.error_code == ErrorCode.INVALID_ARGUMENT
        assert not Message.objects.exists()

    def test_missing_blob_not_found(self, alice, group):
        result = MessageService.send_file_message(alice, group, None, MessageType.FILE)

        assert result.error_code == ErrorCode.NOT_FOUND

    def test_non_participant_checked_first(self, outsider, group):
        result = MessageService.send_file_message(outsider, group, None, MessageType.FILE)

        assert result.error_code == ErrorCode.NOT_AUTHORIZED


@pytest.mark.django_db
class TestListMessages:
    """Tests for MessageService.list_messages."""

    def test_oldest_first(self, alice, bob, group):
        with freeze_time("2026-03-02 09:00"):
            MessageService.send_message(alice, group, "first")
        with freeze_time("2026-03-02 09:01"):
            MessageService.send_message(bob, group, "second")

        views = MessageService.list_messages(alice, group).data

        assert [v.content for v in views] == ["first", "second"]
        assert views[1].sender.name == "Bob Berg"

    def test_limit_returns_newest_window(self, alice, group):
        start = timezone.now()
        for index in range(5):
            with freeze_time(start + timedelta(minutes=index)):
                MessageService.send_message(alice, group, f"m{index}")

        views = MessageService.list_messages(alice, group, limit=2).data

        assert [v.content for v in views] == ["m3", "m4"]

    @pytest.mark.parametrize("limit,expected", [(0, 1), (-5, 1), (500, 100), (None, 50)])
    def test_limit_clamped(self, alice, group, limit, expected):
        MessageFactory.create_batch(120, conversation=group, sender=alice)

        views = MessageService.list_messages(alice, group, limit=limit).data

        assert len(views) == expected

    def test_deleted_messages_hidden(self, alice, group):
        kept = MessageService.send_message(alice, group, "kept").data
        gone = MessageService.send_message(alice, group, "gone").data
        MessageService.delete_message(alice, gone)

        views = MessageService.list_messages(alice, group).data

        assert [v.id for v in views] == [kept.id]

    def test_reply_preview(self, alice, bob, group):
        original = MessageService.send_message(alice, group, "kickoff at 9am").data
        MessageService.send_message(bob, group, "works", reply_to_id=original.id)

        reply_view = MessageService.list_messages(alice, group).data[-1]

        assert reply_view.reply_to.id == original.id
        assert reply_view.reply_to.sender_name == "Alice Anders"
        assert reply_view.reply_to.content == "kickoff at 9am"

    def test_reply_preview_hidden_once_target_deleted(self, alice, bob, group):
        """
        A reply to a deleted message loses its preview but stays listed.

        Why it matters: a tombstoned message's content must not leak back
        through replies.
        """
        original = MessageService.send_message(alice, group, "secret plan").data
        reply = MessageService.send_message(bob, group, "agreed", reply_to_id=original.id).data
        MessageService.delete_message(alice, original)

        views = MessageService.list_messages(bob, group).data

        assert [v.id for v in views] == [reply.id]
        assert views[0].reply_to is None

    def test_attachment_url_resolved(self, alice, group):
        blob = StoredFileFactory(uploader=alice)
        MessageService.send_file_message(alice, group, blob, MessageType.IMAGE)

        view = MessageService.list_messages(alice, group).data[0]

        assert view.attachment_url
        assert view.attachment_url.endswith(".jpg")

    def test_includes_read_receipts(self, alice, bob, group):
        MessageService.send_message(alice, group, "kickoff at 9am")
        ReadReceiptService.mark_read(bob, group)

        view = MessageService.list_messages(alice, group).data[0]

        assert [(r.user_id, r.user_name) for r in view.read_receipts] == [(bob.id, "Bob Berg")]

    def test_non_participant_rejected(self, outsider, group):
        result = MessageService.list_messages(outsider, group)

        assert result.error_code == ErrorCode.NOT_AUTHORIZED


@pytest.mark.django_db
class TestEditMessage:
    """Tests for MessageService.edit_message."""

    @freeze_time("2026-03-02 10:30")
    def test_edit_sets_flags(self, alice, group):
        message = MessageFactory(conversation=group, sender=alice, content="kickoff at 9")

        result = MessageService.edit_message(alice, message, " kickoff at 9am ")

        assert result.success
        message.refresh_from_db()
        assert message.content == " kickoff at 9am "
        assert message.is_edited is True
        assert message.edited_at == timezone.now()

    def test_missing_message(self, alice):
        assert MessageService.edit_message(alice, None, "x").error_code == ErrorCode.NOT_FOUND

    def test_not_sender(self, alice, bob, group):
        message = MessageFactory(conversation=group, sender=alice)

        result = MessageService.edit_message(bob, message, "hijacked")

        assert result.error_code == ErrorCode.NOT_AUTHORIZED
        message.refresh_from_db()
        assert message.is_edited is False

    def test_attachment_message_not_editable(self, alice, group):
        blob = StoredFileFactory(uploader=alice)
        message = MessageService.send_file_message(alice, group, blob, MessageType.IMAGE).data

        result = MessageService.edit_message(alice, message, "caption")

        assert result.error_code == ErrorCode.INVALID_OPERATION

    def test_system_message_not_editable_by_creator(self, alice, group):
        message = MessageService.create_system_message(group, 'Group "Design Review" was created')

        result = MessageService.edit_message(alice, message, "rewritten")

        assert result.error_code == ErrorCode.INVALID_OPERATION

    def test_deleted_message_not_editable(self, alice, group):
        message = MessageFactory(conversation=group, sender=alice)
        message.soft_delete()

        result = MessageService.edit_message(alice, message, "back")

        assert result.error_code == ErrorCode.INVALID_OPERATION

    def test_blank_content_rejected(self, alice, group):
        message = MessageFactory(conversation=group, sender=alice, content="keep")

        result = MessageService.edit_message(alice, message, "   ")

        assert result.error_code == ErrorCode.INVALID_ARGUMENT
        message.refresh_from_db()
        assert message.content == "keep"

    def test_ownership_checked_before_content(self, alice, bob, group):
        message = MessageFactory(conversation=group, sender=alice)

        result = MessageService.edit_message(bob, message, "")

        assert result.error_code == ErrorCode.NOT_AUTHORIZED


@pytest.mark.django_db
class TestDeleteMessage:
    """Tests for MessageService.delete_message."""

    def test_tombstones_own_message(self, alice, group):
        message = MessageFactory(conversation=group, sender=alice, content="oops")

        result = MessageService.delete_message(alice, message)

        assert result.success
        message.refresh_from_db()
        assert message.is_deleted is True
        assert message.content == "oops"

    def test_delete_twice_is_noop(self, alice, group):
        message = MessageFactory(conversation=group, sender=alice)
        MessageService.delete_message(alice, message)
        message.refresh_from_db()
        deleted_at = message.deleted_at

        result = MessageService.delete_message(alice, message)

        assert result.success
        message.refresh_from_db()
        assert message.deleted_at == deleted_at

    def test_not_sender(self, alice, bob, group):
        message = MessageFactory(conversation=group, sender=alice)

        result = MessageService.delete_message(bob, message)

        assert result.error_code == ErrorCode.NOT_AUTHORIZED
        message.refresh_from_db()
        assert message.is_deleted is False

    def test_system_message_not_deletable(self, alice, group):
        message = MessageService.create_system_message(group, 'Group "Design Review" was created')

        result = MessageService.delete_message(alice, message)

        assert result.error_code == ErrorCode.INVALID_OPERATION

    def test_missing_message(self, alice):
        assert MessageService.delete_message(alice, None).error_code == ErrorCode.NOT_FOUND

    def test_preview_unchanged_by_delete(self, alice, group):
        message = MessageService.send_message(alice, group, "regret").data

        MessageService.delete_message(alice, message)

        group.refresh_from_db()
        assert group.last_message == "regret"


# =============================================================================
# ReadReceiptService
# =============================================================================


@pytest.mark.django_db
class TestMarkRead:
    """Tests for ReadReceiptService.mark_read."""

    def test_creates_receipts_for_unread_messages(self, alice, bob, carol, group):
        MessageService.send_message(alice, group, "one")
        MessageService.send_message(carol, group, "two")
        MessageService.send_message(bob, group, "own message")

        result = ReadReceiptService.mark_read(bob, group)

        assert result.data == 2
        assert ReadReceipt.objects.filter(user=bob).count() == 2
        assert ReadReceiptService.unread_count(_participant(group, bob)) == 0

    def test_second_call_creates_nothing(self, alice, bob, group):
        """
        Mark-read is idempotent.

        Why it matters: clients call it every time a conversation is
        opened, and receipts must never be duplicated.
        """
        MessageService.send_message(alice, group, "one")
        ReadReceiptService.mark_read(bob, group)

        result = ReadReceiptService.mark_read(bob, group)

        assert result.data == 0
        assert ReadReceipt.objects.filter(user=bob).count() == 1

    def test_only_new_messages_after_previous_read(self, alice, bob, group):
        with freeze_time("2026-03-02 09:00"):
            MessageService.send_message(alice, group, "one")
        with freeze_time("2026-03-02 09:05"):
            ReadReceiptService.mark_read(bob, group)
        with freeze_time("2026-03-02 09:10"):
            MessageService.send_message(alice, group, "two")
        with freeze_time("2026-03-02 09:15"):
            result = ReadReceiptService.mark_read(bob, group)

        assert result.data == 1
        assert ReadReceipt.objects.filter(user=bob).count() == 2

    def test_skips_system_and_deleted(self, alice, bob, group):
        MessageService.create_system_message(group, 'Group "Design Review" was created')
        gone = MessageService.send_message(alice, group, "gone").data
        MessageService.delete_message(alice, gone)

        result = ReadReceiptService.mark_read(bob, group)

        assert result.data == 0
        assert not ReadReceipt.objects.exists()

    def test_stamps_last_read_at(self, bob, group):
        with freeze_time("2026-03-02 12:00"):
            ReadReceiptService.mark_read(bob, group)
            expected = timezone.now()

        assert _participant(group, bob).last_read_at == expected

    def test_existing_receipt_not_duplicated(self, alice, bob, group):
        message = MessageService.send_message(alice, group, "seen elsewhere").data
        ReadReceipt.objects.create(message=message, user=bob)

        result = ReadReceiptService.mark_read(bob, group)

        assert result.data == 0
        assert ReadReceipt.objects.filter(message=message, user=bob).count() == 1

    def test_non_participant_rejected(self, outsider, group):
        result = ReadReceiptService.mark_read(outsider, group)

        assert result.error_code == ErrorCode.NOT_AUTHORIZED

    def test_inactive_conversation_rejected(self, bob, group):
        group.deactivate()

        result = ReadReceiptService.mark_read(bob, group)

        assert result.error_code == ErrorCode.NOT_AUTHORIZED


@pytest.mark.django_db
class TestUnreadCount:
    def test_counts_grow_with_each_message_from_others(self, alice, bob, group):
        participant = _participant(group, bob)

        counts = []
        for index in range(3):
            MessageService.send_message(alice, group, f"m{index}")
            counts.append(ReadReceiptService.unread_count(participant))

        assert counts == [1, 2, 3]

    def test_annotation_zero_without_messages(self, alice, group):
        participation = (
            Participant.objects.filter(conversation=group, user=alice)
            .annotate(unread=ReadReceiptService.unread_count_annotation())
            .get()
        )

        assert participation.unread == 0


# =============================================================================
# ChatService
# =============================================================================


@pytest.mark.django_db
class TestChatService:
    """Tests for the actor-facing facade."""

    @pytest.mark.parametrize("actor", [None, AnonymousUser()])
    def test_requires_authenticated_actor(self, actor, group):
        calls = [
            lambda: ChatService.list_conversations(actor),
            lambda: ChatService.list_messages(actor, group.id),
            lambda: ChatService.create_direct_conversation(actor, 1),
            lambda: ChatService.create_group_conversation(actor, "x", "", []),
            lambda: ChatService.send_message(actor, group.id, "hi"),
            lambda: ChatService.send_file_message(actor, group.id, None, "file"),
            lambda: ChatService.mark_read(actor, group.id),
            lambda: ChatService.edit_message(actor, 1, "x"),
            lambda: ChatService.delete_message(actor, 1),
            lambda: ChatService.request_upload_target(actor),
        ]

        for call in calls:
            assert call().error_code == ErrorCode.NOT_AUTHENTICATED

    def test_create_direct_returns_id(self, alice, bob):
        first = ChatService.create_direct_conversation(alice, bob.id)
        second = ChatService.create_direct_conversation(bob, alice.id)

        assert first.success
        assert first.data == second.data

    @pytest.mark.parametrize("other_user_id", [999999, "abc", None])
    def test_create_direct_unknown_user(self, alice, other_user_id):
        result = ChatService.create_direct_conversation(alice, other_user_id)

        assert result.error_code == ErrorCode.NOT_FOUND

    def test_create_direct_inactive_user(self, alice, bob):
        bob.is_active = False
        bob.save()

        result = ChatService.create_direct_conversation(alice, bob.id)

        assert result.error_code == ErrorCode.NOT_FOUND

    def test_create_group_unknown_member_creates_nothing(self, alice, bob):
        result = ChatService.create_group_conversation(
            alice, "Launch Team", "", [bob.id, 999999]
        )

        assert result.error_code == ErrorCode.NOT_FOUND
        assert "999999" in result.error
        assert not Conversation.objects.exists()

    def test_create_group_returns_id(self, alice, bob, carol):
        result = ChatService.create_group_conversation(
            alice, "Launch Team", "", [bob.id, carol.id, bob.id]
        )

        conversation = Conversation.objects.get(pk=result.data)
        assert conversation.participants.count() == 3

    @pytest.mark.parametrize("conversation_id", [999999, "nope"])
    def test_unknown_conversation(self, alice, conversation_id):
        for result in (
            ChatService.list_messages(alice, conversation_id),
            ChatService.send_message(alice, conversation_id, "hi"),
            ChatService.mark_read(alice, conversation_id),
        ):
            assert result.error_code == ErrorCode.NOT_FOUND

    def test_send_and_mark_read_shapes(self, alice, bob, group):
        message_id = ChatService.send_message(alice, group.id, "kickoff at 9am").data

        assert Message.objects.filter(pk=message_id).exists()
        assert ChatService.mark_read(bob, group.id).data == {"marked_count": 1}

    def test_send_file_message_by_ref(self, alice, group):
        blob = StoredFileFactory(uploader=alice)

        result = ChatService.send_file_message(alice, group.id, str(blob.pk), "image")

        assert Message.objects.get(pk=result.data).attachment == blob

    def test_send_file_message_unknown_ref(self, alice, group):
        result = ChatService.send_file_message(
            alice, group.id, "00000000-0000-0000-0000-000000000000", "image"
        )

        assert result.error_code == ErrorCode.NOT_FOUND

    def test_edit_and_delete_shapes(self, alice, group):
        message = MessageFactory(conversation=group, sender=alice)

        assert ChatService.edit_message(alice, message.id, "edited").data == {"success": True}
        assert ChatService.delete_message(alice, message.id).data == {"success": True}

    def test_edit_unknown_message(self, alice):
        assert ChatService.edit_message(alice, 999999, "x").error_code == ErrorCode.NOT_FOUND
        assert ChatService.delete_message(alice, "abc").error_code == ErrorCode.NOT_FOUND

    def test_request_upload_target(self, alice):
        result = ChatService.request_upload_target(alice)

        assert result.success
        assert set(result.data) == {"target", "ref"}
