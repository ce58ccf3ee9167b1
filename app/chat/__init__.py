"""
Chat app for direct and group messaging.

This app handles:
- Conversations (direct and group) and their participants
- Text, image, voice, file and system messages with replies
- Message edits and tombstone deletes
- Read receipts and unread counts

Related apps:
    - authentication: Users and display identities for participants
    - media: StoredFile blobs behind attachment messages
    - notifications: Notices when someone starts or adds you to a conversation

Usage:
    from chat.services import ChatService

    result = ChatService.create_group_conversation(
        actor=user,
        name="Launch Team",
        description="",
        participant_ids=[other_user.id],
    )

    result = ChatService.send_message(user, result.data, "kickoff at 9am")
"""
