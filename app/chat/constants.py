"""
Constants and configuration for chat module features.

This module centralizes configuration values for:
- Message listing and content limits
- Conversation preview text
- Preview labels for attachment messages

Import example:
    from chat.constants import MESSAGE_CONFIG, PREVIEW_LABELS
"""

from typing import Final


# =============================================================================
# Message Configuration
# =============================================================================


class MESSAGE_CONFIG:
    """Configuration for message operations."""

    # Listing
    DEFAULT_LIST_LIMIT: Final[int] = 50
    MIN_LIST_LIMIT: Final[int] = 1
    MAX_LIST_LIMIT: Final[int] = 100

    # Content limits
    MAX_CONTENT_LENGTH: Final[int] = 10000  # Characters

    # Conversation.last_message is truncated to this many characters
    PREVIEW_LENGTH: Final[int] = 100


# =============================================================================
# Preview Labels
# =============================================================================


class PREVIEW_LABELS:
    """
    Text shown in place of content for attachment messages.

    Used for the conversation preview (last_message) and for reply
    previews that point at an attachment message.
    """

    IMAGE: Final[str] = "📷 Image"
    VOICE: Final[str] = "🎤 Voice message"
    FILE: Final[str] = "📎 {file_name}"
    FILE_FALLBACK_NAME: Final[str] = "File"


# =============================================================================
# System Messages
# =============================================================================


class SYSTEM_MESSAGES:
    """Text of system messages posted on conversation events."""

    GROUP_CREATED: Final[str] = 'Group "{name}" was created'
