"""
Test configuration and fixtures for chat tests.

This module provides:
- Named users (alice, bob, carol, outsider)
- Conversation fixtures (direct and group) with active participants
- JWT-authenticated API clients
- Notification delivery patched out (mock_deliver)

Usage:
    def test_example(alice, group, client_for):
        response = client_for(alice).get(f"/api/v1/chat/conversations/{group.id}/messages/")
        assert response.status_code == 200
"""

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.tests.factories import UserFactory
from chat.tests.factories import (
    DirectConversationFactory,
    GroupConversationFactory,
    ParticipantFactory,
)


# =============================================================================
# User Fixtures
# =============================================================================


@pytest.fixture
def alice(db):
    return UserFactory(
        email="alice@example.com",
        profile__first_name="Alice",
        profile__last_name="Anders",
    )


@pytest.fixture
def bob(db):
    return UserFactory(
        email="bob@example.com",
        profile__first_name="Bob",
        profile__last_name="Berg",
    )


@pytest.fixture
def carol(db):
    return UserFactory(
        email="carol@example.com",
        profile__first_name="Carol",
        profile__last_name="Chen",
    )


@pytest.fixture
def outsider(db):
    """A user who is not a participant in any fixture conversation."""
    return UserFactory(email="outsider@example.com", profile__first_name="Otto")


# =============================================================================
# Conversation Fixtures
# =============================================================================


@pytest.fixture
def direct(alice, bob):
    """Direct conversation between alice and bob."""
    return DirectConversationFactory(user1=alice, user2=bob)


@pytest.fixture
def group(alice, bob, carol):
    """Group created by alice (admin) with bob and carol as members."""
    conversation = GroupConversationFactory(created_by=alice, name="Design Review")
    ParticipantFactory(conversation=conversation, user=bob)
    ParticipantFactory(conversation=conversation, user=carol)
    return conversation


# =============================================================================
# Side Effects
# =============================================================================


@pytest.fixture(autouse=True)
def mock_deliver(mocker):
    """Keep notification delivery from reaching Celery."""
    return mocker.patch("notifications.tasks.deliver_notification.delay")


@pytest.fixture(autouse=True)
def _isolated_media_root(media_root):
    """Store attachment bytes under tmp_path."""
    return media_root


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
def api_client():
    """Unauthenticated API client."""
    return APIClient()


@pytest.fixture
def client_for(db):
    """
    Factory to create authenticated clients for any user.

    Usage:
        def test_example(client_for, alice):
            response = client_for(alice).get("/api/v1/chat/conversations/")
    """

    def _make_client(user):
        client = APIClient()
        refresh = RefreshToken.for_user(user)
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")
        return client

    return _make_client
