"""
Test configuration and fixtures for notification tests.

Usage:
    def test_example(user, unread_notification, authenticated_client):
        response = authenticated_client.get("/api/v1/notifications/")
"""

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.tests.factories import UserFactory
from notifications.tests.factories import NotificationFactory


@pytest.fixture
def user(db):
    return UserFactory(email="recipient@example.com", profile__first_name="Rita")


@pytest.fixture
def other_user(db):
    return UserFactory(email="bystander@example.com", profile__first_name="Ben")


@pytest.fixture
def unread_notification(user):
    return NotificationFactory(recipient=user, title="Added to Launch Team")


@pytest.fixture
def read_notification(user):
    return NotificationFactory(recipient=user, is_read=True)


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def authenticated_client(user):
    """API client authenticated with a JWT for the default user."""
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")
    return client


@pytest.fixture
def mock_deliver(mocker):
    """Patch the delivery task's delay so nothing is enqueued."""
    return mocker.patch("notifications.tasks.deliver_notification.delay")
