"""
Test configuration and fixtures for authentication tests.

This module provides:
- User fixtures with and without display names
- API client helpers for authenticated requests

Usage:
    def test_example(user, authenticated_client):
        response = authenticated_client.get("/api/v1/auth/me/")
        assert response.status_code == 200
"""

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.tests.factories import UserFactory


# =============================================================================
# User Fixtures
# =============================================================================


@pytest.fixture
def user(db):
    """Create a user with a full display name."""
    return UserFactory(
        email="ada@example.com",
        profile__first_name="Ada",
        profile__last_name="Lovelace",
    )


@pytest.fixture
def nameless_user(db):
    """Create a user whose profile has no name set."""
    return UserFactory(email="nameless@example.com")


@pytest.fixture
def other_user(db):
    """Create a second named user."""
    return UserFactory(
        email="grace@example.com",
        profile__first_name="Grace",
        profile__last_name="Hopper",
    )


@pytest.fixture
def deactivated_user(db):
    """Create a deactivated user (is_active=False) with a name."""
    return UserFactory(is_active=False, profile__first_name="Gone")


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
def api_client():
    """Unauthenticated API client for public endpoints."""
    return APIClient()


@pytest.fixture
def authenticated_client(user):
    """API client authenticated with a JWT for the default user fixture."""
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")
    return client


@pytest.fixture
def authenticated_client_factory(db):
    """
    Factory to create authenticated clients for any user.

    Usage:
        def test_example(authenticated_client_factory, some_user):
            client = authenticated_client_factory(some_user)
    """

    def _make_client(user):
        client = APIClient()
        refresh = RefreshToken.for_user(user)
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")
        return client

    return _make_client
