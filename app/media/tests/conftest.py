"""
Test fixtures for the blob store.

Provides fixtures for:
- Users and authenticated API clients
- Upload payloads built with SimpleUploadedFile
- A temporary MEDIA_ROOT for every test (blob bytes never touch the repo)
"""

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.tests.factories import UserFactory


@pytest.fixture(autouse=True)
def _isolated_media_root(media_root):
    """Store uploaded bytes under tmp_path."""
    return media_root


@pytest.fixture
def api_client():
    """Unauthenticated API client."""
    return APIClient()


@pytest.fixture
def user(db):
    return UserFactory(email="uploader@example.com", profile__first_name="Uma")


@pytest.fixture
def other_user(db):
    return UserFactory(email="someone-else@example.com", profile__first_name="Sam")


@pytest.fixture
def authenticated_client(user):
    """API client authenticated with a JWT for the default user."""
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")
    return client


@pytest.fixture
def other_client(other_user):
    client = APIClient()
    refresh = RefreshToken.for_user(other_user)
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")
    return client


@pytest.fixture
def sample_pdf():
    """A small PDF upload."""
    return SimpleUploadedFile(
        "quarterly-report.pdf",
        b"%PDF-1.4\n1 0 obj<<>>endobj\ntrailer<<>>\n%%EOF",
        content_type="application/pdf",
    )
