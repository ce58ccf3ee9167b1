"""
Tests for authentication models and the user manager.

Covers:
- UserManager.create_user / create_superuser
- Automatic profile creation
- Name helpers on User and Profile
"""

import pytest

from authentication.models import PlatformRole, Profile, User
from authentication.tests.factories import UserFactory


@pytest.mark.django_db
class TestUserManager:
    """Tests for email-based user creation."""

    def test_create_user_normalizes_email_and_hashes_password(self):
        user = User.objects.create_user(email="Someone@EXAMPLE.com", password="pw-123456")

        assert user.email == "Someone@example.com"
        assert user.check_password("pw-123456")
        assert user.is_staff is False
        assert user.is_superuser is False

    def test_create_user_without_email_raises(self):
        with pytest.raises(ValueError, match="Email"):
            User.objects.create_user(email="", password="pw")

    def test_create_user_without_password_is_unusable(self):
        user = User.objects.create_user(email="nopw@example.com")

        assert user.has_usable_password() is False

    def test_create_superuser_sets_flags(self):
        user = User.objects.create_superuser(email="root@example.com", password="pw")

        assert user.is_staff is True
        assert user.is_superuser is True
        assert user.email_verified is True

    def test_create_superuser_rejects_non_staff(self):
        with pytest.raises(ValueError, match="is_staff"):
            User.objects.create_superuser(
                email="root@example.com", password="pw", is_staff=False
            )


@pytest.mark.django_db
class TestProfile:
    """Tests for the auto-created profile."""

    def test_profile_created_with_user(self):
        """
        Every new user gets a profile row.

        Why it matters: display identity resolution reads user.profile for
        every sender and participant.
        """
        user = UserFactory()

        profile = Profile.objects.get(user=user)
        assert profile.role == PlatformRole.EMPLOYEE
        assert profile.is_online is False
        assert profile.last_seen is None

    def test_full_name_strips_missing_parts(self):
        user = UserFactory(profile__first_name="Ada")

        assert user.profile.full_name == "Ada"

    def test_get_full_name_falls_back_to_email(self):
        user = UserFactory(email="plain@example.com")

        assert user.get_full_name() == "plain@example.com"

    def test_get_short_name_uses_email_local_part(self):
        user = UserFactory(email="plain@example.com")

        assert user.get_short_name() == "plain"
