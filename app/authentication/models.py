"""
Authentication models.

This module defines the identity models the rest of the platform builds on:
- User: Custom user model with email-based authentication (slim, auth-focused)
- Profile: Display and presence data (OneToOne with User)

Related files:
    - managers.py: Custom user manager for email-based creation
    - services.py: Display identity resolution, user directory, presence
    - signals.py: Auto-create profile on user creation
"""

from django.conf import settings
from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.db import models

from core.models import BaseModel
from authentication.managers import UserManager


class User(AbstractBaseUser, PermissionsMixin):
    """
    Custom User model using email as the primary identifier.

    Profile data (name, avatar, platform role, presence) lives in Profile.

    Fields:
        email: Primary identifier, unique, used for login
        email_verified: Whether the user's email has been verified
        is_active: Whether the user account is active
        is_staff: Whether the user can access Django admin
        date_joined: When the user account was created
        updated_at: When the user record was last modified

    Usage:
        user = User.objects.create_user(
            email="user@example.com",
            password="securepassword",
        )
    """

    email = models.EmailField(
        unique=True,
        db_index=True,
        max_length=254,
        help_text="User's email address (primary identifier)",
    )

    email_verified = models.BooleanField(
        default=False,
        help_text="Whether the user's email has been verified",
    )

    is_active = models.BooleanField(
        default=True,
        help_text="Whether this user account is active. Deselect instead of deleting.",
    )
    is_staff = models.BooleanField(
        default=False,
        help_text="Whether the user can access the admin site.",
    )

    date_joined = models.DateTimeField(
        auto_now_add=True,
        help_text="When the user account was created",
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="When the user record was last modified",
    )

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    objects = UserManager()

    class Meta:
        verbose_name = "user"
        verbose_name_plural = "users"
        ordering = ["-date_joined"]

    def __str__(self):
        return self.email

    def get_full_name(self):
        """
        Return the user's full name from profile.

        Returns:
            str: Full name from profile, or email if no profile/name set.
        """
        try:
            return self.profile.full_name or self.email
        except Profile.DoesNotExist:
            return self.email

    def get_short_name(self):
        """Return first name from profile, or the email local part."""
        try:
            return self.profile.first_name or self.email.split("@")[0]
        except Profile.DoesNotExist:
            return self.email.split("@")[0]


class PlatformRole(models.TextChoices):
    """
    Platform-wide role used for dashboards.

    Independent of the per-conversation admin/member role in chat.
    """

    ADMIN = "admin", "Admin"
    EMPLOYEE = "employee", "Employee"
    CLIENT = "client", "Client"


class Profile(BaseModel):
    """
    Display and presence data for a user.

    Fields:
        user: OneToOne link to User (also serves as primary key)
        first_name: User's first name
        last_name: User's last name
        avatar_url: URL of the user's avatar image
        role: Platform-wide role (admin, employee, client)
        is_online: Last reported presence
        last_seen: When presence was last reported
        timezone: User's preferred timezone

    Note:
        Profile is automatically created via signals when a User is created.
    """

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="profile",
        primary_key=True,
        help_text="User this profile belongs to",
    )

    first_name = models.CharField(
        max_length=150,
        blank=True,
        help_text="User's first name",
    )
    last_name = models.CharField(
        max_length=150,
        blank=True,
        help_text="User's last name",
    )

    avatar_url = models.URLField(
        max_length=500,
        blank=True,
        default="",
        help_text="URL of the user's avatar image",
    )

    role = models.CharField(
        max_length=10,
        choices=PlatformRole.choices,
        default=PlatformRole.EMPLOYEE,
        db_index=True,
        help_text="Platform-wide role (admin, employee, client)",
    )

    is_online = models.BooleanField(
        default=False,
        help_text="Whether the user last reported being online",
    )
    last_seen = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the user last reported presence",
    )

    timezone = models.CharField(
        max_length=50,
        default="UTC",
        help_text="User's preferred timezone (e.g., 'America/New_York')",
    )

    class Meta:
        db_table = "authentication_profile"
        verbose_name = "profile"
        verbose_name_plural = "profiles"

    def __str__(self):
        return self.full_name or str(self.user)

    @property
    def full_name(self):
        """Return full name or empty string."""
        return f"{self.first_name} {self.last_name}".strip()
