"""
Serializers for authentication models.

This module provides DRF serializers for:
- DisplayIdentity (resolved name/avatar/presence, reused by chat)
- User (current user with profile data)
- Profile updates
- Directory entries and presence reports
"""

from rest_framework import serializers

from authentication.models import Profile, User
from authentication.services import resolve_display_identity


class DisplayIdentitySerializer(serializers.Serializer):
    """Read-only rendering of a DisplayIdentity dataclass."""

    id = serializers.IntegerField(allow_null=True)
    name = serializers.CharField()
    avatar = serializers.CharField(allow_null=True)
    is_online = serializers.BooleanField()
    last_seen = serializers.DateTimeField(allow_null=True)


class UserSerializer(serializers.ModelSerializer):
    """
    Serializer for the current user.

    Flattens the profile's display and presence fields for convenience.
    """

    full_name = serializers.SerializerMethodField()
    first_name = serializers.CharField(source="profile.first_name", read_only=True)
    last_name = serializers.CharField(source="profile.last_name", read_only=True)
    avatar_url = serializers.CharField(source="profile.avatar_url", read_only=True)
    role = serializers.CharField(source="profile.role", read_only=True)
    is_online = serializers.BooleanField(source="profile.is_online", read_only=True)
    last_seen = serializers.DateTimeField(source="profile.last_seen", read_only=True)

    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "full_name",
            "first_name",
            "last_name",
            "avatar_url",
            "role",
            "is_online",
            "last_seen",
            "email_verified",
            "date_joined",
        ]
        read_only_fields = fields

    def get_full_name(self, obj) -> str:
        """Return the user's full name from profile."""
        return obj.get_full_name()


class ProfileUpdateSerializer(serializers.ModelSerializer):
    """
    Serializer for updating the caller's own profile.

    The platform role is managed by administrators and is not writable here.
    """

    class Meta:
        model = Profile
        fields = ["first_name", "last_name", "avatar_url", "timezone"]

    def validate_first_name(self, value: str) -> str:
        return value.strip()

    def validate_last_name(self, value: str) -> str:
        return value.strip()


class DirectoryUserSerializer(serializers.ModelSerializer):
    """User directory entry: id, email and resolved display identity."""

    name = serializers.SerializerMethodField()
    avatar = serializers.SerializerMethodField()
    is_online = serializers.SerializerMethodField()
    last_seen = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ["id", "email", "name", "avatar", "is_online", "last_seen"]
        read_only_fields = fields

    def get_name(self, obj) -> str:
        return resolve_display_identity(obj).name

    def get_avatar(self, obj) -> str | None:
        return resolve_display_identity(obj).avatar

    def get_is_online(self, obj) -> bool:
        return resolve_display_identity(obj).is_online

    def get_last_seen(self, obj):
        last_seen = resolve_display_identity(obj).last_seen
        return serializers.DateTimeField().to_representation(last_seen) if last_seen else None


class PresenceUpdateSerializer(serializers.Serializer):
    """Presence report from a client."""

    is_online = serializers.BooleanField(help_text="Whether the user is online")
