"""
Identity services.

This module is the single place that answers "who is this user reference,
for display purposes":

    resolve_display_identity: Name, avatar and presence for a user
    require_actor: NOT_AUTHENTICATED guard shared by service facades
    UserDirectoryService: Users an actor can start conversations with
    PresenceService: Online/last-seen reporting

Every assembly path (conversation lists, message lists, the user directory)
goes through resolve_display_identity so that naming rules never drift
between call sites.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from django.db.models import Q
from django.utils import timezone

from core.services import BaseService, ErrorCode, ServiceResult

from authentication.models import Profile, User

logger = logging.getLogger(__name__)

UNKNOWN_USER_NAME = "Unknown"


@dataclass(frozen=True)
class DisplayIdentity:
    """
    Resolved display data for a user reference.

    Attributes:
        id: User id (None when the reference is dangling)
        name: Profile full name, else account email, else "Unknown"
        avatar: Avatar URL or None
        is_online: Last reported presence (False when never reported)
        last_seen: When presence was last reported
    """

    id: int | None
    name: str
    avatar: str | None = None
    is_online: bool = False
    last_seen: datetime | None = None


def resolve_display_identity(user: User | None) -> DisplayIdentity:
    """
    Resolve the display identity for a user reference.

    Callers should select_related("profile") (or "<fk>__profile") so this
    does not issue a query per user.

    Args:
        user: User instance, or None for a missing/deleted user

    Returns:
        DisplayIdentity
    """
    if user is None:
        return DisplayIdentity(id=None, name=UNKNOWN_USER_NAME)

    # Reverse one-to-one raises a DoesNotExist that is also an AttributeError
    profile = getattr(user, "profile", None)
    if profile is None:
        return DisplayIdentity(id=user.id, name=user.email or UNKNOWN_USER_NAME)

    return DisplayIdentity(
        id=user.id,
        name=profile.full_name or user.email or UNKNOWN_USER_NAME,
        avatar=profile.avatar_url or None,
        is_online=profile.is_online,
        last_seen=profile.last_seen,
    )


def require_actor(actor) -> ServiceResult | None:
    """
    Reject calls without an authenticated actor.

    Returns:
        ServiceResult.failure(NOT_AUTHENTICATED) or None when the actor is usable
    """
    if actor is None or not getattr(actor, "is_authenticated", False):
        return ServiceResult.failure(
            "Not authenticated",
            error_code=ErrorCode.NOT_AUTHENTICATED,
        )
    return None


class UserDirectoryService(BaseService):
    """
    Lists users an actor can pick as conversation partners.

    Methods:
        list_users: Active users other than the actor that have a profile name
    """

    @classmethod
    def list_users(cls, actor: User) -> ServiceResult[list[User]]:
        """
        List active users other than the actor whose profile carries a name.

        Users that never filled in a name would only show up as an email
        address and are left out.

        Returns:
            ServiceResult with list of User (profile preloaded)
        """
        denied = require_actor(actor)
        if denied is not None:
            return denied

        users = list(
            User.objects.filter(is_active=True)
            .exclude(id=actor.id)
            .filter(Q(profile__first_name__gt="") | Q(profile__last_name__gt=""))
            .select_related("profile")
            .order_by("profile__first_name", "profile__last_name", "id")
        )

        cls.get_logger().debug(f"Listed {len(users)} directory users for {actor.id}")
        return ServiceResult.success(users)


class PresenceService(BaseService):
    """
    Records online/offline presence reported by clients.

    Methods:
        update_presence: Set is_online and stamp last_seen
    """

    @classmethod
    def update_presence(cls, actor: User, is_online: bool) -> ServiceResult[dict]:
        """
        Record the actor's presence.

        last_seen is stamped on every report, online or offline.

        Returns:
            ServiceResult with {"success": True}
        """
        denied = require_actor(actor)
        if denied is not None:
            return denied

        profile, _ = Profile.objects.get_or_create(user=actor)
        profile.is_online = is_online
        profile.last_seen = timezone.now()
        profile.save(update_fields=["is_online", "last_seen", "updated_at"])

        cls.get_logger().debug(
            f"User {actor.id} reported presence online={is_online}"
        )
        return ServiceResult.success({"success": True})
