"""
Authentication application.

Identity and profile provider for the messaging backend.

Key components:
    - User model: Email-based login
    - Profile model: Name, avatar, platform role and presence
    - resolve_display_identity: Name/avatar/presence for any user reference
    - UserDirectoryService and PresenceService
    - SimpleJWT token endpoints

Usage:
    from authentication.models import User, Profile
    from authentication.services import resolve_display_identity
"""
