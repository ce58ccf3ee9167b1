"""
URL configuration for authentication app.

URL structure:
    /api/v1/auth/token/            - Obtain JWT pair (email + password)
    /api/v1/auth/token/refresh/    - Refresh access token
    /api/v1/auth/me/               - Current user (GET/PATCH)
    /api/v1/auth/users/            - User directory (GET)
    /api/v1/auth/presence/         - Presence report (POST)
"""

from django.urls import path
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from authentication.views import CurrentUserView, PresenceView, UserDirectoryView

app_name = "authentication"

urlpatterns = [
    path("token/", TokenObtainPairView.as_view(), name="token-obtain"),
    path("token/refresh/", TokenRefreshView.as_view(), name="token-refresh"),
    path("me/", CurrentUserView.as_view(), name="me"),
    path("users/", UserDirectoryView.as_view(), name="user-directory"),
    path("presence/", PresenceView.as_view(), name="presence"),
]
