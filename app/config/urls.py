"""
URL configuration for the messaging backend.

The `urlpatterns` list routes URLs to views. This is the root URL configuration
that includes all app-specific routes.

URL Structure:
    /                              - ReDoc API documentation
    /admin/                        - Django admin interface
    /health/                       - Health check endpoint (for load balancers, Docker)
    /schema/                       - OpenAPI schema (YAML)
    /api/v1/auth/                  - Authentication and user endpoints
        token/                     - Obtain JWT pair
        token/refresh/             - Refresh access token
        me/                        - Current user (GET/PATCH)
        users/                     - User directory
        presence/                  - Report online/offline
    /api/v1/chat/                  - Chat endpoints
        conversations/             - Conversation list
        conversations/direct/      - Start direct conversation
        conversations/group/       - Create group conversation
        conversations/{id}/read/   - Mark conversation as read
        conversations/{id}/messages/ - Message list/send
        messages/{id}/             - Message edit/delete
        upload-target/             - Attachment upload target
    /api/v1/notifications/         - Notification endpoints
        unread-count/              - Unread notification count
        {id}/read/                 - Mark one notification read
        read-all/                  - Mark all notifications read
    /api/v1/media/                 - Blob store endpoints
        upload-targets/            - Issue upload target
        uploads/{ref}/             - Upload bytes to a target
        files/{ref}/               - Stored file details

For more information, see:
https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""

from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView

from core.views import health_check

# =============================================================================
# API v1 Routes
# =============================================================================
# All routes here are prefixed with /api/v1/ automatically
api_v1_patterns = [
    path("auth/", include("authentication.urls")),
    path("chat/", include("chat.urls")),
    path("notifications/", include("notifications.urls")),
    path("media/", include("media.urls")),
]

urlpatterns = [
    # Documentation
    path("", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    # Admin
    path("admin/", admin.site.urls),
    # Health check (Docker, Kubernetes, load balancers)
    path("health/", health_check, name="health_check"),
    # API v1
    path("api/v1/", include(api_v1_patterns)),
]

# Uploaded blobs are served by the storage backend in production
if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)

# =============================================================================
# Admin Site Customization
# =============================================================================
admin.site.site_header = "Messaging Admin"
admin.site.site_title = "Messaging Admin Portal"
admin.site.index_title = "Conversations, users and uploads"
