"""
URL configuration for chat API.

URL Structure:
    Conversations:
        /conversations/                     GET
        /conversations/direct/              POST
        /conversations/group/               POST
        /conversations/{id}/read/           POST
        /conversations/{id}/messages/       GET, POST

    Messages:
        /messages/{id}/                     PATCH, DELETE

    Attachments:
        /upload-target/                     POST

All URLs are prefixed with /api/v1/chat/ in the main URL configuration.
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from chat.views import ConversationViewSet, MessageViewSet, UploadTargetView

router = DefaultRouter()
router.register(r"conversations", ConversationViewSet, basename="conversation")
router.register(r"messages", MessageViewSet, basename="message")

app_name = "chat"

urlpatterns = [
    path("", include(router.urls)),
    path("upload-target/", UploadTargetView.as_view(), name="upload-target"),
]
