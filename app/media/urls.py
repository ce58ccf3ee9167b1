"""
URL configuration for media app.

Media - Upload:
    POST /upload-targets/           - Issue upload target
    PUT|POST /uploads/{ref}/        - Upload bytes to target

Media - Files:
    GET /files/{ref}/               - Get stored file details
"""

from django.urls import path

from media.views import BlobUploadView, StoredFileDetailView, UploadTargetView

app_name = "media"

urlpatterns = [
    path("upload-targets/", UploadTargetView.as_view(), name="upload-target"),
    path("uploads/<uuid:ref>/", BlobUploadView.as_view(), name="upload"),
    path("files/<uuid:ref>/", StoredFileDetailView.as_view(), name="file-detail"),
]
