"""
Serializers for the blob store.

Provides:
- UploadTargetSerializer: Response for a freshly issued upload target
- BlobUploadSerializer: Multipart body carrying the bytes for a target
- StoredFileSerializer: Read-only serializer for stored blob details
"""

from __future__ import annotations

from rest_framework import serializers

from media.models import StoredFile
from media.services import BlobStoreService


class UploadTargetSerializer(serializers.Serializer):
    """Where to send bytes, and the reference to use once they are stored."""

    target = serializers.CharField(help_text="URL path to upload the bytes to")
    ref = serializers.UUIDField(help_text="Opaque blob reference")


class BlobUploadSerializer(serializers.Serializer):
    """
    Serializer for the bytes sent to an upload target.

    Size limits are enforced by BlobStoreService.store_upload so that the
    same rule applies however the bytes arrive.
    """

    file = serializers.FileField(
        required=True,
        allow_empty_file=False,
        help_text="The file to upload",
    )


class StoredFileSerializer(serializers.ModelSerializer):
    """
    Read-only serializer for StoredFile.

    Includes the resolved access URL, null while the upload is pending.
    """

    ref = serializers.UUIDField(source="id", read_only=True)
    url = serializers.SerializerMethodField()

    class Meta:
        model = StoredFile
        fields = [
            "ref",
            "original_filename",
            "content_type",
            "file_size",
            "status",
            "uploaded_at",
            "created_at",
            "url",
        ]
        read_only_fields = fields

    def get_url(self, obj: StoredFile) -> str | None:
        url = BlobStoreService.resolve_url(obj)
        request = self.context.get("request")
        if url and request is not None and url.startswith("/"):
            return request.build_absolute_uri(url)
        return url
