"""
BlobStoreService: upload targets, byte storage and URL resolution.

Provides:
- Issuing an upload target (a pending StoredFile plus the URL to send bytes to)
- Storing uploaded bytes through Django's default storage backend
- Resolving a blob reference to an access URL

The storage backend is whatever STORAGES["default"] configures (local
filesystem in development, an object store in deployment); this service
only talks to it through default_storage.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.files.storage import default_storage
from django.urls import reverse
from django.utils import timezone

from core.services import BaseService, ErrorCode, ServiceResult
from authentication.services import require_actor
from media.models import StoredFile

if TYPE_CHECKING:
    from django.core.files.uploadedfile import UploadedFile

    from authentication.models import User


class BlobStoreService(BaseService):
    """
    Service for the blob store.

    Usage:
        result = BlobStoreService.issue_upload_target(user)
        # client PUTs bytes to result.data["target"]
        url = BlobStoreService.resolve_url(result.data["ref"])
    """

    @classmethod
    def issue_upload_target(cls, uploader: User) -> ServiceResult[dict]:
        """
        Create a pending StoredFile and return where to upload its bytes.

        Returns:
            ServiceResult with {"target": <upload URL path>, "ref": <uuid str>}
        """
        denied = require_actor(uploader)
        if denied is not None:
            return denied

        stored_file = StoredFile.objects.create(uploader=uploader)
        target = reverse("media:upload", kwargs={"ref": stored_file.pk})

        cls.get_logger().debug(
            f"Issued upload target {stored_file.pk} to user {uploader.id}"
        )
        return ServiceResult.success({"target": target, "ref": str(stored_file.pk)})

    @classmethod
    def store_upload(
        cls,
        stored_file: StoredFile,
        uploader: User,
        uploaded_file: UploadedFile,
    ) -> ServiceResult[StoredFile]:
        """
        Store bytes at a previously issued upload target.

        Error codes:
            NOT_AUTHORIZED: Target was issued to another user
            INVALID_OPERATION: Target already received its bytes
            INVALID_ARGUMENT: File exceeds MEDIA_MAX_UPLOAD_SIZE
        """
        if stored_file.uploader_id != uploader.id:
            cls.get_logger().warning(
                f"User {uploader.id} attempted upload to target {stored_file.pk} "
                f"owned by user {stored_file.uploader_id}"
            )
            return ServiceResult.failure(
                "Upload target belongs to another user",
                error_code=ErrorCode.NOT_AUTHORIZED,
            )

        if stored_file.status != StoredFile.Status.PENDING:
            return ServiceResult.failure(
                "Upload target has already been used",
                error_code=ErrorCode.INVALID_OPERATION,
            )

        max_size = settings.MEDIA_MAX_UPLOAD_SIZE
        if uploaded_file.size > max_size:
            return ServiceResult.failure(
                f"File exceeds maximum upload size of {max_size} bytes",
                error_code=ErrorCode.INVALID_ARGUMENT,
            )

        filename = uploaded_file.name or "upload"
        with cls.atomic():
            stored_file.file.save(filename, uploaded_file, save=False)
            stored_file.original_filename = filename
            stored_file.content_type = getattr(uploaded_file, "content_type", "") or ""
            stored_file.file_size = uploaded_file.size
            stored_file.status = StoredFile.Status.UPLOADED
            stored_file.uploaded_at = timezone.now()
            stored_file.save()

        cls.get_logger().info(
            f"Stored {stored_file.file_size} bytes for blob {stored_file.pk}"
        )
        return ServiceResult.success(stored_file)

    @classmethod
    def get_stored_file(cls, ref) -> StoredFile | None:
        """
        Look up a StoredFile by reference.

        Args:
            ref: StoredFile instance, UUID, or UUID string

        Returns:
            StoredFile or None if the reference is malformed or unknown
        """
        if isinstance(ref, StoredFile):
            return ref
        if ref is None:
            return None
        try:
            return StoredFile.objects.filter(pk=uuid.UUID(str(ref))).first()
        except (ValueError, ValidationError):
            return None

    @classmethod
    def resolve_url(cls, ref) -> str | None:
        """
        Resolve a blob reference to an access URL.

        Returns:
            Storage URL for uploaded blobs, None for pending or unknown refs
        """
        stored_file = cls.get_stored_file(ref)
        if stored_file is None or not stored_file.is_uploaded:
            return None
        return default_storage.url(stored_file.file.name)
