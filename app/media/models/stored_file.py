"""
StoredFile model: the blob store's record of one uploaded object.

Provides:
- UUID primary key, handed to clients as the opaque blob reference
- Two-step lifecycle: a pending upload target, then the stored bytes
- Original filename, content type and size captured at upload time
"""

from __future__ import annotations

from django.conf import settings
from django.db import models
from django.utils import timezone

from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel


def blob_upload_path(instance: "StoredFile", filename: str) -> str:
    """
    Generate the storage path for an uploaded blob.

    Pattern: blobs/YYYY/MM/<uuid>/<filename>
    """
    now = timezone.now()
    return f"blobs/{now.year}/{now.month:02d}/{instance.pk}/{filename}"


class StoredFile(UUIDPrimaryKeyMixin, BaseModel):
    """
    One object in the blob store.

    A row is created PENDING when an upload target is issued, and becomes
    UPLOADED once bytes arrive at that target. Only uploaded rows resolve
    to a URL.

    Attributes:
        uploader: User the upload target was issued to
        file: Stored bytes (empty while pending)
        original_filename: Client-side filename of the upload
        content_type: Content type reported by the client
        file_size: Size in bytes
        status: PENDING or UPLOADED
        uploaded_at: When the bytes were stored
    """

    class Status(models.TextChoices):
        PENDING = "pending", "Pending"
        UPLOADED = "uploaded", "Uploaded"

    uploader = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="stored_files",
        help_text="User the upload target was issued to",
    )

    file = models.FileField(
        upload_to=blob_upload_path,
        max_length=500,
        blank=True,
        help_text="Stored bytes (empty while pending)",
    )

    original_filename = models.CharField(
        max_length=255,
        blank=True,
        help_text="Original filename from the upload",
    )

    content_type = models.CharField(
        max_length=127,
        blank=True,
        help_text="Content type reported at upload",
    )

    file_size = models.PositiveBigIntegerField(
        default=0,
        help_text="Size of the stored bytes",
    )

    status = models.CharField(
        max_length=10,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True,
        help_text="Upload state",
    )

    uploaded_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the bytes were stored",
    )

    class Meta:
        db_table = "media_stored_file"
        ordering = ["-created_at"]
        indexes = [
            models.Index(
                fields=["uploader", "status"],
                name="media_stored_uploader_idx",
            ),
        ]

    def __str__(self) -> str:
        name = self.original_filename or "(pending)"
        return f"StoredFile {self.pk}: {name} [{self.status}]"

    @property
    def is_uploaded(self) -> bool:
        return self.status == self.Status.UPLOADED and bool(self.file)
