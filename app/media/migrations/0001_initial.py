# Generated manually - initial blob store table

import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models

import media.models.stored_file


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="StoredFile",
            fields=[
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for this record",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "file",
                    models.FileField(
                        blank=True,
                        help_text="Stored bytes (empty while pending)",
                        max_length=500,
                        upload_to=media.models.stored_file.blob_upload_path,
                    ),
                ),
                (
                    "original_filename",
                    models.CharField(
                        blank=True,
                        help_text="Original filename from the upload",
                        max_length=255,
                    ),
                ),
                (
                    "content_type",
                    models.CharField(
                        blank=True,
                        help_text="Content type reported at upload",
                        max_length=127,
                    ),
                ),
                (
                    "file_size",
                    models.PositiveBigIntegerField(
                        default=0, help_text="Size of the stored bytes"
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[("pending", "Pending"), ("uploaded", "Uploaded")],
                        db_index=True,
                        default="pending",
                        help_text="Upload state",
                        max_length=10,
                    ),
                ),
                (
                    "uploaded_at",
                    models.DateTimeField(
                        blank=True, help_text="When the bytes were stored", null=True
                    ),
                ),
                (
                    "uploader",
                    models.ForeignKey(
                        help_text="User the upload target was issued to",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="stored_files",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "media_stored_file",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["uploader", "status"], name="media_stored_uploader_idx"
                    )
                ],
            },
        ),
    ]
