"""Django admin configuration for media app."""

from django.contrib import admin

from media.models import StoredFile


@admin.register(StoredFile)
class StoredFileAdmin(admin.ModelAdmin):
    """Admin configuration for StoredFile model."""

    list_display = [
        "id",
        "original_filename",
        "content_type",
        "file_size",
        "uploader",
        "status",
        "created_at",
    ]
    list_filter = ["status", "content_type"]
    search_fields = ["original_filename", "uploader__email"]
    readonly_fields = ["id", "file_size", "uploaded_at", "created_at", "updated_at"]
    raw_id_fields = ["uploader"]
    date_hierarchy = "created_at"
    ordering = ["-created_at"]
