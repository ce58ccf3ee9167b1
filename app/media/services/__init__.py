"""Media services: the blob store."""

from media.services.blob_store import BlobStoreService

__all__ = [
    "BlobStoreService",
]
