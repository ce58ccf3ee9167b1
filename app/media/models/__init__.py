"""
Media models package.

Exports:
    StoredFile: One uploaded object in the blob store
"""

from media.models.stored_file import StoredFile

__all__ = [
    "StoredFile",
]
