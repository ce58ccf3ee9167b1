"""
Media app: blob store for chat attachments.

This app provides:
- StoredFile model referenced by a UUID "blob ref"
- Upload targets that receive bytes in a second request
- URL resolution for uploaded blobs through default_storage
"""
