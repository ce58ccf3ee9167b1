"""
API views for the blob store.

Provides:
- UploadTargetView: Issue an upload target
- BlobUploadView: Receive the bytes for an upload target
- StoredFileDetailView: Get stored blob details with its access URL
"""

from __future__ import annotations

from django.shortcuts import get_object_or_404
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.views import service_error_response
from media.models import StoredFile
from media.serializers import (
    BlobUploadSerializer,
    StoredFileSerializer,
    UploadTargetSerializer,
)
from media.services import BlobStoreService


class UploadTargetView(APIView):
    """
    Issue an upload target.

    POST /api/v1/media/upload-targets/
        Returns {"target": "/api/v1/media/uploads/<ref>/", "ref": "<ref>"}.
        The client sends the bytes to target, then uses ref wherever a
        blob reference is expected (e.g. file messages in chat).
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="issue_upload_target",
        summary="Issue upload target",
        tags=["Media - Upload"],
        request=None,
        responses={201: UploadTargetSerializer},
    )
    def post(self, request):
        result = BlobStoreService.issue_upload_target(request.user)
        if not result.success:
            return service_error_response(result)
        return Response(result.data, status=status.HTTP_201_CREATED)


class BlobUploadView(APIView):
    """
    Receive the bytes for an upload target.

    PUT|POST /api/v1/media/uploads/{ref}/
        Content-Type: multipart/form-data with a single "file" field.

    Response:
        200 OK: Stored blob details
        400 Bad Request: Missing file, oversized file, or target already used
        403 Forbidden: Target was issued to another user
        404 Not Found: Unknown target
    """

    permission_classes = [IsAuthenticated]
    parser_classes = [MultiPartParser, FormParser]

    @extend_schema(
        operation_id="upload_blob",
        summary="Upload bytes to target",
        tags=["Media - Upload"],
        request={"multipart/form-data": BlobUploadSerializer},
        responses={
            200: StoredFileSerializer,
            400: OpenApiResponse(description="Validation error"),
            403: OpenApiResponse(description="Target belongs to another user"),
            404: OpenApiResponse(description="Unknown upload target"),
        },
    )
    def put(self, request, ref):
        stored_file = get_object_or_404(StoredFile, pk=ref)

        serializer = BlobUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = BlobStoreService.store_upload(
            stored_file,
            request.user,
            serializer.validated_data["file"],
        )
        if not result.success:
            return service_error_response(result)

        return Response(
            StoredFileSerializer(result.data, context={"request": request}).data
        )

    @extend_schema(
        operation_id="upload_blob_post",
        summary="Upload bytes to target (form POST)",
        tags=["Media - Upload"],
        request={"multipart/form-data": BlobUploadSerializer},
        responses={200: StoredFileSerializer},
    )
    def post(self, request, ref):
        return self.put(request, ref)


class StoredFileDetailView(APIView):
    """
    Get details for a stored blob.

    GET /api/v1/media/files/{ref}/
        Only the uploader can see the record; other users get 404 so that
        references are not probeable.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="get_stored_file",
        summary="Get stored file",
        tags=["Media - Files"],
        responses={200: StoredFileSerializer},
    )
    def get(self, request, ref):
        stored_file = get_object_or_404(StoredFile, pk=ref, uploader=request.user)
        return Response(
            StoredFileSerializer(stored_file, context={"request": request}).data
        )
