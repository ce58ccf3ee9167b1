"""
ViewSets for chat API.

This module provides REST API endpoints for the chat system:
- ConversationViewSet: Conversation listing, creation, mark-read and messages
- MessageViewSet: Edit and delete a single message
- UploadTargetView: Blob upload target for attachment messages

URL Structure:
    /api/v1/chat/conversations/                    GET
    /api/v1/chat/conversations/direct/             POST
    /api/v1/chat/conversations/group/              POST
    /api/v1/chat/conversations/{id}/read/          POST
    /api/v1/chat/conversations/{id}/messages/      GET, POST
    /api/v1/chat/messages/{id}/                    PATCH, DELETE
    /api/v1/chat/upload-target/                    POST

Design Decisions:
    - Views only parse requests and render results; every rule lives in
      ChatService, which receives request.user as the actor
    - Failed ServiceResults are rendered by core.views.service_error_response
"""

from __future__ import annotations

from drf_spectacular.utils import (
    OpenApiParameter,
    OpenApiResponse,
    extend_schema,
)
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from chat.models import MessageType
from chat.serializers import (
    ConversationCreatedSerializer,
    ConversationSummarySerializer,
    DirectConversationCreateSerializer,
    GroupConversationCreateSerializer,
    MarkReadResponseSerializer,
    MessageEditSerializer,
    MessageListQuerySerializer,
    MessageSendSerializer,
    MessageSentSerializer,
    MessageViewSerializer,
    SuccessResponseSerializer,
)
from chat.services import ChatService
from core.views import service_error_response
from media.serializers import UploadTargetSerializer

ERROR_RESPONSES = {
    400: OpenApiResponse(description="Invalid argument or operation"),
    403: OpenApiResponse(description="Not a participant / not the sender"),
    404: OpenApiResponse(description="Referenced record not found"),
}


class ConversationViewSet(viewsets.ViewSet):
    """
    ViewSet for conversation operations.

    list:
        All active conversations of the current user, most recent first,
        with unread counts and last message preview.

    direct:
        Start a direct conversation. Returns the existing one if the pair
        already has a conversation.

    group:
        Create a group with the caller as admin.

    read:
        Mark everything in the conversation as read.

    messages:
        GET lists the newest messages (oldest first); POST sends one.
    """

    permission_classes = [IsAuthenticated]
    lookup_value_regex = r"\d+"

    @extend_schema(
        operation_id="list_conversations",
        summary="List conversations",
        tags=["Chat - Conversations"],
        responses={200: ConversationSummarySerializer(many=True)},
    )
    def list(self, request):
        result = ChatService.list_conversations(request.user)
        if not result.success:
            return service_error_response(result)
        return Response(ConversationSummarySerializer(result.data, many=True).data)

    @extend_schema(
        operation_id="create_direct_conversation",
        summary="Start direct conversation",
        tags=["Chat - Conversations"],
        request=DirectConversationCreateSerializer,
        responses={201: ConversationCreatedSerializer, **ERROR_RESPONSES},
    )
    @action(detail=False, methods=["post"])
    def direct(self, request):
        serializer = DirectConversationCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = ChatService.create_direct_conversation(
            request.user,
            serializer.validated_data["other_user_id"],
        )
        if not result.success:
            return service_error_response(result)

        return Response(
            {"conversation_id": result.data},
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(
        operation_id="create_group_conversation",
        summary="Create group conversation",
        tags=["Chat - Conversations"],
        request=GroupConversationCreateSerializer,
        responses={201: ConversationCreatedSerializer, **ERROR_RESPONSES},
    )
    @action(detail=False, methods=["post"])
    def group(self, request):
        serializer = GroupConversationCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = ChatService.create_group_conversation(
            request.user,
            name=data["name"],
            description=data["description"],
            participant_ids=data["participant_ids"],
        )
        if not result.success:
            return service_error_response(result)

        return Response(
            {"conversation_id": result.data},
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(
        operation_id="mark_conversation_read",
        summary="Mark conversation as read",
        tags=["Chat - Conversations"],
        request=None,
        responses={200: MarkReadResponseSerializer, **ERROR_RESPONSES},
    )
    @action(detail=True, methods=["post"])
    def read(self, request, pk=None):
        result = ChatService.mark_read(request.user, pk)
        if not result.success:
            return service_error_response(result)
        return Response(result.data)

    @extend_schema(
        methods=["GET"],
        operation_id="list_messages",
        summary="List messages",
        tags=["Chat - Messages"],
        parameters=[
            OpenApiParameter(
                name="limit",
                type=int,
                location=OpenApiParameter.QUERY,
                description="Number of newest messages to return (1-100, default 50)",
                required=False,
            ),
        ],
        responses={200: MessageViewSerializer(many=True), **ERROR_RESPONSES},
    )
    @extend_schema(
        methods=["POST"],
        operation_id="send_message",
        summary="Send message",
        description=(
            "Send a text, image, voice or file message. The body is keyed by "
            "`type`; attachment messages reference a blob uploaded through "
            "the upload-target endpoint."
        ),
        tags=["Chat - Messages"],
        request=MessageSendSerializer,
        responses={201: MessageSentSerializer, **ERROR_RESPONSES},
    )
    @action(detail=True, methods=["get", "post"])
    def messages(self, request, pk=None):
        if request.method == "POST":
            return self._send_message(request, pk)

        query = MessageListQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        result = ChatService.list_messages(
            request.user,
            pk,
            limit=query.validated_data.get("limit"),
        )
        if not result.success:
            return service_error_response(result)
        return Response(MessageViewSerializer(result.data, many=True).data)

    def _send_message(self, request, conversation_id):
        serializer = MessageSendSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        if data["type"] == MessageType.TEXT:
            result = ChatService.send_message(
                request.user,
                conversation_id,
                data["content"],
                reply_to_id=data["reply_to_id"],
            )
        else:
            result = ChatService.send_file_message(
                request.user,
                conversation_id,
                data["blob_ref"],
                data["type"],
                file_name=data.get("file_name"),
                file_size=data.get("file_size"),
                duration=data.get("duration"),
                reply_to_id=data["reply_to_id"],
            )

        if not result.success:
            return service_error_response(result)

        return Response({"message_id": result.data}, status=status.HTTP_201_CREATED)


class MessageViewSet(viewsets.ViewSet):
    """
    ViewSet for a single message.

    partial_update:
        Edit the content of your own text message.

    destroy:
        Delete your own message. The message is hidden, not erased.
    """

    permission_classes = [IsAuthenticated]
    lookup_value_regex = r"\d+"

    @extend_schema(
        operation_id="edit_message",
        summary="Edit message",
        tags=["Chat - Messages"],
        request=MessageEditSerializer,
        responses={200: SuccessResponseSerializer, **ERROR_RESPONSES},
    )
    def partial_update(self, request, pk=None):
        serializer = MessageEditSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = ChatService.edit_message(
            request.user,
            pk,
            serializer.validated_data["content"],
        )
        if not result.success:
            return service_error_response(result)
        return Response(result.data)

    @extend_schema(
        operation_id="delete_message",
        summary="Delete message",
        tags=["Chat - Messages"],
        responses={200: SuccessResponseSerializer, **ERROR_RESPONSES},
    )
    def destroy(self, request, pk=None):
        result = ChatService.delete_message(request.user, pk)
        if not result.success:
            return service_error_response(result)
        return Response(result.data)


class UploadTargetView(APIView):
    """
    Request an upload target for an attachment.

    POST /api/v1/chat/upload-target/
        Returns {"target": <upload URL>, "ref": <blob ref>}
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="request_chat_upload_target",
        summary="Request upload target",
        tags=["Chat - Messages"],
        request=None,
        responses={200: UploadTargetSerializer},
    )
    def post(self, request):
        result = ChatService.request_upload_target(request.user)
        if not result.success:
            return service_error_response(result)
        return Response(result.data)
