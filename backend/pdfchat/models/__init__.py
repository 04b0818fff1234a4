"""Pydantic models and schemas."""

from pdfchat.models.schemas import (
    HealthResponse,
    DocumentInfo,
    DocumentUploadResponse,
    DocumentListResponse,
    MessageInfo,
    ChatCreateRequest,
    ChatSummary,
    ChatDetail,
    ChatListResponse,
    SendMessageRequest,
    SendMessageResponse,
    MetricsResponse,
)

__all__ = [
    "HealthResponse",
    "DocumentInfo",
    "DocumentUploadResponse",
    "DocumentListResponse",
    "MessageInfo",
    "ChatCreateRequest",
    "ChatSummary",
    "ChatDetail",
    "ChatListResponse",
    "SendMessageRequest",
    "SendMessageResponse",
    "MetricsResponse",
]
