"""Pydantic schemas for API requests and responses."""

from datetime import datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field


# ============ Health ============

class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


class ComponentHealth(BaseModel):
    name: str
    status: HealthStatus
    latency_ms: float | None = None
    message: str | None = None
    details: dict[str, Any] = {}


class HealthResponse(BaseModel):
    status: HealthStatus
    version: str
    environment: str
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    components: list[ComponentHealth] = []


# ============ Documents ============

class DocumentInfo(BaseModel):
    document_id: str
    original_name: str
    size_bytes: int
    checksum: str
    text_length: int
    created_at: datetime


class DocumentUploadResponse(BaseModel):
    message: str
    document: DocumentInfo


class DocumentListResponse(BaseModel):
    documents: list[DocumentInfo]


# ============ Chats ============

class MessageInfo(BaseModel):
    message_id: str
    role: Literal["user", "assistant"]
    content: str
    created_at: datetime


class ChatCreateRequest(BaseModel):
    document_id: str = Field(..., min_length=1)


class ChatSummary(BaseModel):
    chat_id: str
    document_id: str
    title: str
    created_at: datetime
    updated_at: datetime
    last_message: MessageInfo | None = None


class ChatDetail(BaseModel):
    chat_id: str
    document_id: str
    title: str
    created_at: datetime
    updated_at: datetime
    messages: list[MessageInfo] = []


class ChatListResponse(BaseModel):
    chats: list[ChatSummary]


class SendMessageRequest(BaseModel):
    question: str = Field(..., max_length=10000)


class SendMessageResponse(BaseModel):
    message: str
    user_message: MessageInfo
    assistant_message: MessageInfo
    fallback: bool = False  # True when generation failed and a placeholder was stored
    error_type: str | None = None


# ============ Metrics ============

class LatencyMetrics(BaseModel):
    count: int
    p50_ms: float
    p90_ms: float
    p99_ms: float
    avg_ms: float


class MetricsResponse(BaseModel):
    requests_total: int
    requests_by_endpoint: dict[str, int] = {}
    latency: LatencyMetrics | None = None
    generation_outcomes: dict[str, int] = {}
    since: datetime
