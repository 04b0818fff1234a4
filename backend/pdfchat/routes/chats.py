"""Chat and message endpoints."""

from typing import Any

import structlog
from fastapi import APIRouter, Depends, HTTPException, status

from pdfchat.config import get_settings
from pdfchat.dependencies import get_generator
from pdfchat.models.schemas import (
    ChatCreateRequest,
    ChatDetail,
    ChatListResponse,
    ChatSummary,
    MessageInfo,
    SendMessageRequest,
    SendMessageResponse,
)
from pdfchat.modules.chat import (
    answer_question,
    append_message,
    create_chat,
    delete_chat,
    list_chats,
    load_chat,
)
from pdfchat.modules.generation import ResponseGenerator
from pdfchat.modules.ingestion import get_document, load_document_text
from pdfchat.modules.observability import track_latency

router = APIRouter()
logger = structlog.get_logger()


def build_summary(chat: dict[str, Any]) -> ChatSummary:
    """Chat listing entry with only the latest message attached."""
    messages = chat.get("messages", [])
    return ChatSummary(
        chat_id=chat["chat_id"],
        document_id=chat["document_id"],
        title=chat["title"],
        created_at=chat["created_at"],
        updated_at=chat["updated_at"],
        last_message=MessageInfo(**messages[-1]) if messages else None,
    )


async def require_chat(chat_id: str) -> dict[str, Any]:
    chat = await load_chat(get_settings().chats_dir, chat_id)
    if chat is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Chat not found")
    return chat


@router.post("", response_model=ChatDetail, status_code=status.HTTP_201_CREATED)
async def start_chat(request: ChatCreateRequest) -> ChatDetail:
    settings = get_settings()

    document = await get_document(settings.documents_dir, request.document_id)
    if document is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")

    chat = await create_chat(
        settings.chats_dir,
        document_id=request.document_id,
        title=f"Chat about {document['original_name']}",
    )
    return ChatDetail(**chat)


@router.get("", response_model=ChatListResponse)
async def get_chats(document_id: str | None = None) -> ChatListResponse:
    """List chats, most recently active first."""
    chats = await list_chats(get_settings().chats_dir, document_id=document_id)
    return ChatListResponse(chats=[build_summary(chat) for chat in chats])


@router.get("/{chat_id}", response_model=ChatDetail)
async def get_chat_messages(chat_id: str) -> ChatDetail:
    chat = await require_chat(chat_id)
    return ChatDetail(**chat)


@router.post("/{chat_id}/messages", response_model=SendMessageResponse)
@track_latency("send_message")
async def send_message(
    chat_id: str,
    request: SendMessageRequest,
    generator: ResponseGenerator = Depends(get_generator),
) -> SendMessageResponse:
    """
    Ask a question about the chat's document.

    The question and the answer are both stored. When Gemini cannot be
    reached the answer is a placeholder describing the failure, and the
    response is still a 200 with ``fallback`` set.
    """
    settings = get_settings()
    question = request.question.strip()

    if not question:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Question is required")

    chat = await require_chat(chat_id)

    try:
        document_text = await load_document_text(settings.documents_dir, chat["document_id"])
    except FileNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")

    logger.info(
        "Answering question",
        chat_id=chat_id,
        document_id=chat["document_id"],
        question_length=len(question),
    )

    user_message = await append_message(settings.chats_dir, chat_id, "user", request.question)

    reply = await answer_question(generator, document_text, question)

    assistant_message = await append_message(settings.chats_dir, chat_id, "assistant", reply.content)

    return SendMessageResponse(
        message="Message sent with fallback" if reply.fallback else "Message sent successfully",
        user_message=MessageInfo(**user_message),
        assistant_message=MessageInfo(**assistant_message),
        fallback=reply.fallback,
        error_type=reply.error_type,
    )


@router.delete("/{chat_id}")
async def remove_chat(chat_id: str) -> dict[str, str]:
    if not await delete_chat(get_settings().chats_dir, chat_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Chat not found")
    return {"message": "Chat deleted successfully"}
