"""Document chat module."""

from pdfchat.modules.chat.prompting import build_document_prompt
from pdfchat.modules.chat.service import AssistantReply, answer_question
from pdfchat.modules.chat.history import (
    create_chat,
    load_chat,
    list_chats,
    append_message,
    delete_chat,
    delete_chats_for_document,
)

__all__ = [
    "build_document_prompt",
    "AssistantReply",
    "answer_question",
    "create_chat",
    "load_chat",
    "list_chats",
    "append_message",
    "delete_chat",
    "delete_chats_for_document",
]
