"""Chat and message storage.

Each chat is one JSON file, ``chats/{chat_id}.json``, holding the chat
metadata and its messages in creation order.
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Literal
from uuid import uuid4

import aiofiles
import structlog

from pdfchat.modules.ingestion.storage import file_lock, write_json_atomic

logger = structlog.get_logger()

Role = Literal["user", "assistant"]


def _chat_path(chats_dir: Path, chat_id: str) -> Path:
    return chats_dir / f"{Path(chat_id).name}.json"


async def save_chat(chats_dir: Path, chat: dict[str, Any]) -> None:
    await write_json_atomic(_chat_path(chats_dir, chat["chat_id"]), chat)


async def load_chat(chats_dir: Path, chat_id: str) -> dict[str, Any] | None:
    path = _chat_path(chats_dir, chat_id)
    if not path.exists():
        return None

    async with aiofiles.open(path, "r") as f:
        return json.loads(await f.read())


async def create_chat(chats_dir: Path, document_id: str, title: str) -> dict[str, Any]:
    now = datetime.utcnow().isoformat()
    chat = {
        "chat_id": str(uuid4()),
        "document_id": document_id,
        "title": title,
        "created_at": now,
        "updated_at": now,
        "messages": [],
    }
    await save_chat(chats_dir, chat)

    logger.info("Chat created", chat_id=chat["chat_id"], document_id=document_id)
    return chat


async def list_chats(chats_dir: Path, document_id: str | None = None) -> list[dict[str, Any]]:
    """All chats, most recently updated first."""
    if not chats_dir.exists():
        return []

    chats = []
    for path in chats_dir.glob("*.json"):
        try:
            async with aiofiles.open(path, "r") as f:
                chat = json.loads(await f.read())
        except FileNotFoundError:
            # Deleted since the directory listing
            continue
        if document_id is None or chat["document_id"] == document_id:
            chats.append(chat)

    return sorted(chats, key=lambda chat: chat["updated_at"], reverse=True)


async def append_message(
    chats_dir: Path,
    chat_id: str,
    role: Role,
    content: str,
) -> dict[str, Any]:
    """
    Append a message to a chat and touch its ``updated_at``.

    Returns:
        The stored message record

    Raises:
        KeyError: If the chat does not exist
    """
    async with file_lock(_chat_path(chats_dir, chat_id)):
        chat = await load_chat(chats_dir, chat_id)
        if chat is None:
            raise KeyError(chat_id)

        now = datetime.utcnow().isoformat()
        record = {
            "message_id": str(uuid4()),
            "chat_id": chat_id,
            "role": role,
            "content": content,
            "created_at": now,
        }
        chat["messages"].append(record)
        chat["updated_at"] = now

        await save_chat(chats_dir, chat)

    return record


async def delete_chat(chats_dir: Path, chat_id: str) -> bool:
    path = _chat_path(chats_dir, chat_id)
    async with file_lock(path):
        if not path.exists():
            return False
        path.unlink()

    logger.info("Chat deleted", chat_id=chat_id)
    return True


async def delete_chats_for_document(chats_dir: Path, document_id: str) -> int:
    """Remove every chat about a document. Returns how many were removed."""
    removed = 0
    for chat in await list_chats(chats_dir, document_id=document_id):
        if await delete_chat(chats_dir, chat["chat_id"]):
            removed += 1
    return removed
