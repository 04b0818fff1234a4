"""Document storage.

Layout under the documents directory:
    documents/
    ├── manifest.json          # Document registry and metadata
    └── {document_id}/
        ├── {original filename}
        └── extracted.txt      # Text pulled out of the PDF
"""

import hashlib
import asyncio
import json
import shutil
from collections import defaultdict
from datetime import datetime
from pathlib import Path
from typing import Any
from uuid import uuid4

import aiofiles
import aiofiles.os
import structlog

logger = structlog.get_logger()

EXTRACTED_TEXT_FILE = "extracted.txt"

_file_locks: dict[Path, asyncio.Lock] = defaultdict(asyncio.Lock)


def compute_checksum(content: bytes) -> str:
    """Compute SHA-256 checksum of content."""
    return hashlib.sha256(content).hexdigest()


def file_lock(path: Path) -> asyncio.Lock:
    """Lock serializing read-modify-write cycles on one JSON file."""
    return _file_locks[path.resolve()]


async def write_json_atomic(path: Path, data: dict[str, Any]) -> None:
    """Write JSON beside ``path`` and swap it in, so readers never see a partial file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(f"{path.name}.tmp")

    async with aiofiles.open(tmp_path, "w") as f:
        await f.write(json.dumps(data, indent=2))

    await aiofiles.os.replace(tmp_path, path)


# ============ Manifest ============

async def load_manifest(documents_dir: Path) -> dict[str, Any]:
    """Load or create the document manifest."""
    manifest_path = documents_dir / "manifest.json"

    if manifest_path.exists():
        async with aiofiles.open(manifest_path, "r") as f:
            content = await f.read()
            return json.loads(content)

    return {
        "schema_version": "1.0",
        "created_at": datetime.utcnow().isoformat(),
        "updated_at": datetime.utcnow().isoformat(),
        "documents": {},
    }


async def save_manifest(documents_dir: Path, manifest: dict[str, Any]) -> None:
    """Save the document manifest."""
    manifest["updated_at"] = datetime.utcnow().isoformat()
    await write_json_atomic(documents_dir / "manifest.json", manifest)

    logger.debug("Manifest saved", documents=len(manifest["documents"]))


# ============ Documents ============

async def save_upload(documents_dir: Path, filename: str, content: bytes) -> tuple[str, Path]:
    """
    Write an uploaded file under a fresh document id.

    Returns:
        Tuple of (document_id, path to the stored file)
    """
    document_id = str(uuid4())
    doc_dir = documents_dir / document_id
    doc_dir.mkdir(parents=True, exist_ok=True)

    file_path = doc_dir / Path(filename).name
    async with aiofiles.open(file_path, "wb") as f:
        await f.write(content)

    return document_id, file_path


async def register_document(
    documents_dir: Path,
    document_id: str,
    original_name: str,
    content: bytes,
    extracted_text: str,
) -> dict[str, Any]:
    """Store extracted text and add the document to the manifest."""
    doc_dir = documents_dir / document_id
    doc_dir.mkdir(parents=True, exist_ok=True)

    async with aiofiles.open(doc_dir / EXTRACTED_TEXT_FILE, "w", encoding="utf-8") as f:
        await f.write(extracted_text)

    record = {
        "document_id": document_id,
        "original_name": original_name,
        "size_bytes": len(content),
        "checksum": compute_checksum(content),
        "text_length": len(extracted_text),
        "created_at": datetime.utcnow().isoformat(),
    }

    async with file_lock(documents_dir / "manifest.json"):
        manifest = await load_manifest(documents_dir)
        manifest["documents"][document_id] = record
        await save_manifest(documents_dir, manifest)

    logger.info("Document registered", document_id=document_id, filename=original_name)
    return record


async def discard_upload(documents_dir: Path, document_id: str) -> None:
    """Remove files written for a document that never got registered."""
    shutil.rmtree(documents_dir / document_id, ignore_errors=True)


async def get_document(documents_dir: Path, document_id: str) -> dict[str, Any] | None:
    manifest = await load_manifest(documents_dir)
    return manifest["documents"].get(document_id)


async def list_documents(documents_dir: Path) -> list[dict[str, Any]]:
    """All registered documents, newest first."""
    manifest = await load_manifest(documents_dir)
    return sorted(
        manifest["documents"].values(),
        key=lambda doc: doc["created_at"],
        reverse=True,
    )


async def load_document_text(documents_dir: Path, document_id: str) -> str:
    """Read back the text extracted at upload time."""
    async with aiofiles.open(
        documents_dir / document_id / EXTRACTED_TEXT_FILE, "r", encoding="utf-8"
    ) as f:
        return await f.read()


async def delete_document(documents_dir: Path, document_id: str) -> bool:
    """
    Remove a document and its files.

    Returns:
        True if the document existed
    """
    async with file_lock(documents_dir / "manifest.json"):
        manifest = await load_manifest(documents_dir)
        if document_id not in manifest["documents"]:
            return False

        del manifest["documents"][document_id]
        await save_manifest(documents_dir, manifest)

    shutil.rmtree(documents_dir / document_id, ignore_errors=True)

    logger.info("Document deleted", document_id=document_id)
    return True
