"""Document ingestion module."""

from pdfchat.modules.ingestion.loaders import load_pdf, EmptyDocumentError
from pdfchat.modules.ingestion.storage import (
    compute_checksum,
    load_manifest,
    save_manifest,
    save_upload,
    register_document,
    discard_upload,
    get_document,
    list_documents,
    load_document_text,
    delete_document,
)

__all__ = [
    "load_pdf",
    "EmptyDocumentError",
    # Storage
    "compute_checksum",
    "load_manifest",
    "save_manifest",
    "save_upload",
    "register_document",
    "discard_upload",
    "get_document",
    "list_documents",
    "load_document_text",
    "delete_document",
]
