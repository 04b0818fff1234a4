"""PDF upload and document endpoints."""

import structlog
from fastapi import APIRouter, File, HTTPException, UploadFile, status
from pypdf.errors import PdfReadError

from pdfchat.config import get_settings
from pdfchat.models.schemas import DocumentInfo, DocumentListResponse, DocumentUploadResponse
from pdfchat.modules.chat import delete_chats_for_document
from pdfchat.modules.ingestion import (
    EmptyDocumentError,
    delete_document,
    discard_upload,
    get_document,
    list_documents,
    load_pdf,
    register_document,
    save_upload,
)
from pdfchat.modules.observability import track_latency

router = APIRouter()
logger = structlog.get_logger()

PDF_CONTENT_TYPE = "application/pdf"


@router.post("", response_model=DocumentUploadResponse, status_code=status.HTTP_201_CREATED)
@track_latency("upload_document")
async def upload_document(
    file: UploadFile = File(..., description="PDF to chat about"),
) -> DocumentUploadResponse:
    """
    Upload a PDF and extract its text.

    The extracted text is stored alongside the original file and is sent
    in full with every question asked in a chat about this document.
    """
    settings = get_settings()

    if file.content_type != PDF_CONTENT_TYPE:
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail="Only PDF files are allowed",
        )

    content = await file.read()
    if not content:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No file uploaded",
        )
    if len(content) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File exceeds {settings.max_upload_mb} MB limit",
        )

    filename = file.filename or "document.pdf"
    document_id, file_path = await save_upload(settings.documents_dir, filename, content)

    logger.info(
        "Uploading document",
        document_id=document_id,
        filename=filename,
        size_bytes=len(content),
    )

    try:
        extracted_text = await load_pdf(file_path)
    except (EmptyDocumentError, PdfReadError) as e:
        await discard_upload(settings.documents_dir, document_id)
        detail = str(e) if isinstance(e, EmptyDocumentError) else "Could not read PDF"
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)

    record = await register_document(
        settings.documents_dir,
        document_id=document_id,
        original_name=filename,
        content=content,
        extracted_text=extracted_text,
    )

    return DocumentUploadResponse(
        message="Document uploaded successfully",
        document=DocumentInfo(**record),
    )


@router.get("", response_model=DocumentListResponse)
async def get_documents() -> DocumentListResponse:
    """List uploaded documents, newest first."""
    settings = get_settings()
    documents = await list_documents(settings.documents_dir)
    return DocumentListResponse(documents=[DocumentInfo(**doc) for doc in documents])


@router.get("/{document_id}", response_model=DocumentInfo)
async def get_document_info(document_id: str) -> DocumentInfo:
    settings = get_settings()
    record = await get_document(settings.documents_dir, document_id)
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")
    return DocumentInfo(**record)


@router.delete("/{document_id}")
async def remove_document(document_id: str) -> dict[str, str]:
    """Delete a document together with every chat about it."""
    settings = get_settings()

    if not await delete_document(settings.documents_dir, document_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")

    removed = await delete_chats_for_document(settings.chats_dir, document_id)
    logger.info("Removed chats for deleted document", document_id=document_id, chats=removed)

    return {"message": "Document deleted successfully"}
