"""PDF text extraction."""

from pathlib import Path

import structlog

logger = structlog.get_logger()


class EmptyDocumentError(ValueError):
    """The PDF parsed but yielded no extractable text."""


async def load_pdf(file_path: Path) -> str:
    """Load text content from PDF file."""
    try:
        from pypdf import PdfReader

        reader = PdfReader(file_path)
        text_parts = []

        for page_num, page in enumerate(reader.pages):
            text = page.extract_text()
            if text and text.strip():
                text_parts.append(f"[Page {page_num + 1}]\n{text}")
    except Exception as e:
        logger.error("Failed to load PDF", path=str(file_path), error=str(e))
        raise

    if not text_parts:
        raise EmptyDocumentError("Could not extract text from PDF")

    logger.info("Extracted PDF text", path=str(file_path), pages=len(text_parts))
    return "\n\n".join(text_parts)
