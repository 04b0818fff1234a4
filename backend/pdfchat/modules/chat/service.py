"""Answering a question about a document, degrading gracefully on failure."""

from dataclasses import dataclass

import structlog

from pdfchat.modules.chat.prompting import build_document_prompt
from pdfchat.modules.generation import GenerationFailed, ResponseGenerator
from pdfchat.modules.observability.metrics import record_generation

logger = structlog.get_logger()

FALLBACK_TEMPLATE = (
    "I'm still setting things up and hit an issue reaching the Gemini API. "
    "Please make sure your GEMINI_API_KEY is valid and has access to at least one "
    "model with generateContent support. Detailed error: {detail}"
)


@dataclass
class AssistantReply:
    content: str
    fallback: bool = False
    error_type: str | None = None


async def answer_question(
    generator: ResponseGenerator,
    document_text: str,
    question: str,
) -> AssistantReply:
    """
    Ask the model about the document.

    Generation failures do not propagate: they become a placeholder reply
    so the user's turn is never lost.
    """
    prompt = build_document_prompt(document_text, question)

    try:
        text = await generator.generate(prompt)
    except GenerationFailed as e:
        logger.error(
            "Gemini generation failed",
            error_type=type(e).__name__,
            status_code=e.status_code,
            error=e.detail,
        )
        record_generation(type(e).__name__)
        return AssistantReply(
            content=FALLBACK_TEMPLATE.format(detail=e.detail),
            fallback=True,
            error_type=type(e).__name__,
        )

    record_generation("success")
    return AssistantReply(content=text)
