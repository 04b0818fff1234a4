"""Prompt construction for questions about a document."""

DOCUMENT_PROMPT = """Here is the PDF content: 
{document_text}

User question:
{question}

Please provide a clear and helpful answer based on the PDF content above."""


def build_document_prompt(document_text: str, question: str) -> str:
    """Embed the full extracted document text ahead of the user's question."""
    return DOCUMENT_PROMPT.format(document_text=document_text, question=question)
