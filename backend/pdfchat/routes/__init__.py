"""API route modules."""

from pdfchat.routes import health, documents, chats, metrics

__all__ = ["health", "documents", "chats", "metrics"]
