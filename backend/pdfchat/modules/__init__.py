"""Core modules."""

from pdfchat.modules import generation, ingestion, chat, observability

__all__ = ["generation", "ingestion", "chat", "observability"]
