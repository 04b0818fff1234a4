"""FastAPI dependencies shared across routers."""

from fastapi import Request

from pdfchat.modules.generation import ResponseGenerator


def get_generator(request: Request) -> ResponseGenerator:
    """The process-wide generator created at startup."""
    return request.app.state.generator
