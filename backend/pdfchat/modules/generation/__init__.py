"""Gemini response generation module."""

from pdfchat.modules.generation.errors import (
    GenerationFailed,
    ConfigurationError,
    NoModelsAvailableError,
    ModelNotFoundError,
    RetryableUpstreamError,
    UpstreamError,
    EmptyResponseError,
    RetriesExhaustedError,
)
from pdfchat.modules.generation.gemini_client import GeminiClient
from pdfchat.modules.generation.resolver import ModelResolver, normalize_model_name
from pdfchat.modules.generation.generator import ResponseGenerator, build_generator

__all__ = [
    "GenerationFailed",
    "ConfigurationError",
    "NoModelsAvailableError",
    "ModelNotFoundError",
    "RetryableUpstreamError",
    "UpstreamError",
    "EmptyResponseError",
    "RetriesExhaustedError",
    "GeminiClient",
    "ModelResolver",
    "normalize_model_name",
    "ResponseGenerator",
    "build_generator",
]
