"""Prompt-to-text generation against Gemini with retry and backoff."""

import asyncio
from typing import Awaitable, Callable

import httpx
import structlog

from pdfchat.config import Settings
from pdfchat.modules.generation.backoff import compute_backoff, parse_retry_after
from pdfchat.modules.generation.errors import (
    ConfigurationError,
    EmptyResponseError,
    ModelNotFoundError,
    RetriesExhaustedError,
    RetryableUpstreamError,
    UpstreamError,
)
from pdfchat.modules.generation.gemini_client import GeminiClient
from pdfchat.modules.generation.outcomes import (
    EmptyResponse,
    FatalFailure,
    ModelNotFound,
    RetryableFailure,
    Success,
    classify_response,
)
from pdfchat.modules.generation.resolver import ModelResolver

logger = structlog.get_logger()

Sleep = Callable[[float], Awaitable[None]]


class ResponseGenerator:
    """
    Turns a prompt into text, or raises a ``GenerationFailed`` subclass.

    Each call is stateless: the prompt is sent as a single user message.
    Every attempt and every backoff wait is an await point, so cancelling
    the calling task stops the loop promptly.
    """

    def __init__(
        self,
        client: GeminiClient,
        resolver: ModelResolver,
        max_attempts: int = 3,
        base_delay: float = 1.0,
        max_delay: float = 10.0,
        sleep: Sleep = asyncio.sleep,
    ):
        self.client = client
        self.resolver = resolver
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.max_delay = max_delay
        self._sleep = sleep

    async def generate(self, prompt: str) -> str:
        for attempt in range(self.max_attempts):
            model = await self.resolver.resolve()
            logger.debug("Gemini attempt", model=model, attempt=attempt)

            response = await self.client.generate_content(model, prompt)
            outcome = classify_response(response)

            if isinstance(outcome, Success):
                logger.info("Gemini response generated", model=model, attempt=attempt)
                return outcome.text

            if isinstance(outcome, ModelNotFound):
                if self.resolver.override:
                    raise ModelNotFoundError(outcome.detail, status_code=404)
                # The model may have been retired; rediscover on the next attempt.
                # This still spends an attempt.
                self.resolver.invalidate()
                continue

            if isinstance(outcome, RetryableFailure):
                if attempt == self.max_attempts - 1:
                    raise RetryableUpstreamError(outcome.detail, status_code=outcome.status_code)

                delay = compute_backoff(
                    attempt,
                    parse_retry_after(outcome.retry_after),
                    base_delay=self.base_delay,
                    max_delay=self.max_delay,
                )
                logger.warning(
                    "Gemini retryable failure, backing off",
                    status_code=outcome.status_code,
                    attempt=attempt,
                    delay_seconds=delay,
                )
                await self._sleep(delay)
                continue

            if isinstance(outcome, FatalFailure):
                raise UpstreamError(outcome.detail, status_code=outcome.status_code)

            if isinstance(outcome, EmptyResponse):
                raise EmptyResponseError(outcome.reason, status_code=response.status_code)

            raise TypeError(f"Unhandled generation outcome: {outcome!r}")

        raise RetriesExhaustedError("Gemini API failed after retries")

    async def aclose(self) -> None:
        await self.client.aclose()


def build_generator(
    settings: Settings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ResponseGenerator:
    """
    Wire a generator from settings.

    Raises:
        ConfigurationError: If GEMINI_API_KEY is not set
    """
    if not settings.gemini_api_key:
        raise ConfigurationError("GEMINI_API_KEY is not set in environment variables")

    client = GeminiClient(
        api_key=settings.gemini_api_key,
        base_url=settings.gemini_api_base,
        timeout=settings.gemini_timeout_seconds,
        transport=transport,
    )
    resolver = ModelResolver(client, override=settings.gemini_model)

    return ResponseGenerator(
        client,
        resolver,
        max_attempts=settings.gemini_max_attempts,
        base_delay=settings.gemini_base_delay_seconds,
        max_delay=settings.gemini_max_delay_seconds,
    )
