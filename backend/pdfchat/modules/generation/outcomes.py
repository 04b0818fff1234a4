"""Classification of a single generateContent response.

Every HTTP response from the API maps to exactly one variant of
``GenerationOutcome``. The generator branches on the variant, never on raw
status codes.
"""

from dataclasses import dataclass

import httpx

RETRYABLE_STATUS_CODES = frozenset({429, 503})


@dataclass(frozen=True)
class Success:
    text: str


@dataclass(frozen=True)
class RetryableFailure:
    status_code: int
    detail: str
    retry_after: str | None = None  # Raw Retry-After header value


@dataclass(frozen=True)
class FatalFailure:
    status_code: int
    detail: str


@dataclass(frozen=True)
class ModelNotFound:
    detail: str


@dataclass(frozen=True)
class EmptyResponse:
    reason: str


GenerationOutcome = Success | RetryableFailure | FatalFailure | ModelNotFound | EmptyResponse


def error_detail(response: httpx.Response) -> str:
    return f"Gemini API error: {response.status_code} - {response.text}"


def extract_text(payload: object) -> str | None:
    """Pull ``candidates[0].content.parts[0].text`` out of a response body."""
    try:
        text = payload["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return None
    return text if isinstance(text, str) else None


def classify_response(response: httpx.Response) -> GenerationOutcome:
    """Map a generateContent HTTP response onto an outcome variant."""
    if response.status_code == 404:
        return ModelNotFound(detail=error_detail(response))

    if not response.is_success:
        if response.status_code in RETRYABLE_STATUS_CODES:
            return RetryableFailure(
                status_code=response.status_code,
                detail=error_detail(response),
                retry_after=response.headers.get("Retry-After"),
            )
        return FatalFailure(status_code=response.status_code, detail=error_detail(response))

    try:
        payload = response.json()
    except ValueError:
        return EmptyResponse(reason="Gemini API returned a malformed response")

    text = extract_text(payload)
    if not text:
        return EmptyResponse(reason="Gemini API returned an empty response")

    return Success(text=text)
