"""Typed failures raised by the Gemini response generator."""


class GenerationFailed(Exception):
    """Base class for every failure surfaced by the generation core."""

    def __init__(self, detail: str, status_code: int | None = None):
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code


class ConfigurationError(GenerationFailed):
    """Required configuration (the API key) is missing."""


class NoModelsAvailableError(GenerationFailed):
    """Discovery succeeded but no model supports generateContent."""


class ModelNotFoundError(GenerationFailed):
    """The operator-configured model was rejected by the API."""


class RetryableUpstreamError(GenerationFailed):
    """Rate limiting or transient unavailability, still failing on the last attempt."""


class UpstreamError(GenerationFailed):
    """Any other non-success answer from the API."""


class EmptyResponseError(GenerationFailed):
    """The API answered 2xx but the body carried no text."""


class RetriesExhaustedError(GenerationFailed):
    """The attempt budget ran out without a decisive answer."""
