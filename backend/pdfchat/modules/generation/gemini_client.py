"""HTTP client for the Gemini generative-language REST API."""

from typing import Any

import httpx
import structlog

from pdfchat.modules.generation.errors import UpstreamError

logger = structlog.get_logger()

GENERATION_METHOD = "generateContent"


class GeminiClient:
    """
    Thin async wrapper over the two endpoints the generator needs.

    The API key travels as the ``key`` query parameter on every request.
    Pass ``transport`` to substitute an ``httpx.MockTransport`` in tests.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._http = httpx.AsyncClient(
            base_url=base_url.rstrip("/") + "/",
            params={"key": api_key},
            timeout=timeout,
            transport=transport,
        )

    async def list_models(self) -> list[dict[str, Any]]:
        """Return every model the API reports, following pagination."""
        models: list[dict[str, Any]] = []
        page_token: str | None = None

        while True:
            params = {"pageToken": page_token} if page_token else None
            response = await self._send("GET", "models", params=params)

            if not response.is_success:
                raise UpstreamError(
                    f"Failed to list Gemini models: {response.status_code} - {response.text}",
                    status_code=response.status_code,
                )

            try:
                data = response.json()
            except ValueError:
                data = None
            if not isinstance(data, dict):
                raise UpstreamError(
                    "Failed to list Gemini models: malformed response",
                    status_code=response.status_code,
                )

            models.extend(data.get("models") or [])
            page_token = data.get("nextPageToken")
            if not page_token:
                break

        logger.debug("Listed Gemini models", count=len(models))
        return models

    async def list_generation_models(self) -> list[str]:
        """Names of models supporting generateContent, in API order."""
        models = await self.list_models()
        return [
            model["name"]
            for model in models
            if GENERATION_METHOD in (model.get("supportedGenerationMethods") or [])
        ]

    async def generate_content(self, model_name: str, prompt: str) -> httpx.Response:
        """
        POST a single-turn user prompt to ``<model_name>:generateContent``.

        The raw response is returned unread for classification by the caller.
        """
        body = {
            "contents": [
                {
                    "role": "user",
                    "parts": [{"text": prompt}],
                },
            ],
        }
        return await self._send("POST", f"{model_name}:{GENERATION_METHOD}", json=body)

    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Issue a request, surfacing network failures and timeouts as ``UpstreamError``."""
        try:
            return await self._http.request(method, url, **kwargs)
        except httpx.TransportError as e:
            logger.warning("Gemini request failed", method=method, error_type=type(e).__name__)
            raise UpstreamError(f"Gemini API request failed: {type(e).__name__}: {e}") from e

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "GeminiClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()
