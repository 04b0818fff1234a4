"""Resolution and caching of the Gemini model identifier."""

import asyncio

import structlog

from pdfchat.modules.generation.errors import NoModelsAvailableError
from pdfchat.modules.generation.gemini_client import GeminiClient

logger = structlog.get_logger()

MODEL_PREFIX = "models/"

# Highest priority first
PREFERRED_MODELS = (
    "models/gemini-2.5-flash",
    "models/gemini-2.0-flash",
    "models/gemini-1.5-flash-8b",
    "models/gemini-1.5-flash",
    "models/gemini-1.5-flash-latest",
    "models/gemini-1.5-pro",
    "models/gemini-1.5-pro-latest",
    "models/gemini-pro",
)


def normalize_model_name(model: str) -> str:
    """Ensure the ``models/`` namespace prefix."""
    model = model.strip()
    return model if model.startswith(MODEL_PREFIX) else f"{MODEL_PREFIX}{model}"


def select_model(available: list[str], preferred: tuple[str, ...] = PREFERRED_MODELS) -> str:
    """Pick the first preferred model present, else the first available one."""
    for model in preferred:
        if model in available:
            return model
    return available[0]


class ModelResolver:
    """
    Owns the process-wide cached model identifier.

    The cache starts empty, is filled by the operator override or by
    discovery, and is emptied only through ``invalidate()``. One instance
    is shared by every caller of the generator.
    """

    def __init__(
        self,
        client: GeminiClient,
        override: str | None = None,
        preferred: tuple[str, ...] = PREFERRED_MODELS,
    ):
        self._client = client
        self._override = override or None
        self._preferred = preferred
        self._cached: str | None = None
        self._lock = asyncio.Lock()

    @property
    def override(self) -> str | None:
        return self._override

    @property
    def cached(self) -> str | None:
        return self._cached

    async def resolve(self) -> str:
        """Return the model to call, discovering it on a cold cache."""
        if self._cached:
            return self._cached

        async with self._lock:
            # Another caller may have filled the cache while we waited
            if self._cached:
                return self._cached

            if self._override:
                self._cached = normalize_model_name(self._override)
                logger.info("Using configured Gemini model", model=self._cached, source="override")
                return self._cached

            available = await self._client.list_generation_models()
            if not available:
                raise NoModelsAvailableError(
                    "No Gemini models available that support generateContent"
                )

            self._cached = select_model(available, self._preferred)
            logger.info(
                "Resolved Gemini model",
                model=self._cached,
                source="discovery",
                candidates=len(available),
            )
            return self._cached

    def invalidate(self) -> None:
        """Forget the cached model so the next resolve() rediscovers."""
        if self._cached:
            logger.warning("Invalidating cached Gemini model", model=self._cached)
        self._cached = None
