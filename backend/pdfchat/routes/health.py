"""Health check endpoints."""

import time
from datetime import datetime

import structlog
from fastapi import APIRouter, Depends

from pdfchat import __version__
from pdfchat.config import get_settings
from pdfchat.dependencies import get_generator
from pdfchat.models.schemas import ComponentHealth, HealthResponse, HealthStatus
from pdfchat.modules.generation import ResponseGenerator

router = APIRouter()
logger = structlog.get_logger()


async def check_filesystem() -> ComponentHealth:
    """Check the data directory is writable."""
    settings = get_settings()
    start = time.perf_counter()

    try:
        settings.data_dir.mkdir(parents=True, exist_ok=True)
        test_file = settings.data_dir / ".health_check"
        test_file.write_text("ok")
        test_file.unlink()

        latency = (time.perf_counter() - start) * 1000
        return ComponentHealth(
            name="filesystem",
            status=HealthStatus.HEALTHY,
            latency_ms=round(latency, 2),
        )
    except OSError as e:
        latency = (time.perf_counter() - start) * 1000
        return ComponentHealth(
            name="filesystem",
            status=HealthStatus.UNHEALTHY,
            latency_ms=round(latency, 2),
            message=str(e),
        )


def check_generation(generator: ResponseGenerator) -> ComponentHealth:
    """
    Report the generator's model state without calling Gemini.

    Degraded until a model has been resolved, since the first question
    will pay for discovery.
    """
    resolver = generator.resolver
    details = {
        "override": resolver.override,
        "cached_model": resolver.cached,
        "max_attempts": generator.max_attempts,
    }

    if resolver.cached is None and resolver.override is None:
        return ComponentHealth(
            name="gemini",
            status=HealthStatus.DEGRADED,
            message="Model not resolved yet",
            details=details,
        )

    return ComponentHealth(name="gemini", status=HealthStatus.HEALTHY, details=details)


@router.get("/health", response_model=HealthResponse)
async def health_check(generator: ResponseGenerator = Depends(get_generator)) -> HealthResponse:
    """
    Comprehensive health check endpoint.

    Returns status of all system components including:
    - Filesystem access
    - Gemini model resolution state
    """
    settings = get_settings()

    components = [
        await check_filesystem(),
        check_generation(generator),
    ]

    statuses = [c.status for c in components]
    if all(s == HealthStatus.HEALTHY for s in statuses):
        overall = HealthStatus.HEALTHY
    elif any(s == HealthStatus.UNHEALTHY for s in statuses):
        overall = HealthStatus.UNHEALTHY
    else:
        overall = HealthStatus.DEGRADED

    response = HealthResponse(
        status=overall,
        version=__version__,
        environment=settings.app_env,
        timestamp=datetime.utcnow(),
        components=components,
    )

    logger.info("Health check completed", status=overall.value)
    return response


@router.get("/health/live")
async def liveness() -> dict[str, str]:
    """Answers as long as the event loop is serving requests."""
    return {"status": "ok"}


@router.get("/health/ready")
async def readiness(generator: ResponseGenerator = Depends(get_generator)) -> dict[str, str | None]:
    """
    Ready once uploads can be stored.

    An unresolved model does not block readiness: the first question
    resolves it.
    """
    fs_check = await check_filesystem()
    if fs_check.status == HealthStatus.UNHEALTHY:
        return {"status": "not_ready", "reason": f"data directory not writable: {fs_check.message}"}

    return {"status": "ready", "model": generator.resolver.cached or generator.resolver.override}
