"""Metrics endpoints."""

import structlog
from fastapi import APIRouter

from pdfchat.models.schemas import LatencyMetrics, MetricsResponse
from pdfchat.modules.observability import get_metrics_snapshot, reset_metrics

router = APIRouter()
logger = structlog.get_logger()


@router.get("", response_model=MetricsResponse)
async def get_metrics() -> MetricsResponse:
    """
    Get system metrics including:
    - Request counts by endpoint
    - Latency percentiles
    - Generation outcomes (successes and failure types)
    """
    snapshot = get_metrics_snapshot()
    overall = snapshot["latency"]

    latency = None
    if overall["count"] > 0:
        latency = LatencyMetrics(
            count=overall["count"],
            p50_ms=overall["p50"],
            p90_ms=overall["p90"],
            p99_ms=overall["p99"],
            avg_ms=overall["avg"],
        )

    return MetricsResponse(
        requests_total=overall["count"],
        requests_by_endpoint={
            endpoint: stats["count"] for endpoint, stats in snapshot["by_endpoint"].items()
        },
        latency=latency,
        generation_outcomes=snapshot["generation"],
        since=snapshot["since"],
    )


@router.post("/reset")
async def reset() -> dict[str, str]:
    reset_metrics()
    return {"status": "reset"}
