"""In-process request latency and generation outcome counters."""

import time
from collections import Counter, defaultdict
from datetime import datetime
from functools import wraps
from typing import Any, Callable

import structlog

logger = structlog.get_logger()

MAX_SAMPLES = 10000

_latency_samples: dict[str, list[float]] = defaultdict(list)
_generation_outcomes: Counter = Counter()
_since = datetime.utcnow()


def track_latency(endpoint: str) -> Callable:
    """
    Decorator recording how long an async endpoint takes.

    Usage:
        @track_latency("send_message")
        async def send_message(...):
            ...
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            start = time.perf_counter()
            try:
                return await func(*args, **kwargs)
            finally:
                record_latency(endpoint, (time.perf_counter() - start) * 1000)

        return wrapper
    return decorator


def record_latency(endpoint: str, latency_ms: float) -> None:
    samples = _latency_samples[endpoint]
    samples.append(latency_ms)
    if len(samples) > MAX_SAMPLES:
        del samples[:-MAX_SAMPLES]

    logger.debug("Latency recorded", endpoint=endpoint, latency_ms=round(latency_ms, 2))


def record_generation(outcome: str) -> None:
    """Count a generation result: "success" or the failure class name."""
    _generation_outcomes[outcome] += 1


def percentile(samples: list[float], pct: float) -> float:
    if not samples:
        return 0.0

    ordered = sorted(samples)
    index = int(len(ordered) * pct / 100)
    return ordered[min(index, len(ordered) - 1)]


def _summarize(samples: list[float]) -> dict[str, float]:
    return {
        "count": len(samples),
        "p50": round(percentile(samples, 50), 2),
        "p90": round(percentile(samples, 90), 2),
        "p99": round(percentile(samples, 99), 2),
        "avg": round(sum(samples) / len(samples), 2) if samples else 0.0,
    }


def get_metrics_snapshot() -> dict[str, Any]:
    all_samples = [s for samples in _latency_samples.values() for s in samples]

    return {
        "latency": _summarize(all_samples),
        "by_endpoint": {
            endpoint: _summarize(samples)
            for endpoint, samples in _latency_samples.items()
            if samples
        },
        "generation": dict(_generation_outcomes),
        "since": _since.isoformat(),
    }


def reset_metrics() -> None:
    global _since
    _latency_samples.clear()
    _generation_outcomes.clear()
    _since = datetime.utcnow()
    logger.info("Metrics reset")
