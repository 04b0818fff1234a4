"""Retry delay computation for transient Gemini failures."""

import math
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime


def parse_retry_after(value: str | None, now: datetime | None = None) -> float | None:
    """
    Parse a ``Retry-After`` header into seconds.

    Accepts either a number of seconds or an HTTP date. A date in the past
    yields 0. Returns None when the header is absent or unparseable.
    """
    if value is None or not value.strip():
        return None

    try:
        seconds = float(value)
    except ValueError:
        seconds = None

    if seconds is not None:
        if math.isnan(seconds) or math.isinf(seconds):
            return None
        return max(seconds, 0.0)

    try:
        retry_at = parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        return None
    if retry_at is None:
        return None

    if retry_at.tzinfo is None:
        retry_at = retry_at.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)

    return max((retry_at - now).total_seconds(), 0.0)


def compute_backoff(
    attempt: int,
    retry_after: float | None,
    base_delay: float = 1.0,
    max_delay: float = 10.0,
) -> float:
    """
    Seconds to wait before the attempt after ``attempt`` (0-based).

    A positive server hint wins; otherwise the delay doubles per attempt
    from ``base_delay``. Either way the result is capped at ``max_delay``.
    """
    if retry_after:
        delay = retry_after
    else:
        delay = base_delay * 2 ** attempt

    return min(delay, max_delay)
