"""GitHub API rate limit header parsing."""

from __future__ import annotations

import time
from collections.abc import Mapping


def _header_int(headers: Mapping[str, str], name: str) -> int | None:
    # httpx.Headers is case-insensitive, plain dicts are not
    lowered = {k.lower(): v for k, v in headers.items()}
    value = lowered.get(name.lower())
    if value is None:
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def suggested_delay_ms(
    headers: Mapping[str, str] | None, now: float | None = None
) -> int | None:
    """Return how long to wait (ms) before retrying a rate-limited request.

    ``Retry-After`` (seconds) wins over ``X-RateLimit-Reset`` (unix time).
    Returns ``None`` when neither header is usable.
    """
    if not headers:
        return None
    retry_after = _header_int(headers, "Retry-After")
    if retry_after is not None:
        return max(0, retry_after) * 1000
    reset_at = _header_int(headers, "X-RateLimit-Reset")
    if reset_at is not None:
        now_seconds = int(time.time() if now is None else now)
        return max(0, (reset_at - now_seconds) * 1000)
    return None
