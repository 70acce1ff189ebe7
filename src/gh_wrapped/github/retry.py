"""Bounded exponential-backoff retry for upstream calls."""

from __future__ import annotations

import asyncio
import logging
import math
import random
from collections.abc import Awaitable, Callable
from typing import TypeVar

from .errors import ErrorKind, GitHubAPIError, classify_exception

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_RETRIES = 3
INITIAL_RETRY_DELAY_MS = 1000
MAX_JITTER_MS = 1000


def backoff_delay_ms(attempt: int, suggested_ms: int | None = None) -> float:
    """Delay before the retry following ``attempt`` (0-indexed)."""
    delay = INITIAL_RETRY_DELAY_MS * 2**attempt + random.uniform(0, MAX_JITTER_MS)
    if suggested_ms is not None:
        return min(suggested_ms, delay)
    return delay


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    operation_name: str,
    retries: int = MAX_RETRIES,
    use_headers: bool = True,
) -> T:
    """Await ``operation``, retrying rate limit and server errors.

    Other error kinds are raised on the first failure. Once the retries are
    used up the last classified error is raised.
    """
    last_error: GitHubAPIError | None = None
    for attempt in range(retries + 1):
        try:
            return await operation()
        except Exception as exc:
            error = classify_exception(exc, operation_name, use_headers=use_headers)
            last_error = error
            if not error.kind.retryable or attempt >= retries:
                if error is exc:
                    raise
                raise error from exc
            delay = backoff_delay_ms(attempt, error.retry_after_ms)
            logger.warning(
                "%s failed (attempt %d/%d), retrying in %ds",
                operation_name,
                attempt + 1,
                retries + 1,
                math.ceil(delay / 1000),
            )
            await asyncio.sleep(delay / 1000)
    raise last_error or GitHubAPIError(
        f"Failed to {operation_name} after {retries + 1} attempts",
        None,
        ErrorKind.UNKNOWN,
    )
